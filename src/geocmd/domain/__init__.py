"""Domain layer — primitives, positions, and field-level changes.

This layer depends only on stdlib, pydantic, and :mod:`geocmd.errors`.
It must never import from edit, infrastructure, services, commands, or config.
"""
