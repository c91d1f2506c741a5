"""Infrastructure layer — the in-memory editing engine.

Datasets with a NetworkX reference graph, engine commands, layers, and the
undo/redo handler. Depends on domain and third-party libs (NetworkX).
It must never import from edit, services, commands, or output.
"""
