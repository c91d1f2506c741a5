"""Primitive kinds."""

from __future__ import annotations

from enum import StrEnum


class PrimitiveType(StrEnum):
    """The three kinds of objects an editable layer holds."""

    POINT = "point"
    PATH = "path"
    GROUP = "group"


# Insertion order that keeps references valid: children before parents.
DEPENDENCY_ORDER: tuple[PrimitiveType, ...] = (
    PrimitiveType.POINT,
    PrimitiveType.PATH,
    PrimitiveType.GROUP,
)
