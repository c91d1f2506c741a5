"""Normalize heterogeneous caller input into a set of primitives."""

from __future__ import annotations

from typing import Any

from geocmd.domain.primitives import Primitive, is_primitive
from geocmd.errors import InvalidArgumentError
from geocmd.util import is_collection, is_nothing


def flatten(*args: Any) -> frozenset[Primitive]:
    """Collect the distinct primitives found in *args*.

    Each argument may be a primitive, None (skipped), or a collection
    (list, tuple, set, iterator, ...) of such values, nested to any depth.
    Duplicates collapse by identity. Any other value raises
    :class:`InvalidArgumentError`.

    Examples:
        >>> from geocmd.domain.primitives import Point
        >>> a, b = Point(), Point()
        >>> flatten(a, [b, (a, None)], {b}) == {a, b}
        True
        >>> flatten()
        frozenset()
    """
    found: set[Primitive] = set()
    # Keeps visited containers alive so their ids stay unique.
    visited: dict[int, Any] = {}
    stack: list[Any] = [args]
    while stack:
        value = stack.pop()
        if is_nothing(value):
            continue
        if is_primitive(value):
            found.add(value)
        elif is_collection(value):
            if id(value) in visited:
                continue
            visited[id(value)] = value
            stack.extend(reversed(list(value)))
        else:
            raise InvalidArgumentError("Unexpected object to add as primitive, got {0}", value)
    return frozenset(found)
