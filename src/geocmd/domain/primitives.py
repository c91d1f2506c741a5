"""Editable primitives: points, paths, and groups.

Primitives are identified by reference, never by value. Two points with the
same id, tags, and position are still two different objects, so all
primitives hash by identity and can be collected in sets.

Ids follow the usual convention for editable geodata: objects created
locally get negative ids, objects loaded from elsewhere carry positive ones.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, ClassVar

from geocmd.domain.position import LatLon
from geocmd.domain.types import PrimitiveType

_new_ids = itertools.count(-1, -1)


def next_new_id() -> int:
    """Allocate the next negative id for a locally created primitive."""
    return next(_new_ids)


@dataclass(eq=False)
class Primitive:
    """Base class of all editable objects."""

    type: ClassVar[PrimitiveType]

    id: int = field(default_factory=next_new_id, kw_only=True)
    tags: dict[str, str] = field(default_factory=dict, kw_only=True)

    @property
    def is_new(self) -> bool:
        return self.id < 0

    @property
    def is_point(self) -> bool:
        return self.type is PrimitiveType.POINT

    @property
    def is_path(self) -> bool:
        return self.type is PrimitiveType.PATH

    @property
    def is_group(self) -> bool:
        return self.type is PrimitiveType.GROUP

    @property
    def is_tagged(self) -> bool:
        return bool(self.tags)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"


@dataclass(eq=False, repr=False)
class Point(Primitive):
    """A single location. ``pos`` is None for points not yet placed."""

    type: ClassVar[PrimitiveType] = PrimitiveType.POINT

    pos: LatLon | None = None

    @property
    def lat(self) -> float | None:
        return self.pos.lat if self.pos is not None else None

    @property
    def lon(self) -> float | None:
        return self.pos.lon if self.pos is not None else None


@dataclass(eq=False, repr=False)
class Path(Primitive):
    """An ordered list of points."""

    type: ClassVar[PrimitiveType] = PrimitiveType.PATH

    nodes: list[Point] = field(default_factory=list)

    @property
    def first_node(self) -> Point | None:
        return self.nodes[0] if self.nodes else None

    @property
    def last_node(self) -> Point | None:
        return self.nodes[-1] if self.nodes else None

    @property
    def is_closed(self) -> bool:
        return len(self.nodes) > 2 and self.nodes[0] is self.nodes[-1]


@dataclass(frozen=True, eq=False)
class Member:
    """One entry of a group: a primitive playing a (possibly empty) role."""

    primitive: Primitive
    role: str = ""

    def with_primitive(self, primitive: Primitive) -> Member:
        return Member(primitive, self.role)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Member):
            return NotImplemented
        return self.primitive is other.primitive and self.role == other.role

    def __hash__(self) -> int:
        return hash((id(self.primitive), self.role))


@dataclass(eq=False, repr=False)
class Group(Primitive):
    """An ordered list of members referring to points, paths, or groups."""

    type: ClassVar[PrimitiveType] = PrimitiveType.GROUP

    members: list[Member] = field(default_factory=list)

    @property
    def member_primitives(self) -> list[Primitive]:
        return [m.primitive for m in self.members]


def is_primitive(value: Any) -> bool:
    """True if *value* is a :class:`Point`, :class:`Path`, or :class:`Group`."""
    return isinstance(value, Primitive)
