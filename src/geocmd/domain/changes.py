"""Field-level change instructions and the immutable ChangeSpec sequence.

A :class:`ChangeSpec` is built once and applied identically to every target
of a change command. Each entry declares which primitive kinds it applies
to; the engine skips targets of other kinds.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

from geocmd.domain.position import LatLon
from geocmd.domain.types import PrimitiveType

_ALL_TYPES = frozenset(PrimitiveType)


@dataclass(frozen=True)
class FieldChange:
    """Base class of all field-level changes."""

    field_name: ClassVar[str]
    applies_to: ClassVar[frozenset[PrimitiveType]] = _ALL_TYPES


@dataclass(frozen=True)
class LatChange(FieldChange):
    field_name: ClassVar[str] = "lat"
    applies_to: ClassVar[frozenset[PrimitiveType]] = frozenset({PrimitiveType.POINT})

    value: float


@dataclass(frozen=True)
class LonChange(FieldChange):
    field_name: ClassVar[str] = "lon"
    applies_to: ClassVar[frozenset[PrimitiveType]] = frozenset({PrimitiveType.POINT})

    value: float


@dataclass(frozen=True)
class PosChange(FieldChange):
    field_name: ClassVar[str] = "pos"
    applies_to: ClassVar[frozenset[PrimitiveType]] = frozenset({PrimitiveType.POINT})

    pos: LatLon


@dataclass(frozen=True)
class TagsChange(FieldChange):
    """Tag updates merged into the target's tags. A None value removes the key."""

    field_name: ClassVar[str] = "tags"

    tags: Mapping[str, str | None]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.tags.items(), key=lambda kv: kv[0])))


@dataclass(frozen=True)
class NodesChange(FieldChange):
    field_name: ClassVar[str] = "nodes"
    applies_to: ClassVar[frozenset[PrimitiveType]] = frozenset({PrimitiveType.PATH})

    nodes: Any


@dataclass(frozen=True)
class MembersChange(FieldChange):
    field_name: ClassVar[str] = "members"
    applies_to: ClassVar[frozenset[PrimitiveType]] = frozenset({PrimitiveType.GROUP})

    members: Any


@dataclass(frozen=True)
class ChangeSpec:
    """Ordered, immutable sequence of field changes."""

    changes: tuple[FieldChange, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "changes", tuple(self.changes))

    def __iter__(self) -> Iterator[FieldChange]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def __bool__(self) -> bool:
        return bool(self.changes)

    @property
    def field_names(self) -> list[str]:
        return [c.field_name for c in self.changes]

    def of_type[T: FieldChange](self, change_type: type[T]) -> list[T]:
        """All entries of *change_type*, in order."""
        return [c for c in self.changes if isinstance(c, change_type)]

    def applies_to(self, primitive_type: PrimitiveType) -> bool:
        """True if at least one entry affects primitives of *primitive_type*."""
        return any(primitive_type in c.applies_to for c in self.changes)
