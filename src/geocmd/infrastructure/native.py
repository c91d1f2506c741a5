"""Engine-native commands — the executable, undoable units kept in history.

Construction is pure: a command only validates and stores its inputs.
:meth:`EngineCommand.execute` mutates the layer's dataset and remembers
enough state for :meth:`EngineCommand.undo` to restore it exactly.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from geocmd.domain.changes import (
    ChangeSpec,
    FieldChange,
    LatChange,
    LonChange,
    MembersChange,
    NodesChange,
    PosChange,
    TagsChange,
)
from geocmd.domain.position import LatLon
from geocmd.domain.primitives import Group, Member, Path, Point, Primitive
from geocmd.domain.types import DEPENDENCY_ORDER
from geocmd.errors import InvalidArgumentError

if TYPE_CHECKING:
    from geocmd.infrastructure.dataset import DataSet
    from geocmd.infrastructure.layers import DataLayer

logger = logging.getLogger(__name__)


def dependency_sorted(primitives: Iterable[Primitive], *, reverse: bool = False) -> list[Primitive]:
    """Points before paths before groups (or the opposite with *reverse*).

    Within a kind, primitives are ordered by id so execution is deterministic.
    """
    rank = {t: i for i, t in enumerate(DEPENDENCY_ORDER)}
    ordered = sorted(primitives, key=lambda p: (rank[p.type], abs(p.id)))
    return ordered[::-1] if reverse else ordered


def _check_primitives(primitives: Iterable[Primitive]) -> frozenset[Primitive]:
    items = list(primitives)
    for p in items:
        if not isinstance(p, Primitive):
            raise InvalidArgumentError("expected a primitive, got {0}", p)
    return frozenset(items)


class EngineCommand(ABC):
    """An executable, undoable modification of one data layer."""

    def __init__(self, layer: DataLayer) -> None:
        self._layer = layer

    @property
    def layer(self) -> DataLayer:
        return self._layer

    @property
    def data(self) -> DataSet:
        return self._layer.data

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable summary shown in history listings."""

    @property
    @abstractmethod
    def participating(self) -> frozenset[Primitive]:
        """Primitives this command reads or modifies."""

    @abstractmethod
    def execute(self) -> None: ...

    @abstractmethod
    def undo(self) -> None: ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.description!r} layer={self._layer.name!r}>"


class AddPrimitivesCommand(EngineCommand):
    """Adds primitives to a layer. Primitives already present are left alone."""

    def __init__(self, layer: DataLayer, primitives: Iterable[Primitive]) -> None:
        super().__init__(layer)
        self._primitives = _check_primitives(primitives)
        self._added: list[Primitive] = []

    @property
    def description(self) -> str:
        return f"Add {len(self._primitives)} primitives"

    @property
    def participating(self) -> frozenset[Primitive]:
        return self._primitives

    def execute(self) -> None:
        self._added = []
        for p in dependency_sorted(self._primitives):
            if p in self.data:
                continue
            self.data.add_primitive(p)
            self._added.append(p)
        logger.debug("Added %d primitives to layer %s", len(self._added), self._layer.name)

    def undo(self) -> None:
        for p in reversed(self._added):
            self.data.remove_primitive(p)
        self._added = []


class DeletePrimitivesCommand(EngineCommand):
    """Deletes primitives from a layer.

    With *also_delete_nodes_in_way*, untagged points of deleted paths that
    nothing else refers to are deleted as well. With *silent*, references
    from surviving paths and groups are removed; otherwise deleting a
    referenced primitive raises :class:`InvalidArgumentError` on execute.
    """

    def __init__(
        self,
        layer: DataLayer,
        primitives: Iterable[Primitive],
        *,
        also_delete_nodes_in_way: bool = False,
        silent: bool = False,
    ) -> None:
        super().__init__(layer)
        self._primitives = _check_primitives(primitives)
        self._also_delete_nodes_in_way = also_delete_nodes_in_way
        self._silent = silent
        self._deleted: list[Primitive] = []
        self._saved_paths: dict[Path, list[Point]] = {}
        self._saved_groups: dict[Group, list[Member]] = {}

    @classmethod
    def delete(
        cls,
        layer: DataLayer,
        primitives: Iterable[Primitive],
        also_delete_nodes_in_way: bool = True,
        silent: bool = True,
    ) -> DeletePrimitivesCommand:
        """Factory mirroring the engine's default deletion semantics."""
        return cls(
            layer,
            primitives,
            also_delete_nodes_in_way=also_delete_nodes_in_way,
            silent=silent,
        )

    @property
    def description(self) -> str:
        return f"Delete {len(self._primitives)} primitives"

    @property
    def participating(self) -> frozenset[Primitive]:
        return self._primitives

    def _doomed(self) -> set[Primitive]:
        ds = self.data
        doomed = {p for p in self._primitives if p in ds}
        if self._also_delete_nodes_in_way:
            for path in [p for p in doomed if isinstance(p, Path)]:
                for node in path.nodes:
                    if node in doomed or node not in ds or node.is_tagged:
                        continue
                    if all(r in doomed for r in ds.referrers(node)):
                        doomed.add(node)
        return doomed

    def execute(self) -> None:
        ds = self.data
        doomed = self._doomed()
        referrers = {r for p in doomed for r in ds.referrers(p) if r not in doomed}
        if referrers and not self._silent:
            raise InvalidArgumentError(
                "Cannot delete {0}: still referred to by {1}",
                sorted(doomed, key=lambda p: p.id),
                sorted(referrers, key=lambda p: p.id),
            )

        self._saved_paths = {}
        self._saved_groups = {}
        for r in referrers:
            if isinstance(r, Path):
                self._saved_paths[r] = list(r.nodes)
                r.nodes = [n for n in r.nodes if n not in doomed]
            elif isinstance(r, Group):
                self._saved_groups[r] = list(r.members)
                r.members = [m for m in r.members if m.primitive not in doomed]
            ds.refresh_references(r)

        self._deleted = dependency_sorted(doomed, reverse=True)
        for p in self._deleted:
            ds.remove_primitive(p)
        logger.debug(
            "Deleted %d primitives from layer %s (%d referrers updated)",
            len(self._deleted),
            self._layer.name,
            len(referrers),
        )

    def undo(self) -> None:
        ds = self.data
        for p in reversed(self._deleted):
            ds.add_primitive(p)
        for path, nodes in self._saved_paths.items():
            path.nodes = nodes
            ds.refresh_references(path)
        for group, members in self._saved_groups.items():
            group.members = members
            ds.refresh_references(group)
        self._deleted = []
        self._saved_paths = {}
        self._saved_groups = {}


class _Snapshot:
    """Mutable state of one primitive captured before a change."""

    __slots__ = ("members", "nodes", "pos", "tags")

    def __init__(self, primitive: Primitive) -> None:
        self.tags = dict(primitive.tags)
        self.pos = primitive.pos if isinstance(primitive, Point) else None
        self.nodes = list(primitive.nodes) if isinstance(primitive, Path) else None
        self.members = list(primitive.members) if isinstance(primitive, Group) else None

    def restore(self, primitive: Primitive) -> None:
        primitive.tags = self.tags
        if isinstance(primitive, Point):
            primitive.pos = self.pos
        elif isinstance(primitive, Path) and self.nodes is not None:
            primitive.nodes = self.nodes
        elif isinstance(primitive, Group) and self.members is not None:
            primitive.members = self.members


class ChangePrimitivesCommand(EngineCommand):
    """Applies one :class:`ChangeSpec` to every target, field change by field change.

    Each field change only affects the primitive kinds it applies to. Field
    changes run in spec order, so a later position change overrides an
    earlier one.
    """

    def __init__(self, layer: DataLayer, primitives: Iterable[Primitive], spec: ChangeSpec) -> None:
        super().__init__(layer)
        if not isinstance(spec, ChangeSpec):
            raise InvalidArgumentError("spec: expected a ChangeSpec, got {0}", spec)
        self._primitives = _check_primitives(primitives)
        self._spec = spec
        self._nodes = _normalize_nodes(spec)
        self._members = _normalize_members(spec)
        self._snapshots: dict[Primitive, _Snapshot] = {}

    @property
    def spec(self) -> ChangeSpec:
        return self._spec

    @property
    def description(self) -> str:
        fields = ", ".join(self._spec.field_names) or "nothing"
        return f"Change {len(self._primitives)} primitives ({fields})"

    @property
    def participating(self) -> frozenset[Primitive]:
        return self._primitives

    def execute(self) -> None:
        self._snapshots = {}
        for p in dependency_sorted(self._primitives):
            self._snapshots[p] = _Snapshot(p)
            for i, change in enumerate(self._spec):
                if p.type in change.applies_to:
                    self._apply(p, i, change)
            self.data.refresh_references(p)
        logger.debug("Executed %s on layer %s", self.description, self._layer.name)

    def undo(self) -> None:
        for p, snapshot in self._snapshots.items():
            snapshot.restore(p)
            self.data.refresh_references(p)
        self._snapshots = {}

    def _apply(self, primitive: Primitive, index: int, change: FieldChange) -> None:
        match change:
            case LatChange(value=value):
                assert isinstance(primitive, Point)
                pos = primitive.pos
                primitive.pos = pos.with_lat(value) if pos else LatLon(lat=value, lon=0.0)
            case LonChange(value=value):
                assert isinstance(primitive, Point)
                pos = primitive.pos
                primitive.pos = pos.with_lon(value) if pos else LatLon(lat=0.0, lon=value)
            case PosChange(pos=pos):
                assert isinstance(primitive, Point)
                primitive.pos = pos
            case TagsChange(tags=tags):
                merged = dict(primitive.tags)
                for key, value in tags.items():
                    if value is None:
                        merged.pop(key, None)
                    else:
                        merged[key] = value
                primitive.tags = merged
            case NodesChange():
                assert isinstance(primitive, Path)
                primitive.nodes = list(self._nodes[index])
            case MembersChange():
                assert isinstance(primitive, Group)
                primitive.members = list(self._members[index])


def _normalize_nodes(spec: ChangeSpec) -> dict[int, tuple[Point, ...]]:
    result: dict[int, tuple[Point, ...]] = {}
    for i, change in enumerate(spec):
        if not isinstance(change, NodesChange):
            continue
        nodes = change.nodes
        if nodes is None or isinstance(nodes, (str, bytes)) or not isinstance(nodes, Sequence):
            raise InvalidArgumentError("nodes: expected a list of points, got {0}", nodes)
        for n in nodes:
            if not isinstance(n, Point):
                raise InvalidArgumentError("nodes: expected a point, got {0}", n)
        result[i] = tuple(nodes)
    return result


def _normalize_members(spec: ChangeSpec) -> dict[int, tuple[Member, ...]]:
    result: dict[int, tuple[Member, ...]] = {}
    for i, change in enumerate(spec):
        if not isinstance(change, MembersChange):
            continue
        members = change.members
        if (
            members is None
            or isinstance(members, (str, bytes))
            or not isinstance(members, Sequence)
        ):
            raise InvalidArgumentError("members: expected a list of members, got {0}", members)
        normalized: list[Member] = []
        for m in members:
            if isinstance(m, Member):
                normalized.append(m)
            elif isinstance(m, Primitive):
                normalized.append(Member(m))
            else:
                raise InvalidArgumentError("members: expected a member or primitive, got {0}", m)
        result[i] = tuple(normalized)
    return result


class SequenceCommand(EngineCommand):
    """Runs child commands in order as one history entry.

    If a child fails, the children already executed are undone before the
    error propagates.
    """

    def __init__(self, description: str, commands: Sequence[EngineCommand]) -> None:
        if not commands:
            raise InvalidArgumentError("commands: expected at least one command")
        super().__init__(commands[0].layer)
        self._description = description
        self._commands = tuple(commands)

    @property
    def description(self) -> str:
        return self._description

    @property
    def commands(self) -> tuple[EngineCommand, ...]:
        return self._commands

    @property
    def participating(self) -> frozenset[Primitive]:
        result: set[Primitive] = set()
        for c in self._commands:
            result |= c.participating
        return frozenset(result)

    def execute(self) -> None:
        done: list[EngineCommand] = []
        try:
            for c in self._commands:
                c.execute()
                done.append(c)
        except Exception:
            for c in reversed(done):
                c.undo()
            raise

    def undo(self) -> None:
        for c in reversed(self._commands):
            c.undo()
