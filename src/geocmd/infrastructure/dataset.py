"""DataSet — the primitives of one data layer plus a NetworkX reference graph.

The graph has one node per contained primitive and an edge ``parent -> child``
for every reference (path -> point, group -> member). It answers "who refers
to this primitive?" without scanning every path and group.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

import networkx as nx

from geocmd.domain.primitives import Group, Path, Point, Primitive

logger = logging.getLogger(__name__)

type _RefGraph = nx.DiGraph


class DataSet:
    """Container of the primitives held by a :class:`DataLayer`."""

    def __init__(self, primitives: Iterable[Primitive] = ()) -> None:
        self._graph: _RefGraph = nx.DiGraph()
        self._selection: set[Primitive] = set()
        for p in primitives:
            self.add_primitive(p)

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def __contains__(self, primitive: object) -> bool:
        return isinstance(primitive, Primitive) and self._graph.has_node(primitive)

    def __iter__(self) -> Iterator[Primitive]:
        return iter(list(self._graph.nodes))

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def add_primitive(self, primitive: Primitive) -> None:
        """Add *primitive* and register its outgoing references."""
        self._graph.add_node(primitive)
        self.refresh_references(primitive)

    def remove_primitive(self, primitive: Primitive) -> None:
        """Remove *primitive*. References pointing to it are dropped from the graph."""
        if primitive not in self:
            return
        self._graph.remove_node(primitive)
        self._selection.discard(primitive)

    def refresh_references(self, primitive: Primitive) -> None:
        """Re-read the outgoing references of *primitive* after it changed."""
        if primitive not in self:
            return
        self._graph.remove_edges_from(list(self._graph.out_edges(primitive)))
        for child in _children(primitive):
            # Children outside the dataset are tracked once they are added.
            if child in self:
                self._graph.add_edge(primitive, child)
        for parent in [p for p in self._graph.nodes if p is not primitive]:
            if any(c is primitive for c in _children(parent)):
                self._graph.add_edge(parent, primitive)

    def referrers(self, primitive: Primitive) -> list[Primitive]:
        """Contained primitives referring to *primitive*."""
        if primitive not in self:
            return []
        return list(self._graph.predecessors(primitive))

    def is_referred(self, primitive: Primitive) -> bool:
        return bool(self.referrers(primitive))

    # ------------------------------------------------------------------
    # Typed views
    # ------------------------------------------------------------------

    @property
    def points(self) -> list[Point]:
        return [p for p in self._graph.nodes if isinstance(p, Point)]

    @property
    def paths(self) -> list[Path]:
        return [p for p in self._graph.nodes if isinstance(p, Path)]

    @property
    def groups(self) -> list[Group]:
        return [p for p in self._graph.nodes if isinstance(p, Group)]

    def get(self, primitive_id: int, primitive_type: type[Primitive]) -> Primitive | None:
        """Look up a contained primitive by id and class."""
        for p in self._graph.nodes:
            if isinstance(p, primitive_type) and p.id == primitive_id:
                return p
        return None

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def selection(self) -> frozenset[Primitive]:
        return frozenset(self._selection)

    @property
    def selected_paths(self) -> list[Path]:
        return [p for p in self._selection if isinstance(p, Path)]

    def set_selected(self, *primitives: Primitive) -> None:
        """Replace the selection. Primitives outside the dataset are ignored."""
        self._selection = {p for p in primitives if p in self}

    def clear_selection(self) -> None:
        self._selection.clear()

    def summary(self) -> dict[str, int]:
        """Primitive counts by kind."""
        return {
            "points": len(self.points),
            "paths": len(self.paths),
            "groups": len(self.groups),
        }


def _children(primitive: Primitive) -> list[Primitive]:
    if isinstance(primitive, Path):
        return list(primitive.nodes)
    if isinstance(primitive, Group):
        return primitive.member_primitives
    return []
