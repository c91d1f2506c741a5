"""Combine worker — joins paths sharing end points into one path.

The worker never mutates anything. It returns the path that survives and a
:class:`SequenceCommand` which, once applied, rewrites that path's points
and tags, moves group memberships of the other paths onto it, and deletes
the other paths.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from geocmd.domain.changes import ChangeSpec, MembersChange, NodesChange, TagsChange
from geocmd.domain.primitives import Group, Path, Point
from geocmd.infrastructure.native import (
    ChangePrimitivesCommand,
    DeletePrimitivesCommand,
    EngineCommand,
    SequenceCommand,
)

if TYPE_CHECKING:
    from geocmd.infrastructure.layers import DataLayer

logger = logging.getLogger(__name__)

TAG_VALUE_SEPARATOR = ";"


def build_chain(paths: list[Path]) -> list[Point] | None:
    """Join *paths* end to end, reversing them where needed.

    Returns the point list of the joined path, or None if the paths do not
    form a single open chain.
    """
    if not paths or any(len(p.nodes) < 2 or p.is_closed for p in paths):
        return None
    chain = list(paths[0].nodes)
    remaining = list(paths[1:])
    while remaining:
        for candidate in remaining:
            nodes = candidate.nodes
            if nodes[0] is chain[-1]:
                chain.extend(nodes[1:])
            elif nodes[-1] is chain[-1]:
                chain.extend(reversed(nodes[:-1]))
            elif nodes[-1] is chain[0]:
                chain[:0] = nodes[:-1]
            elif nodes[0] is chain[0]:
                chain[:0] = list(reversed(nodes[1:]))
            else:
                continue
            remaining.remove(candidate)
            break
        else:
            return None
    return chain


def merge_tags(paths: Iterable[Path]) -> dict[str, str]:
    """Union of the tags of *paths*. Conflicting values are joined with ``;``."""
    values: dict[str, list[str]] = {}
    for path in paths:
        for key, value in path.tags.items():
            seen = values.setdefault(key, [])
            if value not in seen:
                seen.append(value)
    return {key: TAG_VALUE_SEPARATOR.join(vals) for key, vals in values.items()}


def _survivor(paths: list[Path]) -> Path:
    # Prefer the oldest existing path: smallest positive id, else the first new one.
    return min(paths, key=lambda p: (p.id < 0, abs(p.id)))


def combine_ways_worker(
    layer: DataLayer, paths: Iterable[Path]
) -> tuple[Path, SequenceCommand] | None:
    """Plan combining *paths* on *layer*.

    Returns None if fewer than two paths are given or if they cannot be
    joined into one chain.
    """
    ordered = sorted(set(paths), key=lambda p: (p.id < 0, abs(p.id)))
    if len(ordered) < 2:
        return None
    chain = build_chain(ordered)
    if chain is None:
        logger.info("Paths %s cannot be combined into a single chain", ordered)
        return None

    kept = _survivor(ordered)
    removed = [p for p in ordered if p is not kept]
    removed_set = set(removed)

    commands: list[EngineCommand] = [
        ChangePrimitivesCommand(
            layer,
            [kept],
            ChangeSpec((NodesChange(tuple(chain)), TagsChange(merge_tags(ordered)))),
        )
    ]

    groups: list[Group] = []
    for path in removed:
        for referrer in layer.data.referrers(path):
            if isinstance(referrer, Group) and referrer not in groups:
                groups.append(referrer)
    for group in groups:
        members = tuple(
            m.with_primitive(kept) if m.primitive in removed_set else m for m in group.members
        )
        commands.append(ChangePrimitivesCommand(layer, [group], ChangeSpec((MembersChange(members),))))

    commands.append(
        DeletePrimitivesCommand(layer, removed, also_delete_nodes_in_way=False, silent=True)
    )
    return kept, SequenceCommand(f"Combine {len(ordered)} ways", commands)
