"""Combine several paths into one, reusing the engine's combine worker."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from geocmd.domain.primitives import Path
from geocmd.edit.flatten import flatten
from geocmd.infrastructure.combine import combine_ways_worker
from geocmd.util import assert_that

if TYPE_CHECKING:
    from geocmd.infrastructure.layers import LayerManager

logger = logging.getLogger(__name__)


def combine_ways(*ways: Any, layers: LayerManager) -> Path | None:
    """Combine two or more paths of the active data layer into one.

    Arguments are flattened like any command input; only paths are kept.
    Returns the combined path, or None without raising if fewer than two
    paths were given, there is no active data layer, or the paths cannot be
    joined into a single chain.
    """
    assert_that(layers is not None, "layers: mandatory parameter missing")
    paths = [p for p in flatten(ways) if isinstance(p, Path)]
    if len(paths) <= 1:
        return None
    layer = layers.active_data_layer
    if layer is None:
        return None
    planned = combine_ways_worker(layer, paths)
    if planned is None:
        return None
    kept, command = planned
    layer.apply(command)
    logger.debug("Combined %d paths into %r", len(paths), kept)
    return kept


def combine_selected_ways(layers: LayerManager) -> Path | None:
    """Combine the selected paths of the active data layer."""
    layer = layers.active_data_layer
    if layer is None:
        return None
    paths = layer.data.selected_paths
    if len(paths) <= 1:
        return None
    return combine_ways(paths, layers=layers)
