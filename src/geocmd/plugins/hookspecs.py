"""Pluggy hook specifications for geocmd lifecycle events.

History events are dispatched synchronously after the history changed.
``on_start`` runs once the workspace is ready, before any script.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from geocmd.workspace import Workspace

hookspec = pluggy.HookspecMarker("geocmd")
hookimpl = pluggy.HookimplMarker("geocmd")


class GeocmdHookSpec:
    """Hook specifications for the geocmd plugin system."""

    @hookspec
    def on_start(self, workspace: Workspace) -> None:
        """Called once after the workspace is set up."""

    @hookspec
    def post_apply(self, layer_name: str, description: str, primitive_count: int) -> None:
        """Called after a command was applied to a layer and recorded."""

    @hookspec
    def post_undo(self, count: int) -> None:
        """Called after *count* commands were undone."""

    @hookspec
    def post_redo(self, count: int) -> None:
        """Called after *count* commands were redone."""

    @hookspec
    def post_clean(self, layer_name: str | None) -> None:
        """Called after history was cleared, for one layer or (None) for all."""
