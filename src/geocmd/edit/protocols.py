"""Boundary contracts the edit layer drives but does not implement."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from geocmd.infrastructure.layers import Layer


@runtime_checkable
class HistorySink(Protocol):
    """Undo/redo storage shared by all layers of a workspace."""

    def undo(self, num: int = 1) -> None: ...

    def redo(self, num: int = 1) -> None: ...

    def clean(self, layer: Layer | None = None) -> None: ...

