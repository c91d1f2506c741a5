"""Layers and the layer manager.

A :class:`DataLayer` is the target every edit command is applied to. It
turns a command into an engine command and hands it to the shared
:class:`UndoRedoHandler`, which executes it and records it in history.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from geocmd.errors import InvalidArgumentError, PreconditionError
from geocmd.infrastructure.dataset import DataSet
from geocmd.infrastructure.native import EngineCommand

if TYPE_CHECKING:
    from geocmd.infrastructure.undo import UndoRedoHandler

logger = logging.getLogger(__name__)


class Layer:
    """A named layer of the edited document."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class DataLayer(Layer):
    """A layer holding editable primitives."""

    def __init__(
        self,
        name: str,
        *,
        undo_redo: UndoRedoHandler | None = None,
        data: DataSet | None = None,
    ) -> None:
        super().__init__(name)
        self._data = data if data is not None else DataSet()
        self._undo_redo = undo_redo

    @property
    def data(self) -> DataSet:
        return self._data

    @property
    def undo_redo(self) -> UndoRedoHandler | None:
        return self._undo_redo

    def apply(self, command: Any) -> None:
        """Execute *command* on this layer and record it in history.

        *command* is either an engine command or an edit command exposing
        ``create_engine_command(layer)``. Without a history handler the
        engine command is executed but not recorded.
        """
        if command is None:
            raise PreconditionError("command: must not be None")
        native = command
        if not isinstance(native, EngineCommand):
            factory = getattr(command, "create_engine_command", None)
            if not callable(factory):
                raise InvalidArgumentError("command: expected an edit command, got {0}", command)
            native = factory(self)
        if native.layer is not self:
            raise InvalidArgumentError("command: built for layer {0}, not {1}", native.layer, self)
        if self._undo_redo is None:
            native.execute()
        else:
            self._undo_redo.add(native)


class LayerManager:
    """The ordered set of layers with one optional active layer."""

    def __init__(self, undo_redo: UndoRedoHandler | None = None) -> None:
        self._undo_redo = undo_redo
        self._layers: list[Layer] = []
        self._active: Layer | None = None

    @property
    def layers(self) -> tuple[Layer, ...]:
        return tuple(self._layers)

    @property
    def data_layers(self) -> tuple[DataLayer, ...]:
        return tuple(layer for layer in self._layers if isinstance(layer, DataLayer))

    def __len__(self) -> int:
        return len(self._layers)

    def __contains__(self, layer: object) -> bool:
        return any(layer is known for known in self._layers)

    @property
    def active_layer(self) -> Layer | None:
        return self._active

    @active_layer.setter
    def active_layer(self, layer: Layer | None) -> None:
        if layer is not None and layer not in self:
            raise InvalidArgumentError("layer: {0} is not managed here", layer)
        self._active = layer

    @property
    def active_data_layer(self) -> DataLayer | None:
        """The active layer if it is a data layer, else None."""
        return self._active if isinstance(self._active, DataLayer) else None

    def get(self, name: str) -> Layer | None:
        """The first layer named *name*."""
        for layer in self._layers:
            if layer.name == name:
                return layer
        return None

    def add_layer(self, layer: Layer, *, activate: bool = True) -> Layer:
        if layer not in self:
            self._layers.append(layer)
            logger.debug("Added layer %s", layer.name)
        if activate:
            self._active = layer
        return layer

    def create_data_layer(self, name: str, *, activate: bool = True) -> DataLayer:
        """Create a data layer wired to the shared history and add it."""
        layer = DataLayer(name, undo_redo=self._undo_redo)
        self.add_layer(layer, activate=activate)
        return layer

    def remove_layer(self, layer: Layer) -> None:
        """Remove *layer* and the history entries applied to it."""
        if layer not in self:
            return
        self._layers = [known for known in self._layers if known is not layer]
        if self._undo_redo is not None:
            self._undo_redo.clean(layer)
        if self._active is layer:
            self._active = self._layers[-1] if self._layers else None
        logger.debug("Removed layer %s", layer.name)
