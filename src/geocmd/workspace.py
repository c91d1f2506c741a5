"""Workspace — the process-level owner of layers, history, and plugins.

A workspace wires one :class:`UndoRedoHandler` into a :class:`LayerManager`
(so every data layer records into the same history), exposes the
:class:`CommandHistory` facade bound to it, and forwards history events to
plugins. It is the single object handed to scripts and services.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from types import ModuleType
from typing import TYPE_CHECKING, Any

from geocmd.config.settings import GeocmdSettings
from geocmd.edit.history import CommandHistory
from geocmd.infrastructure.layers import LayerManager
from geocmd.infrastructure.undo import UndoRedoHandler

if TYPE_CHECKING:
    from pathlib import Path

    from geocmd.infrastructure.layers import DataLayer
    from geocmd.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

START_MODULE_NAME = "geocmd_start"

_HISTORY_HOOKS = {
    "apply": "post_apply",
    "undo": "post_undo",
    "redo": "post_redo",
    "clean": "post_clean",
}


class Workspace:
    """Layers, history, and plugins of one editing session."""

    def __init__(
        self,
        settings: GeocmdSettings | None = None,
        *,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._settings = settings if settings is not None else GeocmdSettings()
        self._undo_redo = UndoRedoHandler(max_depth=self._settings.history.max_depth)
        self._undo_redo.add_listener(self._on_history_event)
        self._layers = LayerManager(self._undo_redo)
        self._layers.create_data_layer(self._settings.layers.default_name)
        self._history = CommandHistory(self._undo_redo)
        self._plugins = plugin_manager
        self._start_module: ModuleType | None = None

    @property
    def settings(self) -> GeocmdSettings:
        return self._settings

    @property
    def layers(self) -> LayerManager:
        return self._layers

    @property
    def undo_redo(self) -> UndoRedoHandler:
        return self._undo_redo

    @property
    def history(self) -> CommandHistory:
        return self._history

    @property
    def plugins(self) -> PluginManager | None:
        return self._plugins

    @property
    def active_data_layer(self) -> DataLayer | None:
        return self._layers.active_data_layer

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def init_plugins(self) -> list[str]:
        """Discover entry-point and local plugins. Returns loaded plugin names."""
        from geocmd.plugins.manager import PluginManager

        if self._plugins is None:
            self._plugins = PluginManager()
        return self._plugins.discover_and_load(local_dir=self._settings.plugins_path)

    def start(self) -> None:
        """Run the configured start module and the plugins' ``on_start`` hooks."""
        path = self._settings.start_module_path
        if path is not None:
            self._start_module = load_start_module(path)
            if self._start_module is not None:
                call_on_start(self._start_module, self)
        self._dispatch_event("on_start", {"workspace": self})

    # ------------------------------------------------------------------
    # Plugin events
    # ------------------------------------------------------------------

    def _on_history_event(self, event: str, payload: dict[str, Any]) -> None:
        hook_name = _HISTORY_HOOKS.get(event)
        if hook_name is not None:
            self._dispatch_event(hook_name, payload)

    def _dispatch_event(self, hook_name: str, payload: dict[str, Any]) -> None:
        """Dispatch a lifecycle event. No-op if plugins are not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        self._plugins.dispatch(hook_name, **payload)


def load_start_module(path: Path) -> ModuleType | None:
    """Import the start module at *path*. Failures are logged, never raised."""
    if not path.is_file():
        logger.info("No start module found at %s", path)
        return None
    try:
        spec = importlib.util.spec_from_file_location(START_MODULE_NAME, path)
        if spec is None or spec.loader is None:
            logger.warning("Could not create module spec for %s", path)
            return None
        module = importlib.util.module_from_spec(spec)
        sys.modules[START_MODULE_NAME] = module
        spec.loader.exec_module(module)
    except Exception:
        logger.error("Failed to load start module from %s", path, exc_info=True)
        sys.modules.pop(START_MODULE_NAME, None)
        return None
    logger.info("Loaded start module from %s", path)
    return module


def call_on_start(module: ModuleType, workspace: Workspace) -> None:
    """Invoke ``module.on_start(workspace)`` if the module defines it."""
    hook = getattr(module, "on_start", None)
    if hook is None:
        return
    if not callable(hook):
        logger.warning(
            "start module: 'on_start' should be a function, got %s instead", type(hook).__name__
        )
        return
    try:
        hook(workspace)
    except Exception:
        logger.warning("start module: on_start failed", exc_info=True)
