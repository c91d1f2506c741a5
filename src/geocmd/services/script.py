"""ScriptService — run a Python edit script against a workspace.

Scripts get the edit API pre-imported, bound to the workspace::

    p1 = Point(pos=LatLon(lat=47.0, lon=8.0))
    p2 = Point(pos=LatLon(lat=47.1, lon=8.1))
    add(p1, p2, Path([p1, p2])).apply_to(layer)
    change(p1, {"tags": {"name": "Start"}}).apply_to(layer)
    history.undo()
"""

from __future__ import annotations

import functools
import logging
import runpy
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from geocmd.config.logging import script_context
from geocmd.domain.position import LatLon
from geocmd.domain.primitives import Group, Member, Point
from geocmd.domain.primitives import Path as GeoPath
from geocmd.edit import ChangeOptions, add, change, combine_selected_ways, combine_ways, delete
from geocmd.errors import CommandError
from geocmd.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from geocmd.infrastructure.layers import DataLayer
    from geocmd.workspace import Workspace

logger = logging.getLogger(__name__)

OP_RUN_SCRIPT = "run_script"


def script_namespace(workspace: Workspace, layer: DataLayer) -> dict[str, Any]:
    """Globals injected into every script."""
    return {
        "workspace": workspace,
        "layers": workspace.layers,
        "layer": layer,
        "history": workspace.history,
        "add": add,
        "delete": delete,
        "change": change,
        "ChangeOptions": ChangeOptions,
        "combine_ways": functools.partial(combine_ways, layers=workspace.layers),
        "combine_selected_ways": functools.partial(combine_selected_ways, workspace.layers),
        "Point": Point,
        "Path": GeoPath,
        "Group": Group,
        "Member": Member,
        "LatLon": LatLon,
    }


class ScriptService:
    """Runs edit scripts and reports the resulting workspace state."""

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def run(self, path: Path | str, *, layer_name: str | None = None) -> ServiceResult:
        """Execute the script at *path*.

        *layer_name* selects (or creates) the data layer exposed to the
        script as ``layer``; by default the active data layer is used.
        """
        script = Path(path)
        if not script.is_file():
            return ServiceResult(
                ok=False,
                op=OP_RUN_SCRIPT,
                error=ServiceError(
                    code="NOT_FOUND",
                    message=f"Script not found: {script}",
                    detail={"path": str(script)},
                ),
            )

        layer = self._target_layer(layer_name)
        namespace = script_namespace(self._workspace, layer)
        started = time.perf_counter()

        with script_context(script=script.name, layer=layer.name):
            logger.debug("Running script %s", script)
            try:
                runpy.run_path(str(script), init_globals=namespace, run_name="__main__")
            except CommandError as exc:
                logger.warning("Script %s failed: %s", script.name, exc.message)
                return ServiceResult(
                    ok=False,
                    op=OP_RUN_SCRIPT,
                    error=ServiceError.from_command_error(exc),
                    data=self.summary(),
                )
            except SystemExit as exc:
                if exc.code not in (None, 0):
                    return self._script_error(script, f"Script exited with status {exc.code}")
            except Exception as exc:
                logger.debug("Script %s raised", script.name, exc_info=True)
                return self._script_error(script, f"{type(exc).__name__}: {exc}")

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        return ServiceResult(
            ok=True,
            op=OP_RUN_SCRIPT,
            data={"script": str(script), **self.summary()},
            meta={"duration_ms": elapsed_ms},
        )

    def summary(self) -> dict[str, Any]:
        """Layer contents and history depth of the workspace."""
        layers = self._workspace.layers
        undo_redo = self._workspace.undo_redo
        last = undo_redo.last_command
        return {
            "layers": [
                {
                    "name": layer.name,
                    "active": layer is layers.active_layer,
                    **layer.data.summary(),
                }
                for layer in layers.data_layers
            ],
            "history": {
                "undo": len(undo_redo.commands),
                "redo": len(undo_redo.redo_commands),
                "last": last.description if last is not None else None,
            },
        }

    def _target_layer(self, layer_name: str | None) -> DataLayer:
        layers = self._workspace.layers
        if layer_name is None:
            active = layers.active_data_layer
            if active is not None:
                return active
            layer_name = self._workspace.settings.layers.default_name
        for layer in layers.data_layers:
            if layer.name == layer_name:
                layers.active_layer = layer
                return layer
        return layers.create_data_layer(layer_name)

    def _script_error(self, script: Path, message: str) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=OP_RUN_SCRIPT,
            error=ServiceError(code="SCRIPT_ERROR", message=message, detail={"path": str(script)}),
            data=self.summary(),
        )
