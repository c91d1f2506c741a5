"""Tests for Workspace — layers, shared history, start module, and plugin events."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from geocmd.config.settings import GeocmdSettings
from geocmd.edit.commands import add
from geocmd.plugins import PluginManager, hookimpl
from geocmd.workspace import Workspace, call_on_start, load_start_module
from tests.conftest import make_point


class _EventPlugin:
    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    @hookimpl
    def on_start(self, workspace: Workspace) -> None:
        self.events.append(("start", workspace))

    @hookimpl
    def post_apply(self, layer_name: str, description: str, primitive_count: int) -> None:
        self.events.append(("apply", (layer_name, primitive_count)))

    @hookimpl
    def post_undo(self, count: int) -> None:
        self.events.append(("undo", count))

    @hookimpl
    def post_redo(self, count: int) -> None:
        self.events.append(("redo", count))

    @hookimpl
    def post_clean(self, layer_name: str | None) -> None:
        self.events.append(("clean", layer_name))


def _settings(root: Path, toml: str = "") -> GeocmdSettings:
    (root / "geocmd.toml").write_text(toml)
    return GeocmdSettings.from_cli(project_root=root)


class TestSetup:
    def test_default_layer(self, workspace: Workspace) -> None:
        layer = workspace.active_data_layer
        assert layer is not None
        assert layer.name == "Data Layer 1"
        assert layer.undo_redo is workspace.undo_redo
        assert workspace.history.has_sink

    def test_configured_layer_and_depth(self, project_root: Path) -> None:
        ws = Workspace(
            _settings(project_root, '[layers]\ndefault_name = "Roads"\n[history]\nmax_depth = 1\n')
        )
        layer = ws.active_data_layer
        assert layer is not None
        assert layer.name == "Roads"
        add(make_point()).apply_to(layer)
        add(make_point()).apply_to(layer)
        assert len(ws.undo_redo.commands) == 1

    def test_plugins_none_until_initialized(self, workspace: Workspace) -> None:
        assert workspace.plugins is None
        add(make_point()).apply_to(workspace.active_data_layer)


class TestPluginEvents:
    def test_history_events_dispatched(self, settings: GeocmdSettings) -> None:
        pm = PluginManager()
        plugin = _EventPlugin()
        pm.register_plugin(plugin)
        ws = Workspace(settings, plugin_manager=pm)
        layer = ws.active_data_layer
        assert layer is not None

        add(make_point(), make_point()).apply_to(layer)
        ws.history.undo()
        ws.history.redo()
        ws.history.clear(layer)

        assert plugin.events == [
            ("apply", ("Data Layer 1", 2)),
            ("undo", 1),
            ("redo", 1),
            ("clean", "Data Layer 1"),
        ]

    def test_start_dispatches_on_start(self, settings: GeocmdSettings) -> None:
        pm = PluginManager()
        plugin = _EventPlugin()
        pm.register_plugin(plugin)
        ws = Workspace(settings, plugin_manager=pm)
        ws.start()
        assert plugin.events == [("start", ws)]

    def test_init_plugins_loads_local_dir(self, project_root: Path) -> None:
        plugins = project_root / ".geocmd" / "plugins"
        plugins.mkdir(parents=True)
        (plugins / "noop.py").write_text(
            "from geocmd.plugins import hookimpl\n\n\n"
            "class Noop:\n"
            "    @hookimpl\n"
            "    def post_undo(self, count):\n"
            "        pass\n"
        )
        ws = Workspace(_settings(project_root))
        assert ws.init_plugins() == ["geocmd_local_plugin_noop"]
        assert ws.plugins is not None


class TestStartModule:
    def test_on_start_receives_workspace(self, project_root: Path) -> None:
        (project_root / "start.py").write_text(
            "def on_start(workspace):\n"
            "    workspace.layers.create_data_layer('From start')\n"
        )
        ws = Workspace(_settings(project_root, '[scripting]\nstart_module = "start.py"\n'))
        ws.start()
        assert ws.layers.get("From start") is not None

    def test_missing_start_module(self, project_root: Path) -> None:
        ws = Workspace(_settings(project_root, '[scripting]\nstart_module = "nope.py"\n'))
        ws.start()
        assert len(ws.layers) == 1

    def test_load_errors_are_logged(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "start.py"
        path.write_text("raise ValueError('broken start module')\n")
        with caplog.at_level(logging.ERROR, logger="geocmd.workspace"):
            assert load_start_module(path) is None
        assert "Failed to load start module" in caplog.text

    def test_on_start_errors_are_logged(
        self, tmp_path: Path, workspace: Workspace, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "start.py"
        path.write_text("def on_start(workspace):\n    raise RuntimeError('boom')\n")
        module = load_start_module(path)
        assert module is not None
        with caplog.at_level(logging.WARNING, logger="geocmd.workspace"):
            call_on_start(module, workspace)
        assert "on_start failed" in caplog.text

    def test_on_start_not_callable(
        self, tmp_path: Path, workspace: Workspace, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "start.py"
        path.write_text("on_start = 42\n")
        module = load_start_module(path)
        assert module is not None
        with caplog.at_level(logging.WARNING, logger="geocmd.workspace"):
            call_on_start(module, workspace)
        assert "should be a function" in caplog.text
