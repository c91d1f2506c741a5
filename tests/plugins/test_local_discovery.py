"""Tests for single-file plugins discovered from a local directory."""

from __future__ import annotations

from pathlib import Path

from geocmd.plugins.manager import PluginManager

_PLUGIN_SOURCE = """\
from geocmd.plugins import hookimpl

EVENTS = []


class CountingPlugin:
    @hookimpl
    def post_redo(self, count):
        EVENTS.append(count)


class NotAPlugin:
    pass
"""


class TestLocalDiscovery:
    def test_loads_hookimpl_classes(self, tmp_path: Path) -> None:
        (tmp_path / "counting.py").write_text(_PLUGIN_SOURCE)
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path)
        assert "geocmd_local_plugin_counting" in names
        assert len(pm.get_plugins()) == 1

        pm.dispatch("post_redo", count=2)
        plugin = pm.get_plugins()[0]
        assert type(plugin).__module__ == "geocmd_local_plugin_counting"

    def test_underscore_files_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "_private.py").write_text(_PLUGIN_SOURCE)
        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path)
        assert pm.get_plugins() == []

    def test_broken_file_is_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "broken.py").write_text("raise ImportError('nope')\n")
        (tmp_path / "good.py").write_text(_PLUGIN_SOURCE)
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path)
        assert names == ["geocmd_local_plugin_good"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert PluginManager().discover_and_load(local_dir=tmp_path / "nope") == []
