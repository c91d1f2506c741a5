"""Tests for GeocmdSettings — unified settings with TOML source."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from geocmd.config.settings import GeocmdSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GEOCMD_CONFIG", "GEOCMD_HISTORY__MAX_DEPTH", "GEOCMD_VERBOSE"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = GeocmdSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.no_start is False
        assert settings.history.max_depth == 100
        assert settings.start_module_path is None
        assert settings.plugins_path == tmp_path / ".geocmd" / "plugins"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = GeocmdSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "geocmd.toml").write_text(
            '[history]\nmax_depth = 3\n[scripting]\nstart_module = "start.py"\n'
        )
        settings = GeocmdSettings.from_cli(project_root=tmp_path)
        assert settings.history.max_depth == 3
        assert settings.start_module_path == tmp_path / "start.py"
        assert settings.layers.default_name == "Data Layer 1"

    def test_project_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "geocmd.toml").write_text("")
        child = tmp_path / "scripts"
        child.mkdir()
        monkeypatch.chdir(child)
        settings = GeocmdSettings.from_cli()
        assert settings.config_path is not None
        assert settings.config_path.resolve() == (tmp_path / "geocmd.toml").resolve()
        assert settings.project_root.resolve() == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "conf" / "my.toml"
        custom.parent.mkdir()
        custom.write_text('[layers]\ndefault_name = "Custom"\n')
        settings = GeocmdSettings.from_cli(config_path=str(custom), project_root=tmp_path)
        assert settings.layers.default_name == "Custom"
        assert settings.config_path == custom

    def test_absolute_paths_kept(self, tmp_path: Path) -> None:
        plugins = tmp_path / "abs-plugins"
        toml = f'[scripting]\nplugins_dir = "{plugins.as_posix()}"\n'
        (tmp_path / "geocmd.toml").write_text(toml)
        settings = GeocmdSettings.from_cli(project_root=tmp_path)
        assert settings.plugins_path == plugins

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "geocmd.toml").write_text("[history\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            GeocmdSettings.from_cli(project_root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "geocmd.toml").write_text("[history]\nmax_depth = 3\n")
        monkeypatch.setenv("GEOCMD_HISTORY__MAX_DEPTH", "9")
        settings = GeocmdSettings.from_cli(project_root=tmp_path)
        assert settings.history.max_depth == 9

    def test_cli_flags_override_toml(self, tmp_path: Path) -> None:
        (tmp_path / "geocmd.toml").write_text("no_start = true\n")
        assert GeocmdSettings.from_cli(project_root=tmp_path).no_start is True
        assert GeocmdSettings.from_cli(project_root=tmp_path, no_start=False).no_start is False
