"""Shared pytest fixtures and test helpers for geocmd tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from geocmd.config.settings import GeocmdSettings
from geocmd.domain.position import LatLon
from geocmd.domain.primitives import Path as GeoPath
from geocmd.domain.primitives import Point
from geocmd.infrastructure.layers import DataLayer
from geocmd.workspace import Workspace


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary project directory, isolated from any outer geocmd.toml."""
    monkeypatch.delenv("GEOCMD_CONFIG", raising=False)
    return tmp_path


@pytest.fixture
def settings(project_root: Path) -> GeocmdSettings:
    return GeocmdSettings.from_cli(project_root=project_root)


@pytest.fixture
def workspace(settings: GeocmdSettings) -> Workspace:
    """A workspace with one empty, active data layer and shared history."""
    return Workspace(settings)


@pytest.fixture
def layer(workspace: Workspace) -> DataLayer:
    active = workspace.active_data_layer
    assert active is not None
    return active


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp project root so the CLI picks up its geocmd.toml.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes.
    """
    monkeypatch.chdir(project_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_point(lat: float = 0.0, lon: float = 0.0, **tags: str) -> Point:
    """A new point at (*lat*, *lon*) with *tags*."""
    return Point(pos=LatLon(lat=lat, lon=lon), tags=dict(tags))


def make_path(*nodes: Point, **tags: str) -> GeoPath:
    """A new path over *nodes* with *tags*."""
    return GeoPath(list(nodes), tags=dict(tags))
