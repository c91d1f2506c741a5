"""Locate the ``geocmd.toml`` that applies to a working directory."""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "geocmd.toml"
CONFIG_ENV_VAR = "GEOCMD_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file for *start* (default: cwd), or None.

    An explicit ``GEOCMD_CONFIG`` path wins and is never searched past: if it
    does not name a file, no config is used. Otherwise the nearest
    ``geocmd.toml`` in *start* or one of its ancestors is returned.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        return path if path.is_file() else None

    base = (start or Path.cwd()).resolve()
    for directory in (base, *base.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
