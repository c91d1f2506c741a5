"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, geocmd.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class HistoryConfig(BaseModel):
    """[history] section."""

    model_config = {"frozen": True}

    max_depth: int = Field(default=100, ge=0)


class LayersConfig(BaseModel):
    """[layers] section."""

    model_config = {"frozen": True}

    default_name: str = "Data Layer 1"


class ScriptingConfig(BaseModel):
    """[scripting] section."""

    model_config = {"frozen": True}

    start_module: str = ""
    plugins_dir: str = ".geocmd/plugins"

