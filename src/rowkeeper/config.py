"""Configuration loading: ``rowkeeper.toml`` validated with pydantic."""
from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONFIG_PATH = Path("rowkeeper.toml")


class StorageSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    db_path: str = "saves/rowkeeper.db"
    table_prefix: str = ""


class DiagnosticsSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    strict: bool = False


class RowKeeperConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    storage: StorageSettings = Field(default_factory=StorageSettings)
    diagnostics: DiagnosticsSettings = Field(default_factory=DiagnosticsSettings)


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_config(path: str | Path | None = None) -> RowKeeperConfig:
    """Load settings from ``path`` (default ``rowkeeper.toml``).

    A missing file yields the defaults; a malformed one raises.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if config_path.exists():
        return RowKeeperConfig.model_validate(_read_toml(config_path))
    return RowKeeperConfig()
