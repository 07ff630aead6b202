# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/config/manager.py

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Final

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pmtool.system.exceptions import ConfigError


# ---- Constants ----

USER_CFG: Final = "pmtool.yml"
DEFAULT_CATALOG: Final = "~/.git_projects.json"
DEFAULT_REMOTE: Final = "origin"
DEFAULT_BRANCH: Final = "master"


def _get_user_config_search_paths() -> tuple[Path, ...]:
    """Get config file search paths (ordered by priority: lowest to highest).

    Evaluated at call time so tests can point the env vars elsewhere.
    """
    return (
        Path("/etc/pmtool") / USER_CFG,  # System defaults
        Path.home() / ".config" / "pmtool" / USER_CFG,  # User config
        Path(os.getenv("XDG_CONFIG_HOME", "")) / "pmtool" / USER_CFG,  # XDG override
        Path(os.getenv("PMTOOL_CONFIG_HOME", "")) / USER_CFG,  # Explicit override (highest priority)
    )


def _load_merged_config_data(candidates: tuple[Path, ...]) -> dict:
    """Load and merge config data from candidate paths.

    Missing files are skipped; a file that exists but cannot be parsed is
    a ConfigError.
    """
    merged_data = {}
    found_configs = []

    for candidate in candidates:
        # Unset env vars collapse to relative paths; skip them
        if not candidate.is_absolute() or not candidate.is_file():
            continue
        try:
            with candidate.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {candidate}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config {candidate} must be a mapping, got {type(data).__name__}")

        merged_data.update(data)  # Later configs override earlier ones
        found_configs.append(str(candidate))
        logger.debug(f"Loaded config from {candidate}")

    if found_configs:
        logger.debug(f"Merged config from: {', '.join(found_configs)}")
    else:
        logger.debug("No pmtool.yml found, using defaults")
    return merged_data


# ---- User Config ----

class UserConfig(BaseModel):
    """User configuration; every field has a default."""
    model_config = ConfigDict(extra="forbid", validate_default=True)

    catalog_path: Path = Field(default=Path(DEFAULT_CATALOG), description="Where scan writes and clone reads the catalog")
    remote_name: str = Field(default=DEFAULT_REMOTE, min_length=1)
    primary_branch: str = Field(default=DEFAULT_BRANCH, min_length=1)
    grep_batch_size: int = Field(default=256, gt=0, description="Revisions passed to a single git grep call")

    # Optional logging configuration
    local_log: Optional[Path] = None

    @field_validator("catalog_path", "local_log", mode="after")
    @classmethod
    def expand_user(cls, value: Optional[Path]) -> Optional[Path]:
        return value.expanduser() if value is not None else None


def load_merged_user_config() -> UserConfig:
    """Load and merge user config from all locations (system defaults + user overrides)."""
    merged_data = _load_merged_config_data(_get_user_config_search_paths())
    try:
        return UserConfig.model_validate(merged_data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
