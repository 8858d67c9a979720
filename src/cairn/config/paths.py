"""Centralized path management for Cairn.

All state (config, database, logs) lives under a single base directory,
overridable with the CAIRN_HOME environment variable.

Default location: ~/.cairn
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "CAIRN_HOME"


@lru_cache(maxsize=1)
def get_cairn_home() -> Path:
    """Get the base directory for all Cairn data.

    Resolution order:
    1. CAIRN_HOME environment variable (if set)
    2. ~/.cairn
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".cairn"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_cairn_home() / "config.toml"


def get_database_path() -> Path:
    """Get the default SQLite database path."""
    return get_cairn_home() / "data" / "cairn.db"


def get_logs_path() -> Path:
    """Get the default logs directory path."""
    return get_cairn_home() / "logs"
