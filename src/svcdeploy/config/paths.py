"""Centralized path management for svcdeploy.

All local state (config, logs) is stored under a single base directory.
The base directory can be overridden with the SVCDEPLOY_HOME environment
variable.

Default locations:
- Linux/macOS: ~/.svcdeploy
- Windows: %USERPROFILE%\\.svcdeploy
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "SVCDEPLOY_HOME"


@lru_cache(maxsize=1)
def get_svcdeploy_home() -> Path:
    """Get the base directory for all svcdeploy data.

    Resolution order:
    1. SVCDEPLOY_HOME environment variable (if set)
    2. Platform default (~/.svcdeploy)
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()

    return Path.home() / ".svcdeploy"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_svcdeploy_home() / "config.toml"


def get_logs_path() -> Path:
    """Get the default logs directory path."""
    return get_svcdeploy_home() / "logs"


def get_service_log_path(service_name: str) -> Path:
    """Get the log file path for a deployed service's output."""
    return get_logs_path() / f"{service_name}.log"


def get_all_paths() -> dict[str, Path]:
    """Get all configured paths for display/debugging."""
    return {
        "home": get_svcdeploy_home(),
        "config": get_config_path(),
        "logs": get_logs_path(),
    }
