"""Configuration loading from TOML files and environment variables."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from svcdeploy.config.models import ConfigError, DeployerConfig
from svcdeploy.config.paths import get_config_path

logger = logging.getLogger(__name__)


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("svcdeploy.toml"),  # Current directory
        get_config_path(),  # ~/.svcdeploy/config.toml (or SVCDEPLOY_HOME)
        Path("/etc/svcdeploy/config.toml"),  # System-wide
    ]


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply SVCDEPLOY_* environment overrides on top of file values."""
    if wait_ms := os.environ.get("SVCDEPLOY_WAIT_MS"):
        try:
            value = int(wait_ms)
        except ValueError:
            raise ConfigError(
                f"SVCDEPLOY_WAIT_MS must be an integer, got {wait_ms!r}"
            ) from None
        config.setdefault("lifecycle", {})["wait_ms"] = value

    if backend := os.environ.get("SVCDEPLOY_BACKEND"):
        config.setdefault("service", {})["backend"] = backend

    return config


def find_config_path(path: Path | None = None) -> Path | None:
    """Resolve which config file to load.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        The config path, or None if no default location has a file.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
    """
    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return config_path

    for default_path in _get_default_config_paths():
        expanded = default_path.expanduser()
        if expanded.exists():
            return expanded
    return None


def load_config(path: Path | None = None) -> DeployerConfig:
    """Load configuration from a TOML file.

    Missing default files are not an error: the built-in defaults are used.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated DeployerConfig instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigError: If the file is not valid TOML or an environment override
            is malformed.
        pydantic.ValidationError: If config values are invalid.
    """
    config_path = find_config_path(path)

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        logger.debug("Loading config from %s", config_path)
        try:
            with config_path.open("rb") as f:
                raw_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    raw_config = _apply_env_overrides(raw_config)

    return DeployerConfig.model_validate(raw_config)
