"""Configuration module."""

from svcdeploy.config.loader import find_config_path, load_config
from svcdeploy.config.models import (
    ConfigError,
    DeployerConfig,
    LifecycleConfig,
    ServiceConfig,
)
from svcdeploy.config.paths import (
    get_config_path,
    get_logs_path,
    get_svcdeploy_home,
)

__all__ = [
    "ConfigError",
    "DeployerConfig",
    "LifecycleConfig",
    "ServiceConfig",
    "find_config_path",
    "get_config_path",
    "get_logs_path",
    "get_svcdeploy_home",
    "load_config",
]
