"""Configuration models using Pydantic."""

import logging
import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

SERVICE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,79}$")

DEFAULT_WAIT_MS = 10_000


class ServiceConfig(BaseModel):
    """Definition of the service being deployed.

    command is None by default, meaning the built-in `svcdeploy worker`.
    On Windows the command must point at a service-capable executable.
    """

    name: str = "svcdeploy-worker"
    display_name: str = "svcdeploy worker"
    description: str = "Background worker deployed by svcdeploy"
    command: list[str] | None = None
    backend: Literal["auto", "systemd", "launchd", "windows"] = "auto"

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if not SERVICE_NAME_PATTERN.match(value):
            raise ValueError(
                "Service name must start with a letter or digit and contain only "
                "letters, digits, '.', '_' or '-' (max 80 characters)"
            )
        return value

    @field_validator("command")
    @classmethod
    def _validate_command(cls, value: list[str] | None) -> list[str] | None:
        if value is not None and not value:
            raise ValueError("Service command must not be empty")
        return value


class LifecycleConfig(BaseModel):
    """Timing and confirmation settings for the lifecycle run."""

    wait_ms: int = Field(default=DEFAULT_WAIT_MS, ge=0)
    state_timeout: float = Field(default=10.0, ge=0)
    removal_timeout: float = Field(default=30.0, ge=0)
    poll_interval: float = Field(default=0.5, gt=0)
    assume_yes: bool = False


class ConfigError(Exception):
    """Configuration error."""

    pass


class DeployerConfig(BaseModel):
    """Root configuration model."""

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    lifecycle: LifecycleConfig = Field(default_factory=LifecycleConfig)

    @model_validator(mode="after")
    def _check_timeouts(self) -> "DeployerConfig":
        """Warn when polling can never observe a state change."""
        lifecycle = self.lifecycle
        if (
            lifecycle.removal_timeout
            and lifecycle.poll_interval > lifecycle.removal_timeout
        ):
            logger.warning(
                "poll_interval (%.1fs) exceeds removal_timeout (%.1fs); "
                "removal will be checked only once",
                lifecycle.poll_interval,
                lifecycle.removal_timeout,
            )
        return self
