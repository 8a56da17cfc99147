"""Abstract base for service management backends."""

import shutil
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from svcdeploy.config.models import ServiceConfig
from svcdeploy.errors import ErrorClassifier


class ServiceState(Enum):
    """Service running state."""

    RUNNING = "running"
    STOPPED = "stopped"
    STARTING = "starting"
    STOPPING = "stopping"
    FAILED = "failed"
    NOT_INSTALLED = "not_installed"
    UNKNOWN = "unknown"


@dataclass
class ServiceStatus:
    """Service status information."""

    state: ServiceState
    pid: int | None = None
    memory_mb: float | None = None
    cpu_percent: float | None = None
    message: str | None = None


def get_worker_command() -> list[str]:
    """Get the command that runs the built-in worker."""
    svcdeploy_path = shutil.which("svcdeploy")
    if svcdeploy_path:
        return [svcdeploy_path, "worker"]
    # Fall back to running as module
    return [sys.executable, "-m", "svcdeploy", "worker"]


@dataclass
class ServiceSpec:
    """What gets registered with the platform service manager."""

    name: str
    display_name: str
    description: str
    command: list[str] = field(default_factory=get_worker_command)

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "ServiceSpec":
        """Build a spec from the [service] config section."""
        return cls(
            name=config.name,
            display_name=config.display_name,
            description=config.description,
            command=list(config.command) if config.command else get_worker_command(),
        )


class ServiceBackend(ABC):
    """Abstract interface for service management backends.

    Backends expose the narrow platform primitives:
    - systemd user units on Linux
    - launchd user agents on macOS
    - the Service Control Manager on Windows

    Every primitive raises ServiceError when the platform reports failure.
    """

    def __init__(self, spec: ServiceSpec):
        self.spec = spec

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'systemd', 'launchd', 'windows')."""
        ...

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if this backend is available on the current system."""
        ...

    @property
    @abstractmethod
    def classifier(self) -> ErrorClassifier:
        """Classifier for this platform's error codes."""
        ...

    @abstractmethod
    async def create(self) -> None:
        """Register the service definition with the service manager."""
        ...

    @abstractmethod
    async def start(self) -> None:
        """Start the registered service."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Stop the running service."""
        ...

    @abstractmethod
    async def status(self) -> ServiceStatus:
        """Get current service status.

        Returns NOT_INSTALLED when no definition is registered.
        """
        ...

    @abstractmethod
    async def mark_for_deletion(self) -> None:
        """Remove the service definition from the service manager.

        Removal may complete asynchronously; poll status() to confirm.
        """
        ...

    @abstractmethod
    def get_log_source(self) -> str | Path:
        """Get log source.

        Returns:
            Either a shell command (str) to execute for logs,
            or a Path to a log file.
        """
        ...
