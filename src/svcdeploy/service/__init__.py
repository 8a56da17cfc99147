"""OS service management for svcdeploy.

Provides OS-native service primitives:
- systemd user services on Linux
- launchd user agents on macOS
- the Service Control Manager on Windows

Example:
    from svcdeploy.service import ServiceManager, create_service_manager

    manager = create_service_manager(config)
    installed = await manager.install()
    status = await manager.status()
"""

from svcdeploy.service.base import (
    ServiceBackend,
    ServiceSpec,
    ServiceState,
    ServiceStatus,
)
from svcdeploy.service.manager import ServiceManager, create_service_manager

__all__ = [
    "ServiceBackend",
    "ServiceManager",
    "ServiceSpec",
    "ServiceState",
    "ServiceStatus",
    "create_service_manager",
]
