"""High-level service management interface."""

import asyncio
import logging
from collections.abc import AsyncIterator
from pathlib import Path

from svcdeploy.config.models import DeployerConfig
from svcdeploy.service.base import (
    ServiceBackend,
    ServiceSpec,
    ServiceState,
    ServiceStatus,
)

logger = logging.getLogger(__name__)


class ServiceManager:
    """Composes backend primitives into install and uninstall.

    install and uninstall return whether the service reached the expected
    state in time, and raise ServiceError when a primitive fails.

    Example:
        manager = ServiceManager(backend)
        installed = await manager.install()
        removed = await manager.uninstall()
    """

    def __init__(
        self,
        backend: ServiceBackend,
        state_timeout: float = 10.0,
        removal_timeout: float = 30.0,
        poll_interval: float = 0.5,
    ):
        """Initialize the service manager.

        Args:
            backend: Backend that performs the platform primitives.
            state_timeout: Seconds to wait for start/stop to take effect.
            removal_timeout: Seconds to wait for the definition to disappear.
            poll_interval: Seconds between status checks.
        """
        self._backend = backend
        self._state_timeout = state_timeout
        self._removal_timeout = removal_timeout
        self._poll_interval = poll_interval

    @property
    def backend_name(self) -> str:
        """Get the name of the active backend."""
        return self._backend.name

    @property
    def service_name(self) -> str:
        return self._backend.spec.name

    async def install(self) -> bool:
        """Create the service and start it.

        Returns:
            True if the service is running before state_timeout elapses.
        """
        logger.info("Creating %s service '%s'", self.backend_name, self.service_name)
        await self._backend.create()
        await self._backend.start()
        return await self._wait_for_state(ServiceState.RUNNING, self._state_timeout)

    async def uninstall(self) -> bool:
        """Stop the service, mark it for deletion and confirm removal.

        Returns:
            True if the definition is gone before removal_timeout elapses.
        """
        status = await self._backend.status()
        if status.state in (ServiceState.RUNNING, ServiceState.STARTING):
            logger.info("Stopping service '%s'", self.service_name)
            await self._backend.stop()
            await self._wait_for_state(ServiceState.STOPPED, self._state_timeout)

        logger.info("Marking service '%s' for deletion", self.service_name)
        await self._backend.mark_for_deletion()
        return await self._wait_for_state(
            ServiceState.NOT_INSTALLED, self._removal_timeout
        )

    async def start(self) -> bool:
        """Start an installed service.

        Returns:
            True if the service is running before state_timeout elapses.
        """
        status = await self._backend.status()
        if status.state == ServiceState.RUNNING:
            return True

        await self._backend.start()
        return await self._wait_for_state(ServiceState.RUNNING, self._state_timeout)

    async def stop(self) -> bool:
        """Stop a running service.

        Returns:
            True if the service is stopped before state_timeout elapses.
        """
        status = await self._backend.status()
        if status.state == ServiceState.STOPPED:
            return True

        await self._backend.stop()
        return await self._wait_for_state(ServiceState.STOPPED, self._state_timeout)

    async def status(self) -> ServiceStatus:
        """Get current service status."""
        return await self._backend.status()

    async def _wait_for_state(self, target: ServiceState, timeout: float) -> bool:
        """Poll status until it reaches target or timeout elapses."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            status = await self._backend.status()
            if status.state == target:
                return True
            if loop.time() >= deadline:
                logger.warning(
                    "Service '%s' is %s, expected %s after %.1fs",
                    self.service_name,
                    status.state.value,
                    target.value,
                    timeout,
                )
                return False
            await asyncio.sleep(self._poll_interval)

    async def logs(self, follow: bool = False, lines: int = 50) -> AsyncIterator[str]:
        """Stream service logs.

        Args:
            follow: If True, continue streaming new lines.
            lines: Number of historical lines to show.

        Yields:
            Log lines.
        """
        source = self._backend.get_log_source()

        if isinstance(source, Path):
            async for line in self._tail_file(source, follow, lines):
                yield line
        else:
            async for line in self._exec_log_cmd(source, follow, lines):
                yield line

    async def _tail_file(
        self, path: Path, follow: bool, lines: int
    ) -> AsyncIterator[str]:
        if not path.exists():
            yield f"Log file not found: {path}"
            return

        with path.open() as f:  # noqa: ASYNC230
            all_lines = f.readlines()
            for line in all_lines[-lines:]:
                yield line.rstrip()

            if follow:
                while True:
                    line = f.readline()
                    if line:
                        yield line.rstrip()
                    else:
                        await asyncio.sleep(0.1)

    async def _exec_log_cmd(
        self, cmd: str, follow: bool, lines: int
    ) -> AsyncIterator[str]:
        """Execute a log command (like journalctl)."""
        full_cmd = f"{cmd} -n {lines}"
        if follow:
            full_cmd += " -f"

        proc = await asyncio.create_subprocess_shell(
            full_cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )

        if proc.stdout:
            async for line in proc.stdout:
                yield line.decode().rstrip()


def create_service_manager(
    config: DeployerConfig, backend_name: str | None = None
) -> ServiceManager:
    """Build a ServiceManager for the configured service.

    Args:
        config: Loaded configuration.
        backend_name: Overrides [service].backend when given.
    """
    from svcdeploy.service.backends import get_backend

    spec = ServiceSpec.from_config(config.service)
    backend = get_backend(backend_name or config.service.backend, spec)
    lifecycle = config.lifecycle
    return ServiceManager(
        backend,
        state_timeout=lifecycle.state_timeout,
        removal_timeout=lifecycle.removal_timeout,
        poll_interval=lifecycle.poll_interval,
    )
