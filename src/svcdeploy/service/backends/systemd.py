"""Systemd user service backend for Linux."""

import asyncio
import logging
import shlex
import subprocess
from pathlib import Path

from svcdeploy.errors import ErrorClassifier, ServiceError, get_classifier
from svcdeploy.service.base import ServiceBackend, ServiceState, ServiceStatus
from svcdeploy.service.process import get_process_info

logger = logging.getLogger(__name__)

# LSB "program is not installed"
NOT_INSTALLED_CODE = 5


class SystemdBackend(ServiceBackend):
    """Systemd user service backend for Linux.

    Uses systemctl --user for service management.
    Unit file stored in ~/.config/systemd/user/<name>.service
    """

    @property
    def name(self) -> str:
        return "systemd"

    @property
    def unit_name(self) -> str:
        return f"{self.spec.name}.service"

    @property
    def service_path(self) -> Path:
        """Path to user service unit file."""
        return Path.home() / ".config" / "systemd" / "user" / self.unit_name

    @property
    def is_available(self) -> bool:
        """Check if systemd user services are available."""
        try:
            subprocess.run(
                ["systemctl", "--user", "status"],
                capture_output=True,
                timeout=5,
            )
            # Status returns non-zero if no services running, but that's fine
            # We just need to know systemctl --user works
            return True
        except (FileNotFoundError, subprocess.TimeoutExpired, OSError):
            return False

    @property
    def classifier(self) -> ErrorClassifier:
        return get_classifier("lsb")

    async def _run_systemctl(self, *args: str) -> tuple[int, str, str]:
        """Run systemctl --user command."""
        proc = await asyncio.create_subprocess_exec(
            "systemctl",
            "--user",
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        return proc.returncode or 0, stdout.decode(), stderr.decode()

    async def _check_systemctl(self, operation: str, *args: str) -> str:
        """Run systemctl and raise ServiceError on a non-zero exit."""
        returncode, stdout, stderr = await self._run_systemctl(*args)
        if returncode != 0:
            logger.debug("systemctl %s exited %d: %s", args[0], returncode, stderr)
            raise ServiceError.from_code(operation, returncode, self.classifier)
        return stdout

    async def create(self) -> None:
        """Write the unit file and reload the user daemon."""
        self._write_unit_file()
        await self._check_systemctl("Create service", "daemon-reload")

    async def start(self) -> None:
        await self._check_systemctl("Start service", "start", self.unit_name)

    async def stop(self) -> None:
        await self._check_systemctl("Stop service", "stop", self.unit_name)

    async def status(self) -> ServiceStatus:
        """Get service status from systemctl."""
        returncode, stdout, _ = await self._run_systemctl(
            "show",
            self.unit_name,
            "--property=LoadState,ActiveState,MainPID",
        )

        if returncode != 0:
            return ServiceStatus(state=ServiceState.UNKNOWN)

        props = parse_properties(stdout)

        if props.get("LoadState") == "not-found":
            return ServiceStatus(state=ServiceState.NOT_INSTALLED)

        # Map systemd states to our states
        state_map = {
            "active": ServiceState.RUNNING,
            "inactive": ServiceState.STOPPED,
            "activating": ServiceState.STARTING,
            "deactivating": ServiceState.STOPPING,
            "failed": ServiceState.FAILED,
        }
        state = state_map.get(props.get("ActiveState", ""), ServiceState.UNKNOWN)

        pid_str = props.get("MainPID", "0")
        pid = int(pid_str) if pid_str.isdigit() and pid_str != "0" else None

        resource_info = get_process_info(pid) if pid else None
        return ServiceStatus(
            state=state,
            pid=pid,
            memory_mb=resource_info.get("memory_mb") if resource_info else None,
            cpu_percent=resource_info.get("cpu_percent") if resource_info else None,
        )

    async def mark_for_deletion(self) -> None:
        """Disable and remove the unit file, then reload the daemon."""
        if not self.service_path.exists():
            raise ServiceError.from_code(
                "Delete service", NOT_INSTALLED_CODE, self.classifier
            )
        await self._check_systemctl("Delete service", "disable", self.unit_name)
        self.service_path.unlink(missing_ok=True)
        await self._check_systemctl("Delete service", "daemon-reload")

    def _write_unit_file(self) -> None:
        """Generate and write the systemd unit file."""
        unit_content = f"""[Unit]
Description={self.spec.display_name}: {self.spec.description}
After=network.target

[Service]
Type=simple
ExecStart={shlex.join(self.spec.command)}
Restart=on-failure
RestartSec=5

[Install]
WantedBy=default.target
"""
        self.service_path.parent.mkdir(parents=True, exist_ok=True)
        self.service_path.write_text(unit_content)

    def get_log_source(self) -> str:
        """Get journalctl command for logs."""
        return f"journalctl --user -u {self.unit_name}"


def parse_properties(output: str) -> dict[str, str]:
    """Parse `systemctl show` Key=Value output."""
    props = {}
    for line in output.strip().split("\n"):
        if "=" in line:
            key, value = line.split("=", 1)
            props[key] = value
    return props
