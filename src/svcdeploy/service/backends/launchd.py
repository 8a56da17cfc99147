"""Launchd user agent backend for macOS."""

import asyncio
import logging
import plistlib
import shutil
import sys
from pathlib import Path

from svcdeploy.config.paths import get_service_log_path
from svcdeploy.errors import ErrorClassifier, ServiceError, get_classifier
from svcdeploy.service.base import ServiceBackend, ServiceState, ServiceStatus
from svcdeploy.service.process import get_process_info

logger = logging.getLogger(__name__)

LABEL_PREFIX = "com.svcdeploy"

# launchctl "Could not find specified service"
NOT_INSTALLED_CODE = 113


class LaunchdBackend(ServiceBackend):
    """Launchd user agent backend for macOS.

    Uses launchctl for service management.
    Plist file stored in ~/Library/LaunchAgents/com.svcdeploy.<name>.plist
    """

    @property
    def name(self) -> str:
        return "launchd"

    @property
    def label(self) -> str:
        return f"{LABEL_PREFIX}.{self.spec.name}"

    @property
    def plist_path(self) -> Path:
        """Path to launchd plist file."""
        return Path.home() / "Library" / "LaunchAgents" / f"{self.label}.plist"

    @property
    def is_available(self) -> bool:
        """Check if launchd is available (macOS only)."""
        return sys.platform == "darwin" and shutil.which("launchctl") is not None

    @property
    def classifier(self) -> ErrorClassifier:
        return get_classifier("launchd")

    async def _run_launchctl(self, *args: str) -> tuple[int, str, str]:
        """Run launchctl command."""
        proc = await asyncio.create_subprocess_exec(
            "launchctl",
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        return proc.returncode or 0, stdout.decode(), stderr.decode()

    async def _check_launchctl(self, operation: str, *args: str) -> str:
        """Run launchctl and raise ServiceError on a non-zero exit."""
        returncode, stdout, stderr = await self._run_launchctl(*args)
        if returncode != 0:
            logger.debug("launchctl %s exited %d: %s", args[0], returncode, stderr)
            raise ServiceError.from_code(operation, returncode, self.classifier)
        return stdout

    async def create(self) -> None:
        """Write the agent plist."""
        self._write_plist()

    async def start(self) -> None:
        """Load the agent, which starts it (RunAtLoad)."""
        await self._check_launchctl(
            "Start service", "load", "-w", str(self.plist_path)
        )

    async def stop(self) -> None:
        """Unload the agent, which stops it."""
        await self._check_launchctl("Stop service", "unload", str(self.plist_path))

    async def status(self) -> ServiceStatus:
        """Get service status from launchctl."""
        returncode, stdout, _ = await self._run_launchctl("list", self.label)

        if returncode != 0:
            # Not loaded; installed only if the plist is still on disk
            if not self.plist_path.exists():
                return ServiceStatus(state=ServiceState.NOT_INSTALLED)
            return ServiceStatus(state=ServiceState.STOPPED)

        pid, last_exit = parse_list_output(stdout)

        # If we have a PID, service is running
        if pid and pid > 0:
            resource_info = get_process_info(pid)
            return ServiceStatus(
                state=ServiceState.RUNNING,
                pid=pid,
                memory_mb=resource_info.get("memory_mb") if resource_info else None,
                cpu_percent=resource_info.get("cpu_percent") if resource_info else None,
            )

        if last_exit is not None and last_exit != 0:
            return ServiceStatus(
                state=ServiceState.FAILED,
                message=f"Last exit status: {last_exit}",
            )

        return ServiceStatus(state=ServiceState.STOPPED)

    async def mark_for_deletion(self) -> None:
        """Remove the agent plist."""
        if not self.plist_path.exists():
            raise ServiceError.from_code(
                "Delete service", NOT_INSTALLED_CODE, self.classifier
            )
        self.plist_path.unlink()

    def _write_plist(self) -> None:
        """Generate and write the launchd plist file."""
        log_path = get_service_log_path(self.spec.name)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        plist = {
            "Label": self.label,
            "ProgramArguments": self.spec.command,
            "RunAtLoad": True,
            "KeepAlive": {"SuccessfulExit": False},
            "StandardOutPath": str(log_path),
            "StandardErrorPath": str(log_path),
        }

        self.plist_path.parent.mkdir(parents=True, exist_ok=True)
        with self.plist_path.open("wb") as f:
            plistlib.dump(plist, f)

    def get_log_source(self) -> Path:
        """Get the log file path."""
        return get_service_log_path(self.spec.name)


def parse_list_output(output: str) -> tuple[int | None, int | None]:
    """Extract PID and LastExitStatus from `launchctl list <label>` output.

    The output looks like:
        {
            "PID" = 1234;
            "LastExitStatus" = 0;
            ...
        }
    """
    pid = None
    last_exit = None

    for line in output.strip().split("\n"):
        parts = line.strip().replace('"', "").replace(";", "").split("=")
        if len(parts) != 2:
            continue
        key, value = parts[0].strip(), parts[1].strip()
        if key == "PID" and value.isdigit():
            pid = int(value)
        elif key == "LastExitStatus" and value.lstrip("-").isdigit():
            last_exit = int(value)

    return pid, last_exit
