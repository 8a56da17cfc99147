"""Windows Service Control Manager backend.

Drives the SCM through sc.exe, which exits with the Win32 error code of the
failing call (e.g. 1060 when the service does not exist).
"""

import asyncio
import logging
import re
import shutil
import subprocess
import sys
from pathlib import Path

from svcdeploy.config.paths import get_service_log_path
from svcdeploy.errors import ErrorClassifier, ServiceError, get_classifier
from svcdeploy.service.base import ServiceBackend, ServiceState, ServiceStatus
from svcdeploy.service.process import get_process_info

logger = logging.getLogger(__name__)

SC_EXE = "sc.exe"

# ERROR_SERVICE_DOES_NOT_EXIST
NOT_INSTALLED_CODE = 1060

# SERVICE_STATUS.dwCurrentState values as printed by `sc queryex`
SC_STATES = {
    1: ServiceState.STOPPED,
    2: ServiceState.STARTING,  # START_PENDING
    3: ServiceState.STOPPING,  # STOP_PENDING
    4: ServiceState.RUNNING,
    5: ServiceState.STARTING,  # CONTINUE_PENDING
    6: ServiceState.STOPPING,  # PAUSE_PENDING
    7: ServiceState.STOPPED,  # PAUSED
}

_STATE_RE = re.compile(r"^\s*STATE\s*:\s*(\d+)", re.MULTILINE)
_PID_RE = re.compile(r"^\s*PID\s*:\s*(\d+)", re.MULTILINE)


class WindowsBackend(ServiceBackend):
    """Windows service backend.

    Registers a demand-start service; the command must be an executable
    that speaks the SCM protocol.
    """

    @property
    def name(self) -> str:
        return "windows"

    @property
    def is_available(self) -> bool:
        return sys.platform == "win32" and shutil.which(SC_EXE) is not None

    @property
    def classifier(self) -> ErrorClassifier:
        return get_classifier("win32")

    async def _run_sc(self, *args: str) -> tuple[int, str]:
        """Run sc.exe. Output goes to stdout for both success and failure."""
        proc = await asyncio.create_subprocess_exec(
            SC_EXE,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        stdout, _ = await proc.communicate()
        return proc.returncode or 0, stdout.decode(errors="replace")

    async def _check_sc(self, operation: str, *args: str) -> str:
        """Run sc.exe and raise ServiceError on a non-zero exit."""
        returncode, output = await self._run_sc(*args)
        if returncode != 0:
            logger.debug("sc %s exited %d: %s", args[0], returncode, output)
            raise ServiceError.from_code(operation, returncode, self.classifier)
        return output

    async def create(self) -> None:
        """Register the service with the SCM (demand start)."""
        # sc.exe expects "option= value" as two separate arguments
        await self._check_sc(
            "CreateService",
            "create",
            self.spec.name,
            "binPath=",
            subprocess.list2cmdline(self.spec.command),
            "DisplayName=",
            self.spec.display_name,
            "start=",
            "demand",
        )
        await self._check_sc(
            "ChangeServiceConfig2",
            "description",
            self.spec.name,
            self.spec.description,
        )

    async def start(self) -> None:
        await self._check_sc("StartService", "start", self.spec.name)

    async def stop(self) -> None:
        await self._check_sc("ControlService", "stop", self.spec.name)

    async def status(self) -> ServiceStatus:
        """Get service status from `sc queryex`."""
        returncode, output = await self._run_sc("queryex", self.spec.name)

        if returncode == NOT_INSTALLED_CODE:
            return ServiceStatus(state=ServiceState.NOT_INSTALLED)
        if returncode != 0:
            return ServiceStatus(
                state=ServiceState.UNKNOWN,
                message=self.classifier.describe(returncode),
            )

        state, pid = parse_queryex_output(output)
        resource_info = get_process_info(pid) if pid else None
        return ServiceStatus(
            state=state,
            pid=pid,
            memory_mb=resource_info.get("memory_mb") if resource_info else None,
            cpu_percent=resource_info.get("cpu_percent") if resource_info else None,
        )

    async def mark_for_deletion(self) -> None:
        """Mark the service for deletion.

        The SCM removes the entry once the last handle to it is closed.
        """
        await self._check_sc("DeleteService", "delete", self.spec.name)

    def get_log_source(self) -> Path:
        """Get the log file path the service is expected to write."""
        return get_service_log_path(self.spec.name)


def parse_queryex_output(output: str) -> tuple[ServiceState, int | None]:
    """Extract state and PID from `sc queryex` output."""
    state = ServiceState.UNKNOWN
    if match := _STATE_RE.search(output):
        state = SC_STATES.get(int(match.group(1)), ServiceState.UNKNOWN)

    pid = None
    if match := _PID_RE.search(output):
        pid = int(match.group(1)) or None

    return state, pid
