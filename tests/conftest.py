"""Shared test fixtures and fakes."""

import logging
from pathlib import Path

import pytest

from svcdeploy.config.paths import ENV_VAR, get_svcdeploy_home
from svcdeploy.errors import ServiceError, get_classifier
from svcdeploy.lifecycle.types import LifecycleDecision
from svcdeploy.service.base import (
    ServiceBackend,
    ServiceSpec,
    ServiceState,
    ServiceStatus,
)

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def svcdeploy_home(tmp_path: Path, monkeypatch) -> Path:
    """Point SVCDEPLOY_HOME at a temporary directory for every test."""
    home = tmp_path / "svcdeploy-home"
    monkeypatch.setenv(ENV_VAR, str(home))
    monkeypatch.delenv("SVCDEPLOY_WAIT_MS", raising=False)
    monkeypatch.delenv("SVCDEPLOY_BACKEND", raising=False)
    monkeypatch.delenv("SVCDEPLOY_LOG_LEVEL", raising=False)
    # Keep the current-directory config lookup away from the repo
    monkeypatch.chdir(tmp_path)
    get_svcdeploy_home.cache_clear()
    yield home
    get_svcdeploy_home.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging() calls made by commands under test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})


@pytest.fixture
def service_spec() -> ServiceSpec:
    return ServiceSpec(
        name="demo-worker",
        display_name="Demo worker",
        description="Worker used in tests",
        command=["/usr/bin/demo", "--flag", "two words"],
    )


# =============================================================================
# Lifecycle collaborators
# =============================================================================


class FakeGate:
    """Gate that returns a fixed decision and counts calls."""

    def __init__(self, decision: LifecycleDecision):
        self.decision = decision
        self.calls = 0

    def decide(self) -> LifecycleDecision:
        self.calls += 1
        return self.decision


class RecordingNotifier:
    """Notifier that records every message, sharing an event log."""

    def __init__(self, events: list[str]):
        self.messages: list[str] = []
        self._events = events

    def present(self, message: str) -> None:
        self.messages.append(message)
        self._events.append(f"notify:{message}")


class RecordingReader:
    def __init__(self, events: list[str]):
        self.reads = 0
        self._events = events

    def read(self) -> None:
        self.reads += 1
        self._events.append("read")


class FakeService:
    """Install/uninstall primitives with scripted results.

    A result that is an exception instance is raised instead of returned.
    """

    def __init__(
        self,
        events: list[str],
        install_result: bool | Exception = True,
        uninstall_result: bool | Exception = True,
    ):
        self._events = events
        self.install_result = install_result
        self.uninstall_result = uninstall_result
        self.install_calls = 0
        self.uninstall_calls = 0

    async def install(self) -> bool:
        self.install_calls += 1
        self._events.append("install")
        if isinstance(self.install_result, Exception):
            raise self.install_result
        return self.install_result

    async def uninstall(self) -> bool:
        self.uninstall_calls += 1
        self._events.append("uninstall")
        if isinstance(self.uninstall_result, Exception):
            raise self.uninstall_result
        return self.uninstall_result


@pytest.fixture
def events() -> list[str]:
    """Shared, ordered log of collaborator calls."""
    return []


@pytest.fixture
def proceed_gate() -> FakeGate:
    return FakeGate(LifecycleDecision.PROCEED)


@pytest.fixture
def abort_gate() -> FakeGate:
    return FakeGate(LifecycleDecision.ABORT)


@pytest.fixture
def notifier(events: list[str]) -> RecordingNotifier:
    return RecordingNotifier(events)


@pytest.fixture
def make_notifier():
    """Factory for notifiers with their own event log."""
    return lambda: RecordingNotifier([])


@pytest.fixture
def reader(events: list[str]) -> RecordingReader:
    return RecordingReader(events)


@pytest.fixture
def fake_service(events: list[str]) -> FakeService:
    return FakeService(events)


# =============================================================================
# In-memory backend
# =============================================================================


class MemoryBackend(ServiceBackend):
    """Backend that keeps service state in memory.

    Uses Win32 codes for failures, like the Service Control Manager.
    """

    def __init__(self, spec: ServiceSpec, installed: bool = False):
        super().__init__(spec)
        self.state = ServiceState.STOPPED if installed else ServiceState.NOT_INSTALLED
        self.calls: list[str] = []
        self.fail: dict[str, int] = {}

    @property
    def name(self) -> str:
        return "memory"

    @property
    def is_available(self) -> bool:
        return True

    @property
    def classifier(self):
        return get_classifier("win32")

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail:
            raise ServiceError.from_code(
                operation, self.fail[operation], self.classifier
            )

    async def create(self) -> None:
        self._maybe_fail("create")
        if self.state != ServiceState.NOT_INSTALLED:
            raise ServiceError.from_code("create", 1073, self.classifier)
        self.state = ServiceState.STOPPED

    async def start(self) -> None:
        self._maybe_fail("start")
        if self.state == ServiceState.NOT_INSTALLED:
            raise ServiceError.from_code("start", 1060, self.classifier)
        self.state = ServiceState.RUNNING

    async def stop(self) -> None:
        self._maybe_fail("stop")
        self.state = ServiceState.STOPPED

    async def status(self) -> ServiceStatus:
        self.calls.append("status")
        return ServiceStatus(state=self.state)

    async def mark_for_deletion(self) -> None:
        self._maybe_fail("mark_for_deletion")
        if self.state == ServiceState.NOT_INSTALLED:
            raise ServiceError.from_code("mark_for_deletion", 1060, self.classifier)
        self.state = ServiceState.NOT_INSTALLED

    def get_log_source(self) -> Path:
        return Path("/nonexistent/demo-worker.log")


@pytest.fixture
def memory_backend(service_spec: ServiceSpec) -> MemoryBackend:
    return MemoryBackend(service_spec)


@pytest.fixture
def available_backends(monkeypatch):
    """Report every platform backend as available on this host."""
    from svcdeploy.service.backends.launchd import LaunchdBackend
    from svcdeploy.service.backends.systemd import SystemdBackend
    from svcdeploy.service.backends.windows import WindowsBackend

    for backend_class in (LaunchdBackend, SystemdBackend, WindowsBackend):
        monkeypatch.setattr(backend_class, "is_available", property(lambda _: True))


@pytest.fixture
def unavailable_backends(monkeypatch):
    """Report every platform backend as missing on this host."""
    from svcdeploy.service.backends.launchd import LaunchdBackend
    from svcdeploy.service.backends.systemd import SystemdBackend
    from svcdeploy.service.backends.windows import WindowsBackend

    for backend_class in (LaunchdBackend, SystemdBackend, WindowsBackend):
        monkeypatch.setattr(backend_class, "is_available", property(lambda _: False))
