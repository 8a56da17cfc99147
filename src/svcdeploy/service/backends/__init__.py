"""Service backend detection and factory."""

import importlib
import sys

from svcdeploy.errors import UNCLASSIFIED_CODE, ErrorRecord, ServiceError
from svcdeploy.service.base import ServiceBackend, ServiceSpec

BACKENDS = {
    "systemd": "svcdeploy.service.backends.systemd.SystemdBackend",
    "launchd": "svcdeploy.service.backends.launchd.LaunchdBackend",
    "windows": "svcdeploy.service.backends.windows.WindowsBackend",
}


def _load_backend(name: str, spec: ServiceSpec) -> ServiceBackend:
    # Import dynamically to avoid loading unnecessary backends
    module_path, class_name = BACKENDS[name].rsplit(".", 1)
    module = importlib.import_module(module_path)
    backend_class = getattr(module, class_name)
    return backend_class(spec)


def detect_backend(spec: ServiceSpec) -> ServiceBackend:
    """Detect the service backend for the current system.

    Detection order:
    1. macOS: launchd
    2. Windows: Service Control Manager
    3. Linux: systemd (if user daemon available)

    Raises:
        ServiceError: If no supported service manager is available.
    """
    candidates = {
        "darwin": "launchd",
        "win32": "windows",
        "linux": "systemd",
    }
    name = candidates.get(sys.platform)
    if name is not None:
        backend = _load_backend(name, spec)
        if backend.is_available:
            return backend

    raise ServiceError(
        "Detect service manager",
        ErrorRecord(
            raw_code=UNCLASSIFIED_CODE,
            message=f"No supported service manager found on {sys.platform}",
        ),
    )


def get_backend(name: str | None, spec: ServiceSpec) -> ServiceBackend:
    """Get a specific backend by name, or auto-detect.

    Args:
        name: Backend name ('systemd', 'launchd', 'windows'), or None/'auto'.
        spec: The service being managed.

    Raises:
        ValueError: If the named backend doesn't exist.
        ServiceError: If the named backend's service manager is not available.
    """
    if name is None or name == "auto":
        return detect_backend(spec)

    if name not in BACKENDS:
        raise ValueError(f"Unknown backend: {name}. Available: {list(BACKENDS)}")

    backend = _load_backend(name, spec)
    if not backend.is_available:
        raise ServiceError(
            "Load service manager",
            ErrorRecord(
                raw_code=UNCLASSIFIED_CODE,
                message=f"Backend '{name}' is not available on {sys.platform}",
            ),
        )
    return backend


__all__ = ["BACKENDS", "detect_backend", "get_backend"]
