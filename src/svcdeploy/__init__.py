"""svcdeploy - install, observe and remove an OS-managed background service."""

__version__ = "0.1.0"
