"""CLI command modules."""

from svcdeploy.cli.commands import (
    config,
    errors,
    run,
    service,
    worker,
)

__all__ = [
    "config",
    "errors",
    "run",
    "service",
    "worker",
]
