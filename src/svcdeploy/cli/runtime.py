"""Shared bootstrap helpers for CLI entrypoints."""

from pathlib import Path

import typer
from pydantic import ValidationError

from svcdeploy.cli.console import console, error
from svcdeploy.config import ConfigError, DeployerConfig, load_config
from svcdeploy.errors import ServiceError
from svcdeploy.service import ServiceManager


def load_config_or_exit(path: Path | None) -> DeployerConfig:
    """Load configuration, printing a readable error and exiting on failure."""
    try:
        return load_config(path)
    except FileNotFoundError as e:
        error(str(e))
        raise typer.Exit(1) from None
    except ConfigError as e:
        error(str(e))
        raise typer.Exit(1) from None
    except ValidationError as e:
        error("Configuration validation failed:")
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            console.print(f"  [yellow]{loc}[/yellow]: {err['msg']}", soft_wrap=True)
        raise typer.Exit(1) from None


def create_manager_or_exit(
    config: DeployerConfig, backend: str | None = None
) -> ServiceManager:
    """Build the service manager, exiting when no backend can be used."""
    from svcdeploy.service import create_service_manager

    try:
        return create_service_manager(config, backend)
    except (ServiceError, ValueError) as e:
        error(str(e))
        raise typer.Exit(1) from None
