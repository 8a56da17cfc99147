"""Lifecycle run command."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from svcdeploy.cli.console import console


def register(app: typer.Typer) -> None:
    """Register the run command."""

    @app.command()
    def run(
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        yes: Annotated[
            bool,
            typer.Option(
                "--yes",
                "-y",
                help="Proceed without asking for confirmation",
            ),
        ] = False,
        wait_ms: Annotated[
            int | None,
            typer.Option(
                "--wait-ms",
                min=0,
                help="Milliseconds to keep the service installed",
            ),
        ] = None,
        backend: Annotated[
            str | None,
            typer.Option(
                "--backend",
                "-b",
                help="Service backend (systemd, launchd, windows)",
            ),
        ] = None,
        no_pause: Annotated[
            bool,
            typer.Option(
                "--no-pause",
                help="Exit without waiting for Enter at the end",
            ),
        ] = False,
    ) -> None:
        """Install the service, keep it running for a while, then uninstall it."""
        from svcdeploy.cli.runtime import create_manager_or_exit, load_config_or_exit
        from svcdeploy.lifecycle import build_orchestrator
        from svcdeploy.logging import configure_logging

        configure_logging()

        deployer_config = load_config_or_exit(config)
        manager = create_manager_or_exit(deployer_config, backend)
        lifecycle = deployer_config.lifecycle

        orchestrator = build_orchestrator(
            manager,
            service_display_name=deployer_config.service.display_name,
            wait_ms=wait_ms if wait_ms is not None else lifecycle.wait_ms,
            assume_yes=yes or lifecycle.assume_yes,
            pause=not no_pause,
            console=console,
        )
        asyncio.run(orchestrator.run())
