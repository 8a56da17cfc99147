"""Worker command (the process a deployed service runs)."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer


def register(app: typer.Typer) -> None:
    """Register the worker command."""

    @app.command()
    def worker(
        interval: Annotated[
            float,
            typer.Option(
                "--interval",
                "-i",
                min=0.1,
                help="Seconds between heartbeats",
            ),
        ] = 5.0,
        log_file: Annotated[
            Path | None,
            typer.Option(
                "--log-file",
                help="Also append logs to this file",
            ),
        ] = None,
    ) -> None:
        """Run the heartbeat worker until stopped."""
        from svcdeploy.logging import configure_logging
        from svcdeploy.service.worker import run_worker

        configure_logging(log_file=log_file, default_level="INFO")
        asyncio.run(run_worker(interval=interval))
