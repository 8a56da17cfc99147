"""Service management commands."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from svcdeploy.cli.console import console, error, success, warning
from svcdeploy.lifecycle.types import Stage

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to configuration file"),
]
BackendOption = Annotated[
    str | None,
    typer.Option(
        "--backend", "-b", help="Service backend (systemd, launchd, windows)"
    ),
]


def _run_service_action(
    stage: Stage, config_path: Path | None, backend: str | None
) -> None:
    """Run one service primitive and report its outcome.

    Args:
        stage: Which ServiceManager action to run.
        config_path: Explicit config file, or None for the default search.
        backend: Backend override.
    """
    from svcdeploy.cli.runtime import create_manager_or_exit, load_config_or_exit
    from svcdeploy.lifecycle import run_stage
    from svcdeploy.logging import configure_logging

    configure_logging()
    manager = create_manager_or_exit(load_config_or_exit(config_path), backend)
    actions = {
        Stage.INSTALL: manager.install,
        Stage.UNINSTALL: manager.uninstall,
        Stage.START: manager.start,
        Stage.STOP: manager.stop,
    }
    outcome = asyncio.run(run_stage(stage, actions[stage]))

    if outcome.succeeded:
        success(outcome.message)
        return

    if outcome.failed:
        error(outcome.message)
    else:
        warning(f"{outcome.message} (expected state not reached in time)")
    raise typer.Exit(1)


def register(app: typer.Typer) -> None:
    """Register service subcommands."""
    service_app = typer.Typer(
        help="Manage the deployed service step by step", no_args_is_help=True
    )
    app.add_typer(service_app, name="service")

    @service_app.command("install")
    def service_install(
        config: ConfigOption = None, backend: BackendOption = None
    ) -> None:
        """Create and start the service."""
        _run_service_action(Stage.INSTALL, config, backend)

    @service_app.command("uninstall")
    def service_uninstall(
        config: ConfigOption = None, backend: BackendOption = None
    ) -> None:
        """Stop the service and remove it."""
        _run_service_action(Stage.UNINSTALL, config, backend)

    @service_app.command("start")
    def service_start(
        config: ConfigOption = None, backend: BackendOption = None
    ) -> None:
        """Start the installed service."""
        _run_service_action(Stage.START, config, backend)

    @service_app.command("stop")
    def service_stop(config: ConfigOption = None, backend: BackendOption = None) -> None:
        """Stop the running service."""
        _run_service_action(Stage.STOP, config, backend)

    @service_app.command("status")
    def service_status(
        config: ConfigOption = None, backend: BackendOption = None
    ) -> None:
        """Show service status."""
        from svcdeploy.cli.console import create_table
        from svcdeploy.cli.runtime import create_manager_or_exit, load_config_or_exit
        from svcdeploy.service import ServiceState

        manager = create_manager_or_exit(load_config_or_exit(config), backend)
        status = asyncio.run(manager.status())

        table = create_table(
            "Service Status",
            [
                ("Property", "cyan"),
                ("Value", ""),
            ],
        )

        state_colors = {
            ServiceState.RUNNING: "green",
            ServiceState.STOPPED: "yellow",
            ServiceState.FAILED: "red",
            ServiceState.STARTING: "cyan",
            ServiceState.STOPPING: "cyan",
            ServiceState.NOT_INSTALLED: "dim",
            ServiceState.UNKNOWN: "dim",
        }
        state_color = state_colors.get(status.state, "white")
        table.add_row("Service", manager.service_name)
        table.add_row("State", f"[{state_color}]{status.state.value}[/{state_color}]")
        table.add_row("Backend", manager.backend_name)

        if status.pid:
            table.add_row("PID", str(status.pid))

        if status.memory_mb is not None:
            table.add_row("Memory", f"{status.memory_mb:.1f} MB")

        if status.cpu_percent is not None:
            table.add_row("CPU", f"{status.cpu_percent:.1f}%")

        if status.message:
            table.add_row("Message", status.message)

        console.print(table)

    @service_app.command("logs")
    def service_logs(
        config: ConfigOption = None,
        backend: BackendOption = None,
        follow: Annotated[
            bool,
            typer.Option(
                "--follow",
                "-f",
                help="Follow log output",
            ),
        ] = False,
        lines: Annotated[
            int,
            typer.Option(
                "--lines",
                "-n",
                help="Number of lines to show",
            ),
        ] = 50,
    ) -> None:
        """View service logs."""
        from svcdeploy.cli.runtime import create_manager_or_exit, load_config_or_exit

        manager = create_manager_or_exit(load_config_or_exit(config), backend)

        async def do_logs():
            async for line in manager.logs(follow=follow, lines=lines):
                console.print(line, markup=False, highlight=False)

        try:
            asyncio.run(do_logs())
        except KeyboardInterrupt:
            pass
