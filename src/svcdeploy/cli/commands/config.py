"""Configuration management commands."""

from pathlib import Path
from typing import Annotated

import click
import typer

from svcdeploy.cli.console import console, dim, error, success


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, validate, paths"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: search standard locations)",
            ),
        ] = None,
    ) -> None:
        """Inspect configuration."""
        if action is None:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        from rich.syntax import Syntax

        from svcdeploy.cli.console import create_table
        from svcdeploy.cli.runtime import load_config_or_exit
        from svcdeploy.config import find_config_path
        from svcdeploy.config.paths import get_all_paths

        if action == "show":
            try:
                config_path = find_config_path(path)
            except FileNotFoundError as e:
                error(str(e))
                raise typer.Exit(1) from None

            if config_path is None:
                dim("No config file found, using built-in defaults")
                return

            # Display raw TOML with syntax highlighting
            content = config_path.read_text()
            syntax = Syntax(content, "toml", theme="monokai", line_numbers=True)
            console.print(f"[bold]Config file: {config_path}[/bold]\n")
            console.print(syntax)

        elif action == "validate":
            config_obj = load_config_or_exit(path)

            table = create_table(
                "Configuration Summary",
                [
                    ("Setting", "cyan"),
                    ("Value", "green"),
                ],
            )
            service = config_obj.service
            lifecycle = config_obj.lifecycle
            table.add_row("Service name", service.name)
            table.add_row("Display name", service.display_name)
            table.add_row(
                "Command",
                " ".join(service.command) if service.command else "svcdeploy worker",
            )
            table.add_row("Backend", service.backend)
            table.add_row("Wait", f"{lifecycle.wait_ms} ms")
            table.add_row("State timeout", f"{lifecycle.state_timeout:g}s")
            table.add_row("Removal timeout", f"{lifecycle.removal_timeout:g}s")

            success("Configuration is valid!")
            console.print()
            console.print(table)

        elif action == "paths":
            table = create_table("Paths", [("Name", "cyan"), ("Path", "")])
            for name, value in get_all_paths().items():
                table.add_row(name, str(value))
            console.print(table)

        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: show, validate, paths")
            raise typer.Exit(1)
