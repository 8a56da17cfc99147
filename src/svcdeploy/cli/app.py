"""Main CLI application."""

import typer

from svcdeploy.cli.commands import config, errors, run, service, worker

app = typer.Typer(
    name="svcdeploy",
    help="svcdeploy - install, observe and remove an OS background service",
    no_args_is_help=True,
)

run.register(app)
service.register(app)
worker.register(app)
errors.register(app)
config.register(app)


def main() -> None:
    """Entry point for the svcdeploy command."""
    app()
