"""Error code lookup command."""

from typing import Annotated

import typer

from svcdeploy.cli.console import console, error


def register(app: typer.Typer) -> None:
    """Register the describe-error command."""

    @app.command("describe-error")
    def describe_error_command(
        code: Annotated[int, typer.Argument(help="Raw platform error code")],
        platform: Annotated[
            str,
            typer.Option(
                "--platform",
                "-p",
                help="Error code family: win32, lsb (systemctl), launchd",
            ),
        ] = "win32",
    ) -> None:
        """Explain a raw service-manager error code."""
        from svcdeploy.errors import get_classifier

        try:
            classifier = get_classifier(platform)
        except ValueError as e:
            error(str(e))
            raise typer.Exit(1) from None

        record = classifier.classify(code)
        console.print(f"[bold]{record.raw_code}[/bold]: {record.message}", soft_wrap=True)
