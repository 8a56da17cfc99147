"""Operator-facing collaborators of the lifecycle run.

The orchestrator only depends on the protocols below; the console
implementations are wired in by the CLI and replaced by fakes in tests.
"""

from typing import Protocol, runtime_checkable

import typer
from rich.console import Console

from svcdeploy.lifecycle.types import LifecycleDecision


@runtime_checkable
class ConfirmationGate(Protocol):
    """Asks the operator whether the run should proceed."""

    def decide(self) -> LifecycleDecision:
        """Block until the operator decides."""
        ...


@runtime_checkable
class Notifier(Protocol):
    """One-way channel for status lines."""

    def present(self, message: str) -> None: ...


@runtime_checkable
class InputReader(Protocol):
    """Final acknowledgement before the process exits."""

    def read(self) -> None: ...


class ConsoleGate:
    """Yes/no confirmation on the terminal.

    assume_yes answers PROCEED without prompting.
    """

    def __init__(self, prompt: str, assume_yes: bool = False):
        self.prompt = prompt
        self.assume_yes = assume_yes

    def decide(self) -> LifecycleDecision:
        if self.assume_yes or typer.confirm(self.prompt, default=False):
            return LifecycleDecision.PROCEED
        return LifecycleDecision.ABORT


class ConsoleNotifier:
    """Prints status lines verbatim (platform text may contain brackets)."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def present(self, message: str) -> None:
        self.console.print(message, markup=False, highlight=False, soft_wrap=True)


class ConsoleInputReader:
    """Waits for Enter. End of input counts as acknowledgement."""

    def __init__(
        self, console: Console | None = None, prompt: str = "Press Enter to exit..."
    ):
        self.console = console or Console()
        self.prompt = prompt

    def read(self) -> None:
        try:
            self.console.input(self.prompt)
        except EOFError:
            # stdin closed (piped or detached); nothing left to wait for
            self.console.print()


class NoPauseReader:
    """Input reader for unattended runs."""

    def read(self) -> None:
        return None
