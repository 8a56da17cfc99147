"""Install → wait → uninstall workflow."""

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from rich.console import Console

from svcdeploy.lifecycle.prompts import (
    ConfirmationGate,
    ConsoleGate,
    ConsoleInputReader,
    ConsoleNotifier,
    InputReader,
    NoPauseReader,
    Notifier,
)
from svcdeploy.lifecycle.types import (
    LifecycleDecision,
    Stage,
    StageOutcome,
    WaitSpec,
    run_stage,
)

if TYPE_CHECKING:
    from svcdeploy.service.manager import ServiceManager

logger = logging.getLogger(__name__)


class Installer(Protocol):
    async def install(self) -> bool: ...


class Uninstaller(Protocol):
    async def uninstall(self) -> bool: ...


class LifecycleOrchestrator:
    """Runs one confirm → install → wait → uninstall pass.

    Install and uninstall failures are reported through the notifier and
    never stop the sequence; only a failing gate propagates. Uninstall is
    attempted after the wait even when install failed, so a partially
    created service still gets cleaned up.
    """

    def __init__(
        self,
        gate: ConfirmationGate,
        installer: Installer,
        uninstaller: Uninstaller,
        notifier: Notifier,
        input_reader: InputReader,
        wait: WaitSpec | None = None,
    ):
        self._gate = gate
        self._installer = installer
        self._uninstaller = uninstaller
        self._notifier = notifier
        self._input_reader = input_reader
        self._wait = wait or WaitSpec()

    async def run(self) -> None:
        decision = self._gate.decide()
        logger.debug("Gate decision: %s", decision.value)

        if decision is LifecycleDecision.PROCEED:
            await self._install()
            await self._delay_before_uninstall()
            await self._uninstall()

        self._input_reader.read()

    async def _install(self) -> StageOutcome:
        outcome = await run_stage(Stage.INSTALL, self._installer.install)
        self._notifier.present(outcome.message)
        return outcome

    async def _delay_before_uninstall(self) -> None:
        self._notifier.present(
            f"The service will wait for {self._wait.seconds} seconds "
            "before proceeding to uninstall."
        )
        await asyncio.sleep(self._wait.duration_ms / 1000)

    async def _uninstall(self) -> StageOutcome:
        # Teardown runs as its own task; it is always awaited before returning
        task = asyncio.create_task(
            run_stage(Stage.UNINSTALL, self._uninstaller.uninstall)
        )
        outcome = await task
        self._notifier.present(outcome.message)
        return outcome


def build_orchestrator(
    manager: "ServiceManager",
    service_display_name: str,
    wait_ms: int,
    assume_yes: bool = False,
    pause: bool = True,
    console: Console | None = None,
) -> LifecycleOrchestrator:
    """Wire the console collaborators around a service manager."""
    console = console or Console()
    gate = ConsoleGate(
        f"Install '{service_display_name}', keep it running for "
        f"{WaitSpec(wait_ms).seconds} seconds, then uninstall it?",
        assume_yes=assume_yes,
    )
    reader: InputReader = ConsoleInputReader(console) if pause else NoPauseReader()
    return LifecycleOrchestrator(
        gate=gate,
        installer=manager,
        uninstaller=manager,
        notifier=ConsoleNotifier(console),
        input_reader=reader,
        wait=WaitSpec(wait_ms),
    )
