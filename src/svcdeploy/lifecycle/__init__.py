"""Service lifecycle orchestration.

Example:
    from svcdeploy.lifecycle import build_orchestrator

    orchestrator = build_orchestrator(manager, "My worker", wait_ms=10_000)
    await orchestrator.run()
"""

from svcdeploy.lifecycle.orchestrator import (
    Installer,
    LifecycleOrchestrator,
    Uninstaller,
    build_orchestrator,
)
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

__all__ = [
    "ConfirmationGate",
    "ConsoleGate",
    "ConsoleInputReader",
    "ConsoleNotifier",
    "InputReader",
    "Installer",
    "LifecycleDecision",
    "LifecycleOrchestrator",
    "NoPauseReader",
    "Notifier",
    "Stage",
    "StageOutcome",
    "Uninstaller",
    "WaitSpec",
    "build_orchestrator",
    "run_stage",
]
