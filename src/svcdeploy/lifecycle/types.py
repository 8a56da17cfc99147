"""Value types for a lifecycle run."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from svcdeploy.errors import UNCLASSIFIED_CODE, ErrorRecord, ServiceError

logger = logging.getLogger(__name__)


class LifecycleDecision(Enum):
    """Operator's answer at the confirmation gate."""

    PROCEED = "proceed"
    ABORT = "abort"


class Stage(Enum):
    """A step of the workflow that produces an outcome."""

    INSTALL = "installation"
    UNINSTALL = "uninstallation"
    START = "start"
    STOP = "stop"


@dataclass(frozen=True)
class StageOutcome:
    """Result of running one stage.

    error is set iff the primitive raised; detail then holds the raw
    failure text. Otherwise detail is the primitive's boolean result.
    """

    stage: Stage
    succeeded: bool
    detail: str
    error: ErrorRecord | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def message(self) -> str:
        """Operator-facing summary line."""
        if self.error is not None:
            return f"Service {self.stage.value} failed: {self.detail}"
        return f"Service {self.stage.value} success: {self.succeeded}"


@dataclass(frozen=True)
class WaitSpec:
    """Observation window between install and uninstall."""

    duration_ms: int = 10_000

    @property
    def seconds(self) -> str:
        """Duration in seconds, without a trailing '.0' for whole values."""
        value = self.duration_ms / 1000
        return str(int(value)) if value.is_integer() else str(value)


async def run_stage(
    stage: Stage, primitive: Callable[[], Awaitable[bool]]
) -> StageOutcome:
    """Invoke a primitive and capture its result or failure as an outcome.

    Never raises for failures of the primitive itself.
    """
    try:
        result = await primitive()
    except ServiceError as e:
        logger.info("%s stage raised %s", stage.name.lower(), e.operation)
        return StageOutcome(stage, succeeded=False, detail=str(e), error=e.record)
    except Exception as e:
        logger.info("%s stage raised an unexpected error", stage.name.lower())
        logger.debug("%s stage traceback", stage.name.lower(), exc_info=True)
        return StageOutcome(
            stage,
            succeeded=False,
            detail=str(e),
            error=ErrorRecord(raw_code=UNCLASSIFIED_CODE, message=str(e)),
        )

    succeeded = bool(result)
    logger.info("%s stage returned %s", stage.name.lower(), succeeded)
    return StageOutcome(stage, succeeded=succeeded, detail=str(succeeded))
