"""Centralized logging configuration for svcdeploy.

This module provides a single point of truth for logging setup.
All entry points (CLI commands, the worker) should call configure_logging()
early.

Logging Levels:
- DEBUG: Platform command output, gate decisions
- INFO: Stage results and failures, worker heartbeats
- WARNING: Timeouts waiting for a service state
- ERROR: Failures that abort a command
"""

import logging
import os
from pathlib import Path

ENV_VAR = "SVCDEPLOY_LOG_LEVEL"

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ComponentFormatter(logging.Formatter):
    """Formatter that extracts component name from logger path.

    Converts full module paths to short component names:
    - svcdeploy.service.backends.systemd -> service
    - svcdeploy.lifecycle.orchestrator -> lifecycle
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = record.name.split(".")
        if len(parts) >= 2 and parts[0] == "svcdeploy":
            record.component = parts[1]
        else:
            record.component = parts[0]
        return super().format(record)


def resolve_level(level: str | None, default: str = "WARNING") -> int:
    """Resolve a level name, falling back to SVCDEPLOY_LOG_LEVEL then default."""
    if level is None:
        level = os.environ.get(ENV_VAR, default)
    level = level.upper()
    if level not in VALID_LEVELS:
        level = default
    return getattr(logging, level)


def configure_logging(
    level: str | None = None,
    use_rich: bool = False,
    log_file: Path | None = None,
    default_level: str = "WARNING",
) -> None:
    """Configure logging for svcdeploy.

    Call this once at startup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses SVCDEPLOY_LOG_LEVEL env var or default_level.
        use_rich: Use Rich handler for colorful output.
        log_file: Also append plain-text logs to this file.
        default_level: Level used when neither level nor env var is set.
    """
    log_level = resolve_level(level, default_level)

    handlers: list[logging.Handler] = []

    if use_rich:
        from rich.logging import RichHandler

        console_handler: logging.Handler = RichHandler(
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        console_handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            ComponentFormatter(
                "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    handlers.append(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            ComponentFormatter(
                "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True,
    )
