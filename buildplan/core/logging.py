"""
Structured logging configuration for buildplan.

Uses structlog for key-value event logging. Events go to stderr so that plans
and rendered Gradle files written to stdout can be piped cleanly.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from .config import Config, LogFormat


class _CurrentStderr:
    """Writes to whatever ``sys.stderr`` is at call time, not at setup time."""

    def write(self, message: str) -> int:
        return sys.stderr.write(message)

    def flush(self) -> None:
        sys.stderr.flush()


def _renderer(log_format: LogFormat) -> list[structlog.types.Processor]:
    if log_format == "auto":
        log_format = "console" if sys.stderr.isatty() else "json"
    if log_format == "console":
        return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]
    return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer(sort_keys=True)]


def setup_logging(config: Config | None = None) -> None:
    """Configure logging for the CLI.

    Args:
        config: Optional configuration. If None, logs warnings and above in
            the automatically selected format.
    """
    log_level = config.log_level if config else "WARNING"
    log_format = config.log_format if config else "auto"
    level = getattr(logging, log_level, logging.WARNING)

    # Third-party libraries log through the standard library
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            *_renderer(log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=_CurrentStderr()),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance, typically for ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Bind key-value pairs to every later event in the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
