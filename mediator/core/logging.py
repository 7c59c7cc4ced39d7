"""Structured logging setup.

Every module logs through ``structlog.get_logger(__name__)``; this module only
decides how those events are rendered.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console


if TYPE_CHECKING:
    from mediator.config.logging import LoggingSettings


def _shared_processors(show_time: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
    ]
    if show_time:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    return processors


def setup_logging(
    json_logs: bool = False,
    log_level_name: str = "INFO",
    show_time: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        json_logs: Render events as JSON lines instead of the console format
        log_level_name: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        show_time: Whether to add an ISO timestamp to each event
    """
    level = logging.getLevelName(log_level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {log_level_name}")

    processors = _shared_processors(show_time)
    if json_logs:
        processors.extend(
            [
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                exception_formatter=structlog.dev.RichTracebackFormatter(
                    show_locals=False
                ),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def setup_logging_from_settings(settings: "LoggingSettings") -> None:
    """Configure logging from :class:`~mediator.config.logging.LoggingSettings`.

    ``auto`` renders to the console on a terminal and to JSON otherwise.
    """
    if settings.format == "auto":
        json_logs = not Console(stderr=True).is_terminal
    else:
        json_logs = settings.format == "json"

    setup_logging(
        json_logs=json_logs,
        log_level_name=settings.level,
        show_time=settings.show_time,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound logger instance
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
