"""Structured logging for allometric fits using structlog."""

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from allometry.config.settings import LoggingConfig


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Send allometry log events to stderr at the given level.

    The package never configures logging on import; call this once from
    the application or notebook that uses it.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: If True, render each event as one JSON line.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _renderer(json_output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def configure_from_config(config: "LoggingConfig") -> None:
    """Configure logging from a validated LoggingConfig."""
    configure_logging(level=config.level, json_output=config.json_output)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger for a module, bound lazily to the current configuration."""
    return structlog.get_logger(name)
