"""Logging configuration using structlog."""

import logging
import sys
from typing import Any

import structlog

from portainer_deploy.config import get_settings


def configure_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure structured logging for the deployer.

    Logs go to stderr so that stdout stays usable for machine-readable output.
    """
    settings = get_settings()
    level = level or settings.log_level
    log_format = log_format or settings.log_format

    # Set up standard library logging
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level),
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

    # Configure structlog
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Add renderer based on format
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
