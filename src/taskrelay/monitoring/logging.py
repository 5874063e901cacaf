"""Structured logging setup shared by the bot, scheduler and CLI."""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

_CONFIGURED = False


def configure_logging(level: str = "INFO", *, force: bool = False) -> None:
    """Configure structlog on top of the standard logging module.

    Args:
        level: Minimum log level name (DEBUG, INFO, WARNING, ...)
        force: Reconfigure even if logging was already set up
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
