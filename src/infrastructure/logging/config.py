"""
Structured logging configuration.

All modules log through ``structlog.get_logger(__name__)``; this module wires
the processor chain once at start-up.
"""

import logging
import sys
from typing import Iterable, Optional

import structlog

from src.infrastructure.logging.sanitization import LogSanitizer, StructlogSanitizer
from src.shared.types import LogFormat


def configure_logging(
    level: str = "INFO",
    fmt: LogFormat = LogFormat.JSON,
    secrets: Iterable[Optional[str]] = ()
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Minimum log level name
        fmt: JSON for production, console for local development
        secrets: Credential values to redact from every event
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True
    )

    if fmt == LogFormat.CONSOLE:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            StructlogSanitizer(LogSanitizer(known_secrets=secrets)),
            renderer
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
