"""Logging config for the application.

Events are rendered by structlog through the stdlib `logging` machinery,
to stderr so that stdout is left to the CLI reports.
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

from contact_store import settings

if TYPE_CHECKING:
    from structlog.types import Processor

__all__ = ["configure"]

default_processors: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure(level: str | None = None, log_format: str | None = None) -> None:
    """Configure the stdlib root logger and structlog.

    Args:
        level: Log level name, defaults to `settings.log.LEVEL`.
        log_format: `"console"` or `"json"`, defaults to `settings.log.FORMAT`.
    """
    level = (level or settings.log.LEVEL).upper()
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=default_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(log_format or settings.log.FORMAT),
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    if settings.db.ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    structlog.configure(
        processors=[
            *default_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    structlog.contextvars.bind_contextvars(app=settings.app.NAME)
