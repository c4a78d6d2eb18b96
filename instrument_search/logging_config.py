"""
Logging configuration for instrument search.

Sets up structlog on top of the standard library logging module so every
module can call ``structlog.get_logger(__name__)`` and emit key/value events.
Search calls bind a ``search_id`` through structlog's context variables so
log lines from the worker thread and the history write can be correlated.
"""

import logging
import sys
from typing import Optional
from uuid import uuid4

import structlog

from .config import Settings, get_settings


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structured logging.

    Args:
        settings: Application settings; the cached settings are used if omitted
    """
    settings = settings or get_settings()
    numeric_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("redis").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.LOG_FORMAT == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def bind_search_id(search_id: Optional[str] = None) -> str:
    """
    Bind a search ID to the logging context.

    Args:
        search_id: Search ID to bind, generates a new UUID if None

    Returns:
        The search ID that was bound
    """
    if search_id is None:
        search_id = str(uuid4())
    structlog.contextvars.bind_contextvars(search_id=search_id)
    return search_id


def clear_search_id() -> None:
    structlog.contextvars.unbind_contextvars("search_id")
