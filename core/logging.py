"""
Structured logging configuration.

structlog handles application logs. pymongo and motor log through the
standard library; they are routed to the same stream and held at WARNING
unless debug is on, so driver chatter does not drown the demo output.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor

from core.config import settings


DRIVER_LOGGERS = ("pymongo", "motor")


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structlog and the driver loggers.

    Development renders colored key=value lines, other environments
    emit one JSON object per line.

    Args:
        level: Level name overriding `settings.log_level`
    """
    level_name = (level or settings.log_level).upper()
    log_level = logging.getLevelName(level_name)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.is_development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(name)s %(levelname)s %(message)s",
        level=log_level,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    driver_level = logging.DEBUG if settings.debug else logging.WARNING
    for name in DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(driver_level)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a logger, optionally with context already bound.

    Usage:
        logger = get_logger(__name__, collection="contacts")
        logger.info("Contact inserted", email="johndoe@example.com")
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
