"""Structlog setup for the async side of the engine (oracle, link checks, pipeline).

Every pipeline run gets a correlation id; loggers created with it carry the
id on each event so one claim's oracle retries, link checks and final
verdict can be followed together.
"""

import logging
import sys
import uuid
from typing import Any, Optional

import structlog
from structlog.contextvars import bind_contextvars, merge_contextvars

from corroboration_engine.config.settings import settings


def configure_structured_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Configure structlog processors and output.

    Args:
        level: Overrides ENGINE_LOG_LEVEL
        fmt: ``console`` (TTY only) or ``json``; overrides ENGINE_LOG_FORMAT
    """
    level_name = (level or settings.log_level).upper()
    fmt = (fmt or settings.log_format).lower()

    processors: list[Any] = [
        merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if fmt == "console" and sys.stderr.isatty():
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_correlation_id() -> str:
    """New id for one engine run."""
    return uuid.uuid4().hex


def bind_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind a correlation id to the current context (new one when omitted)."""
    correlation_id = correlation_id or get_correlation_id()
    bind_contextvars(correlation_id=correlation_id)
    return correlation_id


def get_structured_logger(
    name: str,
    correlation_id: Optional[str] = None,
    **context: Any,
) -> structlog.BoundLogger:
    """
    Logger tagged with ``component=name`` plus any bound context.

    Example:
        >>> log = get_structured_logger("link_verifier", correlation_id=cid)
        >>> log.info("best_links_verified", live=3, dead=1)
    """
    log = structlog.get_logger().bind(component=name)
    if correlation_id:
        log = log.bind(correlation_id=correlation_id)
    if context:
        log = log.bind(**context)
    return log


configure_structured_logging()


__all__ = [
    "bind_correlation_id",
    "configure_structured_logging",
    "get_correlation_id",
    "get_structured_logger",
]
