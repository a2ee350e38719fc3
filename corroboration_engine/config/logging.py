"""Loguru configuration for the engine's synchronous components.

Logs always go to stderr so ``corroboration-engine evaluate --json`` can be
piped without log lines mixed into the result.
"""

import sys
from typing import Optional

from loguru import logger

from corroboration_engine.config.settings import settings

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | <level>{message}</level>"
)


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    (Re)configure the loguru sink.

    Args:
        level: Overrides ENGINE_LOG_LEVEL
        fmt: ``console`` or ``json``; overrides ENGINE_LOG_FORMAT. Console
            output is only used on a TTY.
    """
    level = (level or settings.log_level).upper()
    fmt = (fmt or settings.log_format).lower()

    logger.remove()
    logger.configure(extra={"component": "engine"})

    if fmt == "console" and sys.stderr.isatty():
        logger.add(sys.stderr, format=_CONSOLE_FORMAT, level=level, colorize=True)
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level=level,
            serialize=True,
            diagnose=False,
        )


def get_logger(component: str):
    """
    Logger bound to a component name.

    Example:
        >>> log = get_logger("source_normalizer")
        >>> log.debug("Dropping candidate without usable URL")
    """
    return logger.bind(component=component)


configure_logging()

__all__ = ["logger", "get_logger", "configure_logging"]
