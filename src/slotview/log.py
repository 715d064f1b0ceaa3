"""
Logging setup for slotview, backed by loguru.

slotview only emits records (``logger.debug`` in the reader); it does not install
sinks on import and disables its own records until configure_logging is called.

Examples:
    >>> from slotview.io import ReaderSettings
    >>> from slotview.log import configure_logging
    >>> configure_logging(settings=ReaderSettings.load())  # doctest: +SKIP
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from slotview.io.config import ReaderSettings

__all__ = ["LOG_FORMAT", "configure_logging", "logger"]

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}"


def configure_logging(
    level: str | None = None,
    sink: Any = None,
    fmt: str = LOG_FORMAT,
    *,
    settings: ReaderSettings | None = None,
) -> int:
    """
    Replace loguru's sinks with a single sink and enable slotview records.

    Args:
        level (str | None): Minimum level (e.g. "DEBUG"). Wins over ``settings``.
        sink: Any loguru sink; defaults to stderr.
        fmt (str): loguru format string.
        settings (ReaderSettings | None): Source of ``log_level`` when ``level`` is None.

    Returns:
        int: Handler id returned by ``logger.add``.

    Notes:
        ``logger.remove()`` drops every existing handler, including ones an
        application installed; call this once at startup.
    """
    if level is None:
        level = settings.log_level if settings is not None else "INFO"
    level = level.upper()
    logger.remove()
    handler_id = logger.add(
        sink if sink is not None else sys.stderr,
        level=level,
        format=fmt,
        backtrace=False,
        diagnose=False,
    )
    logger.enable("slotview")
    logger.info("slotview logging configured at {}", level)
    return handler_id
