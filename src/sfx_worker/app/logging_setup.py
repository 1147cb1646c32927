"""Process-wide loguru configuration."""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level> | {extra}"
)


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with one stderr sink at ``level``.

    Keyword arguments passed to logging calls land in ``extra`` and are
    rendered after the message.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, backtrace=False, diagnose=False)
