"""Logger access and opt-in console output for agerisk.

Modules take their logger from get_logger(__name__) and never configure
handlers themselves. The package logger carries only a NullHandler until an
entry point such as the demo app calls configure_logging(), which attaches one
stderr handler to the "agerisk" logger and leaves the root logger alone.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "agerisk"
LOG_LEVEL_ENV_VAR = "AGERISK_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    """Level from the argument, else AGERISK_LOG_LEVEL, else INFO. Unknown names map to INFO."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _stderr_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]


def configure_logging(level: Optional[Union[str, int]] = None, *, force: bool = False) -> None:
    """Send agerisk log records to stderr.

    Args:
        level: Level name or number. None reads AGERISK_LOG_LEVEL (default INFO).
        force: Drop every existing handler on the package logger first. Without it
            a second call only updates the level of the existing stderr handler.
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)

    if force:
        for h in logger.handlers[:]:
            logger.removeHandler(h)
            h.close()

    existing = _stderr_handlers(logger)
    if existing:
        for h in existing:
            h.setLevel(resolved)
        return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolved)
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """The package logger, or the named child logger (normally __name__)."""
    return logging.getLogger(name if name is not None else LOGGER_NAME)
