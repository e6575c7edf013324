from __future__ import annotations

import logging

from pawboard.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

# Libraries that are chatty at INFO; raised to WARNING unless LOG_LEVEL=DEBUG.
_NOISY_LOGGERS = ("sqlalchemy.engine", "passlib", "aiosqlite")


def configure_logging() -> None:
    """Install the root handler. Safe to call again; basicConfig is a no-op once set."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
