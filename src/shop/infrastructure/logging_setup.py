"""Logging policy for the service.

Development logs everything from DEBUG to the console. Production logs
INFO and above to the console and additionally writes ERROR records to
``errors.log``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from shop.infrastructure.config import Settings

LOGGER_NAME = "shop"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ERROR_LOG_FILE = "errors.log"


def _parse_level(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    level = getattr(logging, value.strip().upper(), None)
    return level if isinstance(level, int) else None


def configure_logging(
    settings: Settings,
    *,
    error_log: Path | None = None,
) -> logging.Logger:
    """Attach handlers to the ``shop`` logger and return it.

    Calling it again replaces the handlers installed by a previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    default_level = logging.INFO if settings.is_production else logging.DEBUG
    level = _parse_level(settings.log_level) or default_level

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if settings.is_production:
        file_handler = logging.FileHandler(error_log or Path(ERROR_LOG_FILE), encoding="utf-8")
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(min(level, logging.ERROR))
    return logger
