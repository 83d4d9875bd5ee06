"""
core/logging.py
───────────────
Root logger configuration for the API process.

Modules never configure logging themselves; they only call
``logging.getLogger(__name__)``.  The FastAPI lifespan calls
:func:`configure_logging` once at startup.
"""

import logging
from typing import Optional

from core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(settings: Optional[Settings] = None) -> int:
    """
    Apply the configured level and format to the root logger.

    Args:
        settings: Settings to read; defaults to :func:`get_settings`.

    Returns:
        The numeric level that was applied.
    """
    settings = settings or get_settings()
    level_name = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL
    level = logging.getLevelName(level_name)

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    return level
