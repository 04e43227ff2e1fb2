# File: app/core/logging_config.py
"""
Logging setup for the content platform.

Modules log through ``logging.getLogger(__name__)``; this module only applies
the configured level and format to the root logger once per process.
"""

import logging
from typing import Optional

from app.core.config import settings

_configured = False


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure root logging from settings.

    Args:
        level: Optional level name overriding ``settings.LOG_LEVEL``

    Returns:
        The application logger
    """
    global _configured

    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    if not _configured:
        logging.basicConfig(level=log_level, format=settings.LOG_FORMAT)
        _configured = True
    else:
        logging.getLogger().setLevel(log_level)

    # SQL echo is controlled by DB_ECHO, keep the engine logger quiet otherwise
    if not settings.DB_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger = logging.getLogger("app")
    logger.info(
        f"Configured root logger effective level: {logging.getLevelName(logger.getEffectiveLevel())}"
    )
    return logger
