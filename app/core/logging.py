"""
Logging setup for Leave Request Service.

All modules obtain their logger through get_logger() so that a single
stream handler, configured from LOG_LEVEL, is installed once per process.
"""

import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Install the root handler. Calling it again only updates the level."""
    global _configured

    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # Quiet chatty third-party loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger, configuring logging on first use.

    Args:
        name: Logger name, usually __name__

    Returns:
        Configured logger instance
    """
    if not _configured:
        setup_logging()
    return logging.getLogger(name)
