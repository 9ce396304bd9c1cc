"""
Logging configuration for the scoring engine.
"""

import logging

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure the package logger once; safe to call repeatedly."""
    logger = logging.getLogger("tournament_pool")
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    # Keep SQLAlchemy quiet unless explicitly asked for
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
