# app/logging_config.py
from __future__ import annotations

import logging
import sys

from loguru import logger

from app.config import LOG_LEVEL


def setup_logging() -> None:
    """Console logging via loguru; call once at startup."""
    logger.remove()

    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        level=LOG_LEVEL,
        colorize=True,
    )

    # SQL echo is too chatty for request logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
