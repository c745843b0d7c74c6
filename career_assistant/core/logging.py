"""Logging configuration for the career assistant backend."""

import logging
import sys
from typing import Optional

from career_assistant.core.config import get_settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a configured logger instance."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
    if level is None:
        level = logging.getLevelName(get_settings().log_level.upper())
    logger.setLevel(level)
    return logger
