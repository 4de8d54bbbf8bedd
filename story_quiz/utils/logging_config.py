"""Logging configuration helpers for the story quiz application."""

from __future__ import annotations

import logging
from logging import Logger


def configure_logging(level: str = "INFO") -> Logger:
    """Configure basic logging for the application and return the package logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # Third-party request logging is noisy at INFO.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return logging.getLogger("story_quiz")
