"""Utilities for traf-bench."""

from .logging import setup_logging, get_logger, LoggerMixin

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggerMixin"
]
