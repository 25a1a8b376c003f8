"""Utility functions for timesafer."""

from .logging import VERBOSE, get_log_level, get_logger, setup_logging

__all__ = ["VERBOSE", "get_log_level", "get_logger", "setup_logging"]
