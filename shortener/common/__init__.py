"""Common utilities for URL shortener."""

from .validators import is_valid_url, is_valid_short_code
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "setup_logging",
    "get_logger",
]
