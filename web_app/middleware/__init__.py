"""Middleware for URL shortener web app."""

from .logging import LoggingMiddleware
from .metrics import MetricsMiddleware

__all__ = ["LoggingMiddleware", "MetricsMiddleware"]
