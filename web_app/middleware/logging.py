"""Access logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable, Iterable, Optional

from shortener.common.logging_config import get_logger

# Probed every few seconds by orchestrators
QUIET_PATHS = frozenset({"/healthz", "/metrics"})


def level_for(path: str, status_code: int, quiet_paths: Iterable[str] = QUIET_PATHS) -> int:
    """Pick the log level for a finished request."""
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400 and status_code != 404:
        return logging.WARNING
    if path in quiet_paths:
        return logging.DEBUG
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """One line per request: method, path, client, status and duration."""

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or get_logger("shortener.web")

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.logger.exception(
                f"{request.method} {request.url.path} from {client_ip} failed after {duration_ms:.2f}ms"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.logger.log(
            level_for(request.url.path, response.status_code),
            f"{request.method} {request.url.path} from {client_ip} -> "
            f"{response.status_code} in {duration_ms:.2f}ms",
        )

        return response
