"""HTTP metrics middleware."""

import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortener.metrics import ShortenerMetrics

UNMATCHED_PATH = "<unmatched>"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request count and latency per route template."""

    def __init__(self, app, metrics: ShortenerMetrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()

        response = await call_next(request)

        self.metrics.observe_http_request(
            method=request.method,
            path=route_template(request),
            status=response.status_code,
            duration_secs=time.perf_counter() - start_time,
        )
        return response


def route_template(request: Request) -> str:
    """Path template of the route that served the request (e.g. '/api/{short_code}').

    Routing stores the matched route in the shared scope; raw paths would
    give every short code its own label value.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_PATH
