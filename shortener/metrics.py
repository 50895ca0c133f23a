"""Prometheus metrics for URL shortener.

Each application instance owns its own ``CollectorRegistry`` so several apps
(e.g. one per test) can live in the same process without duplicate
registration errors.
"""

import time
from contextlib import contextmanager
from typing import Iterator, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from . import __version__

NAMESPACE = "shortener"

# Buckets tuned for single-key store operations (seconds)
STORE_BUCKETS = (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0)


class ShortenerMetrics:
    """Container for all custom metrics of the service."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.workers = Gauge(
            "workers",
            "Number of HTTP server worker processes",
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.app_info = Gauge(
            "app_info",
            "Application build information",
            ["version"],
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.urls_created = Counter(
            "urls_created",
            "Total number of shortened URLs created",
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.errors = Counter(
            "errors",
            "Total number of errors by type",
            ["type"],
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.store_reads = Counter(
            "store_reads",
            "Total number of store read operations",
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.store_writes = Counter(
            "store_writes",
            "Total number of store write operations",
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.store_read_duration = Histogram(
            "store_read_duration_seconds",
            "Store read operation duration in seconds",
            namespace=NAMESPACE,
            buckets=STORE_BUCKETS,
            registry=self.registry,
        )
        self.store_write_duration = Histogram(
            "store_write_duration_seconds",
            "Store write operation duration in seconds",
            namespace=NAMESPACE,
            buckets=STORE_BUCKETS,
            registry=self.registry,
        )
        self.http_requests = Counter(
            "http_requests",
            "Total number of HTTP requests",
            ["method", "path", "status"],
            namespace=NAMESPACE,
            registry=self.registry,
        )
        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "path"],
            namespace=NAMESPACE,
            registry=self.registry,
        )

        self.app_info.labels(version=__version__).set(1)

    def set_workers(self, count: int) -> None:
        self.workers.set(count)

    def inc_urls_created(self) -> None:
        self.urls_created.inc()

    def inc_error(self, error_type: str) -> None:
        """Increment error counter by type (duplicate_key, database, validation, capacity)."""
        self.errors.labels(type=error_type).inc()

    def observe_store_read(self, duration_secs: float) -> None:
        self.store_reads.inc()
        self.store_read_duration.observe(duration_secs)

    def observe_store_write(self, duration_secs: float) -> None:
        self.store_writes.inc()
        self.store_write_duration.observe(duration_secs)

    @contextmanager
    def time_store_read(self) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.observe_store_read(time.perf_counter() - start)

    @contextmanager
    def time_store_write(self) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.observe_store_write(time.perf_counter() - start)

    def observe_http_request(self, method: str, path: str, status: int, duration_secs: float) -> None:
        self.http_requests.labels(method=method, path=path, status=str(status)).inc()
        self.http_request_duration.labels(method=method, path=path).observe(duration_secs)

    def render(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)

    content_type = CONTENT_TYPE_LATEST
