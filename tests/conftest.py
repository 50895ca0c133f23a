"""Pytest configuration and fixtures."""

from typing import AsyncGenerator, Iterable, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortener.common.logging_config import setup_logging
from shortener.database.base import URLStore
from shortener.database.memory import InMemoryURLStore
from shortener.errors import DataStoreError
from shortener.metrics import ShortenerMetrics
from shortener.resolver import RedirectResolver
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from web_app import create_app


class ScriptedGenerator(ShortCodeGenerator):
    """Generator returning a fixed sequence of codes, then repeating the last one."""

    def __init__(self, codes: Iterable[str]):
        super().__init__(default_length=6)
        self.codes: List[str] = list(codes)
        self.calls = 0

    def generate(self, length: Optional[int] = None) -> str:
        code = self.codes[min(self.calls, len(self.codes) - 1)]
        self.calls += 1
        return code


class FailingStore(URLStore):
    """Store whose every operation fails like an unreachable database."""

    async def insert_if_absent(self, short_code, target, created_at=None):
        raise DataStoreError("connection refused")

    async def lookup(self, short_code):
        raise DataStoreError("connection refused")

    async def health_check(self):
        return False


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def metrics():
    return ShortenerMetrics()


@pytest.fixture
def store(logger):
    return InMemoryURLStore(logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def service(store, short_code_generator, metrics, logger) -> URLShortenerService:
    """Create service instance."""
    return URLShortenerService(
        store=store,
        cache=None,
        short_code_generator=short_code_generator,
        metrics=metrics,
        logger=logger,
    )


@pytest.fixture
def resolver(store, metrics, logger) -> RedirectResolver:
    return RedirectResolver(store=store, metrics=metrics, logger=logger)


@pytest.fixture
def config():
    """Test configuration, isolated from the environment's .env file."""
    return Config(_env_file=None, storage_backend="memory", redis_url=None)


@pytest.fixture
def app(config, store, metrics, logger):
    """Create test FastAPI app."""
    return create_app(config=config, store=store, metrics=metrics, logger=logger)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/page",
        "https://github.com/user/repo",
        "http://stackoverflow.com/questions/123456?tab=votes#answer",
    ]
