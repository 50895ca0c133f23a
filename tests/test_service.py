"""Tests for service layer."""

import asyncio

import pytest

from shortener.errors import (
    CapacityExhaustedError,
    DataStoreError,
    InvalidShortCodeError,
    InvalidURLError,
    ShortCodeTakenError,
)
from shortener.service import URLShortenerService

from .conftest import FailingStore, ScriptedGenerator


def sample(metrics, name, labels=None):
    return metrics.registry.get_sample_value(name, labels or {})


class TestURLShortenerService:
    """Test URL shortener service."""

    async def test_shorten_returns_code(self, service, store, sample_urls):
        short_code = await service.shorten(sample_urls[0])

        assert len(short_code) == 6
        link = await store.lookup(short_code)
        assert link.target == sample_urls[0]

    async def test_same_url_gets_new_code(self, service, store, sample_urls):
        first = await service.shorten(sample_urls[0])
        second = await service.shorten(sample_urls[0])

        assert first != second
        assert len(store) == 2

    async def test_shorten_with_name(self, service, store, sample_urls):
        short_code = await service.shorten(sample_urls[1], name="myrepo")

        assert short_code == "myrepo"
        assert (await store.lookup("myrepo")).target == sample_urls[1]

    async def test_duplicate_name_rejected(self, service, store, sample_urls):
        await service.shorten(sample_urls[0], name="duplicate")

        with pytest.raises(ShortCodeTakenError, match="already exists"):
            await service.shorten(sample_urls[1], name="duplicate")

        assert (await store.lookup("duplicate")).target == sample_urls[0]

    async def test_invalid_name_rejected(self, service, store, sample_urls):
        with pytest.raises(InvalidShortCodeError, match="reserved"):
            await service.shorten(sample_urls[0], name="metrics")

        with pytest.raises(InvalidShortCodeError):
            await service.shorten(sample_urls[0], name="a/b/c/d")

        assert len(store) == 0

    async def test_custom_codes_disabled(self, store, metrics, sample_urls):
        service = URLShortenerService(store=store, metrics=metrics, enable_custom_codes=False)

        with pytest.raises(InvalidShortCodeError, match="not enabled"):
            await service.shorten(sample_urls[0], name="myrepo")

    async def test_invalid_url(self, service, store, metrics):
        """Test invalid URL rejection."""
        with pytest.raises(InvalidURLError, match="Invalid URL"):
            await service.shorten("not-a-url")

        assert len(store) == 0
        assert sample(metrics, "shortener_errors_total", {"type": "validation"}) == 1

    async def test_collision_retries_with_new_code(self, store, metrics, logger, sample_urls):
        generator = ScriptedGenerator(["aaaaaa", "aaaaaa", "bbbbbb"])
        service = URLShortenerService(store=store, short_code_generator=generator, metrics=metrics, logger=logger)

        assert await service.shorten(sample_urls[0]) == "aaaaaa"
        assert await service.shorten(sample_urls[1]) == "bbbbbb"

        assert generator.calls == 3
        assert (await store.lookup("aaaaaa")).target == sample_urls[0]
        assert sample(metrics, "shortener_errors_total", {"type": "duplicate_key"}) == 1

    async def test_capacity_exhausted_after_bounded_retries(self, store, metrics, logger, sample_urls):
        await store.insert_if_absent("aaaaaa", sample_urls[0])
        generator = ScriptedGenerator(["aaaaaa"])
        service = URLShortenerService(
            store=store,
            short_code_generator=generator,
            metrics=metrics,
            logger=logger,
            max_collision_retries=3,
        )

        with pytest.raises(CapacityExhaustedError, match="3 attempts"):
            await service.shorten(sample_urls[1])

        assert generator.calls == 3
        assert len(store) == 1
        assert sample(metrics, "shortener_errors_total", {"type": "capacity"}) == 1

    def test_invalid_retry_budget(self, store):
        with pytest.raises(ValueError):
            URLShortenerService(store=store, max_collision_retries=0)

    async def test_store_failure_propagates(self, metrics, sample_urls):
        service = URLShortenerService(store=FailingStore(), metrics=metrics)

        with pytest.raises(DataStoreError):
            await service.shorten(sample_urls[0])

        assert sample(metrics, "shortener_errors_total", {"type": "database"}) == 1
        assert sample(metrics, "shortener_urls_created_total") == 0

    async def test_metrics_recorded(self, service, metrics, sample_urls):
        await service.shorten(sample_urls[0])
        await service.shorten(sample_urls[1])

        assert sample(metrics, "shortener_urls_created_total") == 2
        assert sample(metrics, "shortener_store_writes_total") == 2
        assert sample(metrics, "shortener_store_write_duration_seconds_count") == 2

    async def test_concurrent_shorten_unique_codes(self, service, store):
        """Concurrent calls, half of them for the same URL, all get distinct codes."""
        urls = ["https://example.com/same"] * 100 + [f"https://example.com/{i}" for i in range(100)]

        codes = await asyncio.gather(*[service.shorten(url) for url in urls])

        assert len(set(codes)) == len(urls)
        assert len(store) == len(urls)

    async def test_concurrent_shorten_in_small_code_space(self, store, metrics, logger):
        """Codes of length 1 collide constantly; successful calls still never share a code."""
        from shortener.shortcode import ShortCodeGenerator

        service = URLShortenerService(
            store=store,
            short_code_generator=ShortCodeGenerator(default_length=1),
            metrics=metrics,
            logger=logger,
            max_collision_retries=500,
        )

        codes = await asyncio.gather(*[service.shorten(f"https://example.com/{i}") for i in range(40)])

        assert len(set(codes)) == 40
