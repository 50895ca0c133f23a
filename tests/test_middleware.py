"""Tests for request logging middleware."""

import logging

import pytest

from web_app.middleware.logging import level_for


class TestLevelFor:

    @pytest.mark.parametrize("path,status,expected", [
        ("/api/urls", 200, logging.INFO),
        ("/api/abc123", 307, logging.INFO),
        ("/api/missing", 404, logging.INFO),
        ("/api/urls", 400, logging.WARNING),
        ("/api/urls", 409, logging.WARNING),
        ("/api/urls", 500, logging.ERROR),
        ("/healthz", 204, logging.DEBUG),
        ("/metrics", 200, logging.DEBUG),
        ("/healthz", 503, logging.ERROR),
    ])
    def test_levels(self, path, status, expected):
        assert level_for(path, status) == expected


@pytest.mark.asyncio
class TestLoggingMiddleware:

    async def test_request_line(self, client, caplog, sample_urls):
        with caplog.at_level(logging.DEBUG, logger="shortener.web"):
            await client.post("/api/urls", json={"url": sample_urls[0]})

        lines = [r for r in caplog.records if r.name == "shortener.web"]
        assert len(lines) == 1
        assert lines[0].levelno == logging.INFO
        assert "POST /api/urls" in lines[0].getMessage()
        assert "-> 200" in lines[0].getMessage()

    async def test_rejected_request_logged_as_warning(self, client, caplog):
        with caplog.at_level(logging.DEBUG, logger="shortener.web"):
            await client.post("/api/urls", json={"url": "ftp://example.com"})

        lines = [r for r in caplog.records if r.name == "shortener.web"]
        assert [r.levelno for r in lines] == [logging.WARNING]

    async def test_health_probe_logged_at_debug(self, client, caplog):
        with caplog.at_level(logging.DEBUG, logger="shortener.web"):
            await client.get("/healthz")

        lines = [r for r in caplog.records if r.name == "shortener.web"]
        assert [r.levelno for r in lines] == [logging.DEBUG]
