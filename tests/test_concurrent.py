"""Tests that the server handles multiple concurrent connections correctly.

These tests assert that many simultaneous requests succeed, return correct
results and never hand out the same short code twice.
"""

import asyncio
import pytest


@pytest.mark.asyncio
class TestConcurrentConnections:
    """Prove the server handles many simultaneous requests."""

    async def test_concurrent_health_requests(self, client):
        """Many concurrent GET /healthz requests all succeed."""
        concurrency = 50
        tasks = [client.get("/healthz") for _ in range(concurrency)]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 204, f"Request {i}: status {r.status_code}"

    async def test_concurrent_shorten_requests(self, client):
        """Many concurrent POST /api/urls, some for the same URL; all short codes are unique."""
        concurrency = 40
        urls = [f"https://example.com/page_{i % 10}" for i in range(concurrency)]
        tasks = [client.post("/api/urls", json={"url": url}) for url in urls]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        short_codes = []
        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 200, f"Request {i}: status {r.status_code} body={r.text}"
            short_codes.append(r.json())

        assert len(short_codes) == len(set(short_codes)), "All short codes must be unique under concurrency"

        redirects = await asyncio.gather(*[
            client.get(f"/api/{code}", follow_redirects=False) for code in short_codes
        ])
        for url, r in zip(urls, redirects):
            assert r.status_code == 307
            assert r.headers["location"] == url

    async def test_concurrent_same_name_one_winner(self, client):
        """Concurrent requests for the same name: exactly one wins, the rest conflict."""
        tasks = [
            client.post("/api/urls", json={"url": f"https://example.com/{i}", "name": "contested"})
            for i in range(20)
        ]
        responses = await asyncio.gather(*tasks)

        statuses = sorted(r.status_code for r in responses)
        assert statuses == [200] + [409] * 19

    async def test_concurrent_redirect_requests(self, client):
        """Create one short URL, then many concurrent redirect requests all succeed."""
        create_resp = await client.post(
            "/api/urls",
            json={"url": "https://example.com/redirect-target"},
        )
        assert create_resp.status_code == 200
        short_code = create_resp.json()

        tasks = [
            client.get(f"/api/{short_code}", follow_redirects=False)
            for _ in range(20)
        ]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 307, f"Request {i}: status {r.status_code}"
            assert r.headers.get("location") == "https://example.com/redirect-target"
