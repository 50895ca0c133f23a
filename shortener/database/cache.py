"""Redis read cache for URL shortener.

Mappings are immutable, so a cached target never goes stale; the TTL only
bounds memory. Every failure is logged and reported as a miss.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

CACHE_ERRORS = (RedisError, OSError)


class RedisCache:
    """Short code -> target cache in front of the store.

    Disabled when no URL is configured or when the first ping fails; a
    disabled cache answers every read with a miss and drops every write.
    """

    KEY_PREFIX = "shortener:link"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.client: Optional[redis.Redis] = None
        self.enabled = bool(redis_url)

    async def connect(self) -> None:
        if not self.enabled:
            return

        self.client = redis.from_url(self.redis_url, decode_responses=True)
        try:
            await self.client.ping()
        except CACHE_ERRORS as e:
            self.logger.error(f"Redis unreachable, serving without cache: {e}")
            self.enabled = False
            return

        self.logger.info(f"Redirect cache connected (ttl={self.ttl_seconds}s)")

    async def get(self, short_code: str) -> Optional[str]:
        """Cached target for short_code, or None on a miss or failure."""
        return await self._guarded("get", lambda c: c.get(self.key(short_code)), None)

    async def set(self, short_code: str, target: str, ttl: Optional[int] = None) -> bool:
        """Cache target for short_code; False when the write did not happen."""

        async def write(client: redis.Redis) -> bool:
            await client.setex(self.key(short_code), ttl or self.ttl_seconds, target)
            return True

        return await self._guarded("set", write, False)

    async def _guarded(self, op: str, call: Callable[[Any], Awaitable[Any]], fallback: Any) -> Any:
        if not self.enabled or self.client is None:
            return fallback
        try:
            return await call(self.client)
        except CACHE_ERRORS as e:
            self.logger.error(f"Cache {op} failed: {e}")
            return fallback

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    def key(self, short_code: str) -> str:
        return f"{self.KEY_PREFIX}:{short_code}"
