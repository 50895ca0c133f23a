"""Redirect resolution for URL shortener."""

import logging
from typing import Optional

from .database.base import URLStore
from .database.cache import RedisCache
from .errors import DataStoreError, ShortCodeNotFoundError
from .metrics import ShortenerMetrics


class RedirectResolver:
    """Resolve short codes to their target URLs.

    Stateless per call: a cache probe (when configured) followed by a store
    lookup.
    """

    def __init__(
        self,
        store: URLStore,
        cache: Optional[RedisCache] = None,
        metrics: Optional[ShortenerMetrics] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.cache = cache
        self.metrics = metrics or ShortenerMetrics()
        self.logger = logger or logging.getLogger(__name__)

    async def resolve(self, short_code: str) -> str:
        """Get the target URL for a short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The original URL

        Raises:
            ShortCodeNotFoundError: If the short code has no mapping
            DataStoreError: If the store fails
        """
        if self.cache:
            cached = await self.cache.get(short_code)
            if cached is not None:
                self.logger.debug(f"Cache hit for {short_code}")
                return cached

        try:
            with self.metrics.time_store_read():
                link = await self.store.lookup(short_code)
        except DataStoreError:
            self.metrics.inc_error(DataStoreError.error_code)
            raise

        if link is None:
            self.logger.info(f"Short code not found: {short_code}")
            raise ShortCodeNotFoundError(f"Short code '{short_code}' not found")

        if self.cache:
            await self.cache.set(short_code, link.target)

        self.logger.debug(f"Resolved URL: {short_code} -> {link.target}")
        return link.target
