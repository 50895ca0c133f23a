"""Business logic service for URL shortener."""

import logging
from datetime import datetime, timezone
from typing import Optional

from .common.validators import is_valid_url, is_valid_short_code
from .database.base import URLStore
from .database.cache import RedisCache
from .errors import (
    CapacityExhaustedError,
    DataStoreError,
    InvalidShortCodeError,
    InvalidURLError,
    ShortCodeTakenError,
)
from .metrics import ShortenerMetrics
from .shortcode import ShortCodeGenerator


class URLShortenerService:
    """Service layer for creating short links."""

    def __init__(
        self,
        store: URLStore,
        cache: Optional[RedisCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        metrics: Optional[ShortenerMetrics] = None,
        logger: Optional[logging.Logger] = None,
        enable_custom_codes: bool = True,
        max_collision_retries: int = 5,
    ):
        """Initialize URL shortener service.

        Args:
            store: Store owning the short link records
            cache: Optional read cache, warmed on creation
            short_code_generator: Optional short code generator
            metrics: Optional metrics container
            logger: Optional logger
            enable_custom_codes: Whether to allow user-chosen short codes
            max_collision_retries: Generated codes tried before giving up
        """
        if max_collision_retries < 1:
            raise ValueError(f"max_collision_retries must be positive (given value: {max_collision_retries})")

        self.store = store
        self.cache = cache
        self.generator = short_code_generator or ShortCodeGenerator()
        self.metrics = metrics or ShortenerMetrics()
        self.logger = logger or logging.getLogger(__name__)
        self.enable_custom_codes = enable_custom_codes
        self.max_collision_retries = max_collision_retries

    async def shorten(self, raw_url: str, name: Optional[str] = None) -> str:
        """Create a new short link.

        Args:
            raw_url: The original long URL
            name: Optional user-chosen short code

        Returns:
            The short code now mapped to raw_url

        Raises:
            InvalidURLError: If raw_url is not an absolute http(s) URL
            InvalidShortCodeError: If name is invalid or custom codes are disabled
            ShortCodeTakenError: If name is already mapped
            CapacityExhaustedError: If no free code was found within the retry budget
            DataStoreError: If the store fails
        """
        is_valid, error = is_valid_url(raw_url)
        if not is_valid:
            self.logger.warning(f"Validation failed: {error}")
            self.metrics.inc_error(InvalidURLError.error_code)
            raise InvalidURLError(f"Invalid URL: {error}")

        created_at = datetime.now(timezone.utc)

        if name:
            short_code = await self._claim_name(name, raw_url, created_at)
        else:
            short_code = await self._claim_generated_code(raw_url, created_at)

        self.metrics.inc_urls_created()
        self.logger.info(f"Created short URL: {short_code} -> {raw_url}")

        if self.cache:
            await self.cache.set(short_code, raw_url)

        return short_code

    async def _claim_name(self, name: str, raw_url: str, created_at: datetime) -> str:
        if not self.enable_custom_codes:
            self.metrics.inc_error(InvalidShortCodeError.error_code)
            raise InvalidShortCodeError("Custom short codes are not enabled")

        is_valid, error = is_valid_short_code(name)
        if not is_valid:
            self.logger.warning(f"Validation failed: {error}")
            self.metrics.inc_error(InvalidShortCodeError.error_code)
            raise InvalidShortCodeError(f"Invalid short code: {error}")

        if not await self._insert(name, raw_url, created_at):
            self.metrics.inc_error(ShortCodeTakenError.error_code)
            raise ShortCodeTakenError(f"Short code '{name}' already exists")

        return name

    async def _claim_generated_code(self, raw_url: str, created_at: datetime) -> str:
        for attempt in range(1, self.max_collision_retries + 1):
            code = self.generator.generate()

            if await self._insert(code, raw_url, created_at):
                if attempt > 1:
                    self.logger.debug(f"Generated code after {attempt} attempts: {code}")
                return code

            self.logger.warning(f"Short code collision on attempt {attempt}: {code}")
            self.metrics.inc_error("duplicate_key")

        self.metrics.inc_error(CapacityExhaustedError.error_code)
        raise CapacityExhaustedError(
            f"Unable to generate unique short code after {self.max_collision_retries} attempts"
        )

    async def _insert(self, short_code: str, raw_url: str, created_at: datetime) -> bool:
        try:
            with self.metrics.time_store_write():
                return await self.store.insert_if_absent(short_code, raw_url, created_at)
        except DataStoreError:
            self.metrics.inc_error(DataStoreError.error_code)
            raise

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()
