"""Storage layer for URL shortener."""

import logging
from typing import Optional

from .base import URLStore
from .cache import RedisCache
from .memory import InMemoryURLStore
from .models import ShortLink
from .postgres import PostgresURLStore

__all__ = ["URLStore", "InMemoryURLStore", "PostgresURLStore", "RedisCache", "ShortLink", "get_store"]


def get_store(config, logger: Optional[logging.Logger] = None) -> URLStore:
    """Build the store selected by ``config.storage_backend``.

    Args:
        config: Configuration instance
        logger: Optional logger passed to the store

    Returns:
        A URLStore instance

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = config.storage_backend.lower()

    if backend == "memory":
        return InMemoryURLStore(logger=logger)

    if backend == "postgres":
        return PostgresURLStore(
            dsn=config.database_url,
            pool_max_size=config.database_pool_max_size,
            create_tables=config.database_create_tables,
            logger=logger,
        )

    raise ValueError(f"Unknown storage backend: {backend!r}")
