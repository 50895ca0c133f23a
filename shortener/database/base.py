"""Abstract base class for URL shortener stores."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from .models import ShortLink


class URLStore(ABC):
    """Abstract base class for short link storage.

    The store is the only owner of ``ShortLink`` records. Records are never
    updated or deleted, so the whole write surface is ``insert_if_absent``.
    """

    @abstractmethod
    async def insert_if_absent(
        self,
        short_code: str,
        target: str,
        created_at: Optional[datetime] = None,
    ) -> bool:
        """Atomically store a new mapping unless the short code is taken.

        Must be linearizable per key: of any number of concurrent calls for
        the same short code, exactly one returns True.

        Args:
            short_code: The short code to use
            target: The original long URL
            created_at: Optional creation timestamp (defaults to now UTC)

        Returns:
            True if inserted, False if short_code already exists
        """

    @abstractmethod
    async def lookup(self, short_code: str) -> Optional[ShortLink]:
        """Get the mapping for a short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The stored ShortLink, or None if not found
        """

    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        return True

    async def close(self) -> None:
        """Release connections."""
