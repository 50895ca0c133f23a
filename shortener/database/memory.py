"""In-memory store for URL shortener."""

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from .base import URLStore
from .models import ShortLink


class InMemoryURLStore(URLStore):
    """Dictionary-backed store for a single process.

    The check and the write happen under one lock, so concurrent inserts of
    the same code cannot both succeed. Mappings do not survive a restart and
    are not shared between uvicorn workers.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._links: Dict[str, ShortLink] = {}
        self._lock = threading.Lock()

    async def insert_if_absent(
        self,
        short_code: str,
        target: str,
        created_at: Optional[datetime] = None,
    ) -> bool:
        link = ShortLink(
            short_code=short_code,
            target=target,
            created_at=created_at or datetime.now(timezone.utc),
        )

        with self._lock:
            if short_code in self._links:
                return False
            self._links[short_code] = link

        self.logger.debug(f"Stored short link: {short_code} -> {target}")
        return True

    async def lookup(self, short_code: str) -> Optional[ShortLink]:
        return self._links.get(short_code)

    def __len__(self) -> int:
        return len(self._links)
