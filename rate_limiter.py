from __future__ import annotations

import logging
from typing import Optional

from history import HistoryStore

logger = logging.getLogger(__name__)


class OriginRateLimiter:
    """Request ceiling per (origin, source) pair, counted from the history.

    A limit of ``0`` means unlimited.
    """

    def __init__(self, history: HistoryStore, limit: int = 0) -> None:
        if limit < 0:
            raise ValueError("limit must be >= 0")
        self._history = history
        self._limit = limit

    @property
    def limit(self) -> int:
        return self._limit

    def set_limit(self, limit: Optional[int]) -> bool:
        """Set a positive limit. Zero, negative and ``None`` are rejected."""
        if not limit or limit < 0:
            logger.warning("Invalid rate limit %r; keeping %d", limit, self._limit)
            return False
        self._limit = limit
        return True

    def count(self, url: str, source: str) -> int:
        return self._history.count_by_origin_and_source(url, source)

    def allows(self, url: str, source: str) -> bool:
        if not url:
            logger.warning("No url provided for the rate limit check")
            return False
        if not self._limit:
            return True
        return self.count(url, source) < self._limit
