from __future__ import annotations

import logging
import random
from typing import Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


IDENTITY_POOL: Tuple[str, ...] = (
    "Mozilla/5.0 (X11; Linux x86_64; rv:20.0) Gecko/20100101 Firefox/20.0",
    "Mozilla/5.0 (compatible; MSIE 9.0; Windows NT 6.1; Trident/5.0)",
    "Mozilla/5.0 (compatible; MSIE 10.0; Windows NT 6.1; Trident/6.0)",
    "Mozilla/5.0 (compatible; MSIE 10.0; Windows NT 6.2; Trident/6.0)",
    "Mozilla/5.0 (compatible; MSIE 9.0; Windows NT 5.1; Trident/5.0)",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.22 (KHTML, like Gecko) "
    "Chrome/25.0.1364.172 Safari/537.22",
    "Mozilla/5.0 (Windows NT 6.1; WOW64) AppleWebKit/537.22 (KHTML, like Gecko) "
    "Chrome/25.0.1364.172 Safari/537.22",
    "Mozilla/5.0 (Windows NT 6.1; WOW64) AppleWebKit/537.15 (KHTML, like Gecko) "
    "Chrome/24.0.1295.0 Safari/537.15",
    "Mozilla/5.0 (Macintosh; U; PPC Mac OS X; en) AppleWebKit/125.2 (KHTML, like Gecko) "
    "Safari/125.8",
    "Mozilla/5.0 (Macintosh; U; PPC Mac OS X; en-us) AppleWebKit/537.22 (KHTML like Gecko) "
    "Safari/537.22",
)


class IdentityRotator:
    """Picks the User-Agent string attached to outgoing requests."""

    def __init__(
        self,
        pool: Sequence[str] = IDENTITY_POOL,
        *,
        enabled: bool = True,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not pool:
            raise ValueError("identity pool must not be empty")
        self._pool = tuple(pool)
        self._rng = rng or random.Random()
        self._enabled = enabled
        self._current = self.random_identity()

    @property
    def pool(self) -> Tuple[str, ...]:
        return self._pool

    @property
    def current(self) -> str:
        return self._current

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def random_identity(self) -> str:
        return self._rng.choice(self._pool)

    def set_identity(self, identity: str) -> bool:
        if not identity:
            logger.warning("No identity provided; keeping %r", self._current)
            return False
        self._current = identity
        return True

    def rotate(self) -> str:
        self._current = self.random_identity()
        return self._current
