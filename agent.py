from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional, Tuple

from config import AgentConfig
from history import HistoryStore, PathLike, RequestRecord, StatusCode
from identity import IdentityRotator
from rate_limiter import OriginRateLimiter
from telemetry import Telemetry
from transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "127.0.0.1"


class SuperAgent:
    """HTTP GET client with User-Agent rotation, request history and an
    (origin, source) request ceiling.

    Recoverable problems (missing url, limit reached, non-2xx response) are
    logged as warnings and reported through an empty return value rather than
    an exception. Only history file access raises, see
    :class:`history.HistoryFileError`.

    ``fetch`` holds a per-agent lock for the whole check-limit, rotate,
    request and log sequence, so concurrent callers sharing an agent are
    serialized and each request is logged with the identity it was sent with.
    """

    def __init__(
        self,
        source: str = DEFAULT_SOURCE,
        *,
        rate_limit: int = 0,
        rotate_identity: bool = True,
        transport: Optional[Transport] = None,
        telemetry: Optional[Telemetry] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._source = source or DEFAULT_SOURCE
        self._history = HistoryStore()
        self._limiter = OriginRateLimiter(self._history, rate_limit)
        self._identity = IdentityRotator(enabled=rotate_identity, rng=rng)
        self._transport = transport or Transport()
        self._telemetry = telemetry or Telemetry()
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls, config: AgentConfig, *, transport: Optional[Transport] = None
    ) -> "SuperAgent":
        return cls(
            config.source,
            rate_limit=config.rate_limit,
            rotate_identity=config.rotate_identity,
            transport=transport or Transport(timeout_seconds=config.request_timeout_seconds),
        )

    async def __aenter__(self) -> "SuperAgent":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._transport.close()

    @property
    def source(self) -> str:
        return self._source

    @property
    def lock(self) -> asyncio.Lock:
        """Lock held by :meth:`fetch`; take it to run a sequence atomically."""
        return self._lock

    # Identity rotation

    @property
    def identity(self) -> str:
        return self._identity.current

    @property
    def identity_pool(self) -> Tuple[str, ...]:
        return self._identity.pool

    @property
    def rotation_enabled(self) -> bool:
        return self._identity.enabled

    def enable_rotation(self) -> None:
        self._identity.enable()

    def disable_rotation(self) -> None:
        self._identity.disable()

    def random_identity(self) -> str:
        return self._identity.random_identity()

    def set_identity(self, identity: str) -> bool:
        return self._identity.set_identity(identity)

    # Rate limiting

    @property
    def rate_limit(self) -> int:
        return self._limiter.limit

    def set_limit(self, limit: Optional[int]) -> bool:
        return self._limiter.set_limit(limit)

    def count_by_origin_and_source(self, url: str, source: str) -> int:
        return self._limiter.count(url, source)

    def check_limit(self, url: str) -> bool:
        return self._limiter.allows(url, self._source)

    # History

    @property
    def history(self) -> Tuple[RequestRecord, ...]:
        return self._history.all()

    def log(self, source: str, url: str, identity: str, status_code: StatusCode) -> bool:
        return self._history.log(source, url, identity, status_code)

    def clear_history(self) -> None:
        self._history.clear()

    def count_by_domain(self, url: str) -> int:
        return self._history.count_by_domain(url)

    def count_by_url(self, url: str) -> int:
        return self._history.count_by_url(url)

    def count_by_source(self, source: str) -> int:
        return self._history.count_by_source(source)

    def dump_history(self, path: PathLike) -> None:
        self._history.dump(path)

    def load_history(self, path: PathLike) -> bool:
        return self._history.load(path)

    # Requests

    async def fetch(self, url: str) -> str:
        """GET ``url`` and return the decoded body, or ``""`` on any failure."""
        if not url:
            logger.warning("No url provided")
            return ""

        async with self._lock:
            if not self.check_limit(url):
                logger.warning(
                    "Rate limit of %d reached for source=%s and url=%s; "
                    "change the source or raise the limit",
                    self.rate_limit,
                    self._source,
                    url,
                )
                self._telemetry.record_rate_limit_denial()
                return ""

            if self._identity.enabled:
                self._identity.rotate()
            identity = self._identity.current

            with self._telemetry.measure_request():
                response = await self._transport.get(url, headers={"User-Agent": identity})
            self._telemetry.record_request(response.status_code)
            self._history.log(self._source, url, identity, response.status_code)

        if not response.success:
            logger.warning("GET %s returned status %s", url, response.status_code)
            return ""
        return response.body
