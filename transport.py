from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

logger = logging.getLogger(__name__)

# Status recorded when no HTTP response was received at all.
CLIENT_ERROR_STATUS = 500


@dataclass(frozen=True)
class TransportResponse:
    """Outcome of a single GET request."""

    status_code: int
    body: str
    success: bool


class Transport:
    """Minimal asynchronous HTTP GET client."""

    def __init__(
        self,
        timeout_seconds: float = 15,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds, follow_redirects=True)

    async def get(self, url: str, headers: Dict[str, str]) -> TransportResponse:
        try:
            response = await self._client.get(url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("GET %s failed without a response: %s", url, exc)
            return TransportResponse(status_code=CLIENT_ERROR_STATUS, body="", success=False)

        return TransportResponse(
            status_code=response.status_code,
            body=response.text,
            success=response.is_success,
        )

    async def close(self) -> None:
        await self._client.aclose()
