from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Histogram


REQUEST_TOTAL = Counter(
    "superagent_requests_total",
    "Total number of GET requests sent by agents.",
    ["status"],
)

REQUEST_LATENCY = Histogram(
    "superagent_request_latency_seconds",
    "Latency of GET requests sent by agents.",
    buckets=(0.1, 0.25, 0.5, 1, 2, 4, 8, 15, 30),
)

RATE_LIMIT_DENIALS = Counter(
    "superagent_rate_limit_denials_total",
    "Number of requests refused by the origin/source limit.",
)


class Telemetry:
    """Facade around Prometheus metrics helpers."""

    def record_rate_limit_denial(self) -> None:
        RATE_LIMIT_DENIALS.inc()

    def record_request(self, status_code: int) -> None:
        REQUEST_TOTAL.labels(status=str(status_code)).inc()

    @contextmanager
    def measure_request(self) -> Iterator[None]:
        """Context manager to time a GET request."""
        start = time.monotonic()
        try:
            yield
        finally:
            REQUEST_LATENCY.observe(time.monotonic() - start)
