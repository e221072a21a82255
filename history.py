from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

StatusCode = Union[int, str]
PathLike = Union[str, os.PathLike]


class HistoryFileError(OSError):
    """Raised when a history file cannot be opened for reading or writing."""


@dataclass(frozen=True)
class RequestRecord:
    """One logged request attempt."""

    source: str
    url: str
    identity: str
    status_code: StatusCode

    def to_line(self) -> str:
        return f"{self.source}\t{self.url}\t{self.identity}\t{self.status_code}\n"


def origin_of(url: str) -> Optional[str]:
    """Return the hostname of ``url`` without a leading ``www.`` label."""
    host = urlparse(url).hostname
    if not host:
        return None
    if host.startswith("www."):
        host = host[len("www."):]
    return host


def _parse_status(raw: str) -> StatusCode:
    # Only canonical integers ("200", not "007") come back as int.
    if raw.isascii() and raw.isdigit() and str(int(raw)) == raw:
        return int(raw)
    return raw


class HistoryStore:
    """Append-only, in-memory log of request attempts.

    All ``count_*`` filters use substring containment, so a source filter of
    ``"1.2.3.4"`` also matches ``"21.2.3.40"``.
    """

    def __init__(self) -> None:
        self._records: List[RequestRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def log(self, source: str, url: str, identity: str, status_code: StatusCode) -> bool:
        if not (source and url and identity and status_code):
            logger.warning(
                "Refusing to log request with missing fields "
                "(source=%r, url=%r, identity=%r, status_code=%r)",
                source,
                url,
                identity,
                status_code,
            )
            return False
        self._records.append(
            RequestRecord(source=source, url=url, identity=identity, status_code=status_code)
        )
        return True

    def clear(self) -> None:
        self._records = []

    def all(self) -> Tuple[RequestRecord, ...]:
        return tuple(self._records)

    def count_by_domain(self, url: str) -> int:
        if not url:
            logger.warning("count_by_domain called without a url")
            return 0
        domain = origin_of(url)
        if domain is None:
            logger.warning("Cannot extract a hostname from url=%s", url)
            return 0
        return sum(1 for record in self._records if domain in record.url.lower())

    def count_by_origin_and_source(self, url: str, source: str) -> int:
        if not (url and source):
            logger.warning("Missing url and/or source (url=%r, source=%r)", url, source)
            return 0
        domain = origin_of(url)
        if domain is None:
            logger.warning("Cannot extract a hostname from url=%s", url)
            return 0
        return sum(
            1
            for record in self._records
            if domain in record.url.lower() and source in record.source
        )

    def count_by_url(self, url: str) -> int:
        if not url:
            logger.warning("count_by_url called without a url")
            return 0
        return sum(1 for record in self._records if url in record.url)

    def count_by_source(self, source: str) -> int:
        return sum(1 for record in self._records if source in record.source)

    def dump(self, path: PathLike) -> None:
        """Append every record to ``path`` as a tab-separated line."""
        try:
            handle = open(path, "a", encoding="utf-8")
        except OSError as exc:
            raise HistoryFileError(f"Unable to open {path} for writing: {exc}") from exc
        with handle:
            for record in self._records:
                handle.write(record.to_line())
        logger.debug("Dumped %d history records to %s", len(self._records), path)

    def load(self, path: PathLike) -> bool:
        """Log every tab-separated line of ``path``.

        Loading stops at the first line that is not valid UTF-8 or does not
        yield four non-empty fields; records logged before it are kept.
        Returns ``False`` in that case.
        """
        try:
            handle = open(path, "rb")
        except OSError as exc:
            raise HistoryFileError(f"Unable to open {path} for reading: {exc}") from exc
        loaded = 0
        with handle:
            for line_number, raw_line in enumerate(handle, start=1):
                try:
                    line = raw_line.decode("utf-8")
                except UnicodeDecodeError as exc:
                    logger.warning(
                        "Stopped loading history from %s at undecodable line %d "
                        "(%d records loaded): %s",
                        path,
                        line_number,
                        loaded,
                        exc,
                    )
                    return False
                fields = line.rstrip("\r\n").split("\t")
                fields += [""] * (4 - len(fields))
                source, url, identity, status = fields[:4]
                if not self.log(source, url, identity, _parse_status(status)):
                    logger.warning(
                        "Stopped loading history from %s at malformed line %d "
                        "(%d records loaded)",
                        path,
                        line_number,
                        loaded,
                    )
                    return False
                loaded += 1
        logger.debug("Loaded %d history records from %s", loaded, path)
        return True
