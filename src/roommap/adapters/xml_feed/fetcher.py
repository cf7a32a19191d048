"""Open supplier feeds from local files or HTTP(S) URLs as byte-chunk streams."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

import httpx
from httpx_retries import RetryTransport

from roommap.config import FeedConfig, get_feed_config

if TYPE_CHECKING:
    from collections.abc import Iterator

log = logging.getLogger(__name__)

_HTTP_SCHEMES = ("http://", "https://")


def is_remote(location: str) -> bool:
    return location.lower().startswith(_HTTP_SCHEMES)


def _read_chunks(handle: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    while chunk := handle.read(chunk_size):
        yield chunk


def build_feed_client(
    config: FeedConfig,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an ``httpx`` client whose requests are retried per ``config.retry``."""

    retry_transport = RetryTransport(
        transport=transport or httpx.HTTPTransport(),
        retry=config.retry.build(),
    )
    return httpx.Client(
        transport=retry_transport,
        timeout=config.timeout_seconds,
        headers=config.request_headers(),
        follow_redirects=True,
    )


@contextmanager
def open_feed(
    location: str | Path,
    *,
    config: FeedConfig | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Iterator[Iterator[bytes]]:
    """Yield the feed body at ``location`` as an iterator of byte chunks.

    Remote feeds are streamed, never buffered whole. Non-success responses
    raise ``httpx.HTTPStatusError`` before any chunk is produced.
    """

    effective = config or get_feed_config()
    if isinstance(location, str) and is_remote(location):
        log.info("Streaming feed from %s", location)
        with (
            build_feed_client(effective, transport=transport) as client,
            client.stream("GET", location) as response,
        ):
            response.raise_for_status()
            yield response.iter_bytes(effective.chunk_size)
        return

    path = Path(location).expanduser()
    log.info("Reading feed from %s", path)
    with path.open("rb") as handle:
        yield _read_chunks(handle, effective.chunk_size)
