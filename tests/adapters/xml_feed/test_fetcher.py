from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from roommap.adapters.xml_feed import HotelRoomFeedParser, open_feed
from roommap.adapters.xml_feed.fetcher import is_remote
from roommap.config import FeedConfig, RetryPolicy

if TYPE_CHECKING:
    from pathlib import Path

FEED_URL = "https://feeds.example.com/rooms.xml"

_NO_WAIT_RETRY = RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0)


def test_is_remote() -> None:
    assert is_remote("https://feeds.example.com/a.xml")
    assert is_remote("HTTP://feeds.example.com/a.xml")
    assert not is_remote("/srv/feeds/a.xml")


def test_open_feed_reads_local_file_in_chunks(sample_feed_path: Path) -> None:
    with open_feed(sample_feed_path, config=FeedConfig(chunk_size=128)) as chunks:
        collected = list(chunks)

    assert len(collected) > 1
    assert all(len(chunk) <= 128 for chunk in collected)
    assert b"".join(collected) == sample_feed_path.read_bytes()


def test_open_feed_streams_remote_feed_with_bearer_token(sample_feed_path: Path) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=sample_feed_path.read_bytes())

    config = FeedConfig(token="secret", retry=_NO_WAIT_RETRY)
    with open_feed(FEED_URL, config=config, transport=httpx.MockTransport(handler)) as chunks:
        rooms = [parsed.room.name for parsed in HotelRoomFeedParser(chunks)]

    assert rooms == ["Deluxe King", "Twin Garden", "Family Suite"]
    assert seen[0].headers["Authorization"] == "Bearer secret"


def test_open_feed_raises_on_error_status() -> None:
    transport = httpx.MockTransport(lambda _request: httpx.Response(404))

    with (
        pytest.raises(httpx.HTTPStatusError),
        open_feed(FEED_URL, config=FeedConfig(retry=_NO_WAIT_RETRY), transport=transport),
    ):
        pass


def test_open_feed_retries_transient_failures() -> None:
    statuses = iter([503, 200])
    calls: list[int] = []

    def handler(_request: httpx.Request) -> httpx.Response:
        status = next(statuses)
        calls.append(status)
        return httpx.Response(status, content=b"<Feed/>")

    config = FeedConfig(retry=_NO_WAIT_RETRY)
    with open_feed(FEED_URL, config=config, transport=httpx.MockTransport(handler)) as chunks:
        body = b"".join(chunks)

    assert calls == [503, 200]
    assert body == b"<Feed/>"
