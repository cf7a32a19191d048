"""Supplier XML feed adapter: streaming parser and feed sources."""

from __future__ import annotations

from .errors import FeedParseError, FeedParserError
from .fetcher import build_feed_client, open_feed
from .parser import HotelRoomFeedParser, ParsedRoom, parse_leading_int

__all__ = [
    "FeedParseError",
    "FeedParserError",
    "HotelRoomFeedParser",
    "ParsedRoom",
    "build_feed_client",
    "open_feed",
    "parse_leading_int",
]
