"""Configuration for fetching supplier feeds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

import httpx
from httpx_retries import Retry

from .env import env_float, env_int, optional_env_var

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_FEED_TIMEOUT_SECONDS: Final[float] = 30.0
DEFAULT_FEED_CHUNK_SIZE: Final[int] = 64 * 1024


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 60.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = field(default_factory=lambda: frozenset({"GET", "HEAD"}))
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0

    def build(self) -> Retry:
        return Retry(
            total=self.total,
            backoff_factor=self.backoff_factor,
            max_backoff_wait=self.max_backoff_wait,
            respect_retry_after_header=self.respect_retry_after_header,
            allowed_methods=tuple(self.allowed_methods),
            status_forcelist=tuple(self.status_forcelist),
            retry_on_exceptions=self.retry_on_exceptions,
            backoff_jitter=self.backoff_jitter,
        )


@dataclass(slots=True, frozen=True)
class FeedConfig:
    timeout_seconds: float = DEFAULT_FEED_TIMEOUT_SECONDS
    chunk_size: int = DEFAULT_FEED_CHUNK_SIZE
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    token: str | None = None
    default_headers: Mapping[str, str] | None = None

    def request_headers(self) -> dict[str, str]:
        headers = dict(self.default_headers or {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


def get_feed_config() -> FeedConfig:
    return FeedConfig(
        timeout_seconds=env_float("ROOMMAP_FEED_TIMEOUT", DEFAULT_FEED_TIMEOUT_SECONDS),
        chunk_size=env_int("ROOMMAP_FEED_CHUNK_SIZE", DEFAULT_FEED_CHUNK_SIZE),
        token=optional_env_var("ROOMMAP_FEED_TOKEN"),
    )
