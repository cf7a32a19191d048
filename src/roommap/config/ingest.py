"""Ingestion defaults for feed imports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from roommap.domain.reconciliation.service import DEFAULT_MAX_ATTEMPTS

from .env import env_int, require_env_var

DEFAULT_INGEST_CONFIDENCE: Final[float] = 0.9


@dataclass(frozen=True, slots=True)
class IngestConfig:
    source: str
    confidence: float = DEFAULT_INGEST_CONFIDENCE
    is_primary: bool = True
    max_attempts: int = DEFAULT_MAX_ATTEMPTS


def get_max_attempts() -> int:
    return env_int("ROOMMAP_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)


def get_ingest_config(*, source: str | None = None) -> IngestConfig:
    """Build ingest settings, reading the source name from the environment if omitted."""

    return IngestConfig(
        source=source or require_env_var("ROOMMAP_FEED_SOURCE"),
        max_attempts=get_max_attempts(),
    )
