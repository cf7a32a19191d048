"""Completeness scoring for normalized room records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Callable

    from roommap.domain.model import NormalizedRoom

MAX_QUALITY_SCORE: Final[int] = 100

_WEIGHTS: Final[tuple[tuple[str, int, Callable[[NormalizedRoom], bool]], ...]] = (
    ("name", 10, lambda room: bool(room.name)),
    ("max_occupancy", 10, lambda room: room.max_occupancy is not None),
    ("beds", 20, lambda room: bool(room.beds)),
    ("photos", 20, lambda room: bool(room.photos)),
    ("amenities", 20, lambda room: bool(room.amenities)),
    ("attributes", 10, lambda room: bool(room.attributes.room_class or room.attributes.view)),
    ("rates", 10, lambda room: bool(room.rates)),
)


def score_room(room: NormalizedRoom) -> int:
    """Return a 0-100 completeness score for ``room``."""

    score = sum(weight for _field, weight, present in _WEIGHTS if present(room))
    return min(score, MAX_QUALITY_SCORE)


def scored_fields(room: NormalizedRoom) -> tuple[str, ...]:
    """Names of the fields that contributed to ``score_room``."""

    return tuple(name for name, _weight, present in _WEIGHTS if present(room))
