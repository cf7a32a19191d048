"""Reconciliation of supplier room observations against the canonical catalog."""

from __future__ import annotations

from .conflicts import (
    MAX_OCCUPANCY,
    TRACKED_ROOM_FIELDS,
    TrackedField,
    detect_room_conflicts,
    resolve,
    tracked_field,
)
from .service import (
    AMENITIES_FIELD,
    IMAGES_FIELD,
    EnrichmentItem,
    MappingOptions,
    MapRoomResult,
    RoomMappingService,
    UnifiedRoom,
)

__all__ = [
    "AMENITIES_FIELD",
    "IMAGES_FIELD",
    "MAX_OCCUPANCY",
    "TRACKED_ROOM_FIELDS",
    "EnrichmentItem",
    "MapRoomResult",
    "MappingOptions",
    "RoomMappingService",
    "TrackedField",
    "UnifiedRoom",
    "detect_room_conflicts",
    "resolve",
    "tracked_field",
]
