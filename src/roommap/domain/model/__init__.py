"""Public domain model surface."""

from __future__ import annotations

from roommap.domain.model.catalog import (
    EnrichmentContent,
    HotelMapping,
    Room,
    RoomContentEnrichment,
    RoomMapping,
)
from roommap.domain.model.conflict import (
    INTERNAL_SOURCE,
    ConflictSource,
    ConflictValue,
    MappingConflict,
)
from roommap.domain.model.entity import Entity, new_id, utc_now
from roommap.domain.model.enums import (
    AmenityType,
    BedType,
    BoardType,
    ConflictResolution,
    ConflictStatus,
    EnrichmentQuality,
    EntityType,
    MappingType,
)
from roommap.domain.model.feed import (
    Amenity,
    Bed,
    CancellationStep,
    NormalizedRoom,
    Photo,
    RateCondition,
    RateRecord,
    RoomAttributes,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    "utc_now",
    # enums
    "AmenityType",
    "BedType",
    "BoardType",
    "ConflictResolution",
    "ConflictStatus",
    "EnrichmentQuality",
    "EntityType",
    "MappingType",
    # feed records
    "Amenity",
    "Bed",
    "CancellationStep",
    "NormalizedRoom",
    "Photo",
    "RateCondition",
    "RateRecord",
    "RoomAttributes",
    # catalog
    "EnrichmentContent",
    "HotelMapping",
    "Room",
    "RoomContentEnrichment",
    "RoomMapping",
    # conflicts
    "INTERNAL_SOURCE",
    "ConflictSource",
    "ConflictValue",
    "MappingConflict",
]
