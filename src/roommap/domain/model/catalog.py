"""Canonical catalog entities and the per-source mappings onto them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from roommap.domain.model.entity import Entity, utc_now
from roommap.domain.model.enums import EnrichmentQuality, MappingType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from roommap.domain.model.feed import NormalizedRoom

type EnrichmentContent = list[dict[str, object]] | dict[str, object] | str


@dataclass(eq=False, kw_only=True)
class HotelMapping(Entity):
    """Binds a source's hotel identifier to an internal hotel id.

    Owned by an external hotel-mapping process; the room mapping service only
    reads it.
    """

    source: str
    source_id: str
    hotel_id: str


@dataclass(eq=False, kw_only=True)
class Room(Entity):
    """Internal, source-agnostic representation of a room."""

    hotel_id: str
    name: str
    description: str | None = None
    max_occupancy: int = 2
    photos: list[dict[str, object]] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class RoomMapping(Entity):
    """A source's view of a canonical room, with the last payload it sent."""

    room_id: UUID
    hotel_mapping_id: UUID
    source: str
    source_id: str
    source_data: NormalizedRoom | None = None
    confidence: float = 0.8
    mapping_type: MappingType = MappingType.AUTOMATIC
    is_primary: bool = False
    last_synced_at: datetime = field(default_factory=utc_now)
    quality_score: int = 0

    @property
    def is_verified(self) -> bool:
        return self.mapping_type == MappingType.VERIFIED

    def refresh(
        self,
        source_data: NormalizedRoom,
        *,
        quality_score: int,
        confidence: float,
        mapping_type: MappingType,
        synced_at: datetime | None = None,
    ) -> None:
        """Record a new observation; curated (verified) mappings keep their metadata."""

        self.source_data = source_data
        self.quality_score = quality_score
        self.last_synced_at = synced_at or utc_now()
        if not self.is_verified:
            self.confidence = confidence
            self.mapping_type = mapping_type


@dataclass(eq=False, kw_only=True)
class RoomContentEnrichment(Entity):
    """Per-source supplementary content for one field of a canonical room."""

    room_id: UUID
    source: str
    field_name: str
    content: EnrichmentContent
    quality: EnrichmentQuality = EnrichmentQuality.PENDING
    enriched_at: datetime = field(default_factory=utc_now)

    @property
    def is_approved(self) -> bool:
        return self.quality == EnrichmentQuality.APPROVED

    def refresh(
        self,
        content: EnrichmentContent,
        *,
        quality: EnrichmentQuality | None = None,
        enriched_at: datetime | None = None,
    ) -> None:
        self.content = content
        self.enriched_at = enriched_at or utc_now()
        if quality is not None:
            self.quality = quality
