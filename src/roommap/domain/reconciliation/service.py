"""Room mapping service: merge per-source observations into the canonical catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from roommap.domain.errors import ConcurrentUpdateError, InvalidInputError, NotFoundError
from roommap.domain.events import CONFLICT_RESOLVED, EventChannel
from roommap.domain.model import (
    ConflictResolution,
    ConflictStatus,
    EnrichmentQuality,
    EntityType,
    MappingType,
    Room,
    RoomContentEnrichment,
    RoomMapping,
    utc_now,
)
from roommap.domain.quality import score_room

from .conflicts import detect_room_conflicts, resolve

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from datetime import datetime
    from uuid import UUID

    from roommap.domain.model import EnrichmentContent, MappingConflict, NormalizedRoom
    from roommap.domain.ports import MappingUnitOfWork, RoomEnrichmentRepository

log = logging.getLogger(__name__)

DEFAULT_MAX_OCCUPANCY: Final[int] = 2
DEFAULT_MAX_ATTEMPTS: Final[int] = 3
IMAGES_FIELD: Final[str] = "images"
AMENITIES_FIELD: Final[str] = "amenities"

type UnitOfWorkFactory = Callable[[], MappingUnitOfWork]


@dataclass(frozen=True, slots=True)
class MappingOptions:
    confidence: float = 0.8
    mapping_type: MappingType = MappingType.AUTOMATIC
    is_primary: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise InvalidInputError(f"Confidence must be within [0, 1], got {self.confidence}")


@dataclass(frozen=True, slots=True)
class EnrichmentItem:
    field_name: str
    content: EnrichmentContent
    source: str
    quality: EnrichmentQuality | None = None


@dataclass(frozen=True, slots=True)
class MapRoomResult:
    room_id: UUID
    mapping_id: UUID
    created_room: bool
    created_mapping: bool
    quality_score: int
    conflict_ids: tuple[UUID, ...] = ()


@dataclass(frozen=True, slots=True)
class UnifiedRoom:
    """Canonical room merged with everything the sources contributed."""

    id: UUID
    hotel_id: str
    name: str
    description: str | None
    max_occupancy: int
    photos: EnrichmentContent
    mappings: tuple[RoomMapping, ...] = ()
    enrichments: tuple[RoomContentEnrichment, ...] = ()


class RoomMappingService:
    """Transactional operations over rooms, room mappings, enrichment, and conflicts.

    Every mutating operation runs in one unit of work. Commits that lose a
    uniqueness race with a concurrent writer are retried with a fresh unit of
    work, up to ``max_attempts`` times in total.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        *,
        events: EventChannel | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if max_attempts < 1:
            raise InvalidInputError(f"max_attempts must be positive, got {max_attempts}")
        self._unit_of_work_factory = unit_of_work_factory
        self.events = events if events is not None else EventChannel()
        self._max_attempts = max_attempts
        self._clock = clock

    # mapping -----------------------------------------------------------------

    def map_room(
        self,
        hotel_source_id: str,
        room_source_id: str,
        source: str,
        room: NormalizedRoom,
        options: MappingOptions | None = None,
    ) -> MapRoomResult | None:
        """Record ``room`` as ``source``'s view of a canonical room.

        Returns ``None`` when ``source`` has no hotel mapping for
        ``hotel_source_id``; nothing is written in that case.
        """

        effective = options or MappingOptions()
        return self._with_retry(
            "map_room",
            lambda: self._map_room_once(hotel_source_id, room_source_id, source, room, effective),
        )

    def _map_room_once(
        self,
        hotel_source_id: str,
        room_source_id: str,
        source: str,
        room: NormalizedRoom,
        options: MappingOptions,
    ) -> MapRoomResult | None:
        now = self._clock()
        quality_score = score_room(room)
        created_room = False
        created_mapping = False

        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            hotel_mapping = repositories.hotel_mappings.find(
                source=source,
                source_id=hotel_source_id,
            )
            if hotel_mapping is None:
                log.warning(
                    "No hotel mapping for %s hotel %s; skipping room %s",
                    source,
                    hotel_source_id,
                    room_source_id,
                )
                return None

            mapping = repositories.room_mappings.find(
                source=source,
                source_id=room_source_id,
                hotel_mapping_id=hotel_mapping.id,
            )
            if mapping is not None:
                mapping.refresh(
                    room,
                    quality_score=quality_score,
                    confidence=options.confidence,
                    mapping_type=options.mapping_type,
                    synced_at=now,
                )
                canonical = repositories.rooms.get(mapping.room_id)
                if canonical is None:
                    raise NotFoundError(
                        f"Room {mapping.room_id} of mapping {mapping.id} does not exist"
                    )
            else:
                canonical = repositories.rooms.find_by_name(
                    hotel_id=hotel_mapping.hotel_id,
                    name=room.name,
                )
                if canonical is None:
                    canonical = Room(
                        hotel_id=hotel_mapping.hotel_id,
                        name=room.name,
                        description=room.attributes.describe(),
                        max_occupancy=(
                            room.max_occupancy
                            if room.max_occupancy is not None
                            else DEFAULT_MAX_OCCUPANCY
                        ),
                    )
                    repositories.rooms.add(canonical)
                    created_room = True
                mapping = RoomMapping(
                    room_id=canonical.id,
                    hotel_mapping_id=hotel_mapping.id,
                    source=source,
                    source_id=room_source_id,
                    source_data=room,
                    confidence=options.confidence,
                    mapping_type=options.mapping_type,
                    is_primary=options.is_primary,
                    last_synced_at=now,
                    quality_score=quality_score,
                )
                repositories.room_mappings.add(mapping)
                created_mapping = True

            conflicts = detect_room_conflicts(
                repositories.conflicts,
                canonical,
                room,
                source=source,
                detected_at=now,
            )

            if room.photos:
                self._upsert_enrichment(
                    repositories.enrichments,
                    room_id=canonical.id,
                    source=source,
                    field_name=IMAGES_FIELD,
                    content=[{"url": photo.url} for photo in room.photos],
                    now=now,
                )
            if room.amenities:
                self._upsert_enrichment(
                    repositories.enrichments,
                    room_id=canonical.id,
                    source=source,
                    field_name=AMENITIES_FIELD,
                    content=[
                        {"type": amenity.type.value, "description": amenity.description}
                        for amenity in room.amenities
                    ],
                    now=now,
                )

            uow.commit()

        log.debug(
            "Mapped %s room %s to %s (score %s, new room %s, new mapping %s)",
            source,
            room_source_id,
            canonical.id,
            quality_score,
            created_room,
            created_mapping,
        )
        return MapRoomResult(
            room_id=canonical.id,
            mapping_id=mapping.id,
            created_room=created_room,
            created_mapping=created_mapping,
            quality_score=quality_score,
            conflict_ids=tuple(conflict.id for conflict in conflicts),
        )

    @staticmethod
    def _upsert_enrichment(
        enrichments: RoomEnrichmentRepository,
        *,
        room_id: UUID,
        source: str,
        field_name: str,
        content: EnrichmentContent,
        now: datetime,
    ) -> None:
        existing = enrichments.find(room_id=room_id, source=source, field_name=field_name)
        if existing is None:
            enrichments.add(
                RoomContentEnrichment(
                    room_id=room_id,
                    source=source,
                    field_name=field_name,
                    content=content,
                    enriched_at=now,
                )
            )
            return
        existing.refresh(content, enriched_at=now)

    # enrichment --------------------------------------------------------------

    def enrich_room_content(
        self,
        room_id: UUID,
        items: Iterable[EnrichmentItem],
    ) -> list[RoomContentEnrichment]:
        """Create or update enrichment entries for ``room_id`` in one transaction."""

        batch = tuple(items)
        return self._with_retry(
            "enrich_room_content",
            lambda: self._enrich_room_content_once(room_id, batch),
        )

    def _enrich_room_content_once(
        self,
        room_id: UUID,
        items: Sequence[EnrichmentItem],
    ) -> list[RoomContentEnrichment]:
        now = self._clock()
        written: dict[tuple[str, str], RoomContentEnrichment] = {}

        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            if repositories.rooms.get(room_id) is None:
                raise NotFoundError(f"Room {room_id} not found")

            for item in items:
                key = (item.source, item.field_name)
                enrichment = written.get(key) or repositories.enrichments.find(
                    room_id=room_id,
                    source=item.source,
                    field_name=item.field_name,
                )
                if enrichment is None:
                    enrichment = RoomContentEnrichment(
                        room_id=room_id,
                        source=item.source,
                        field_name=item.field_name,
                        content=item.content,
                        quality=item.quality or EnrichmentQuality.PENDING,
                        enriched_at=now,
                    )
                    repositories.enrichments.add(enrichment)
                else:
                    enrichment.refresh(item.content, quality=item.quality, enriched_at=now)
                written[key] = enrichment

            uow.commit()

        log.info("Enriched room %s with %s item(s)", room_id, len(written))
        return list(written.values())

    # reads -------------------------------------------------------------------

    def get_unified_room_data(self, room_id: UUID) -> UnifiedRoom | None:
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            room = repositories.rooms.get(room_id)
            if room is None:
                return None
            mappings = tuple(repositories.room_mappings.list_for_room(room_id))
            enrichments = tuple(repositories.enrichments.list_for_room(room_id))

        photos: EnrichmentContent = list(room.photos)
        for enrichment in enrichments:
            if enrichment.field_name == IMAGES_FIELD and enrichment.is_approved:
                photos = enrichment.content
                break

        return UnifiedRoom(
            id=room.id,
            hotel_id=room.hotel_id,
            name=room.name,
            description=room.description,
            max_occupancy=room.max_occupancy,
            photos=photos,
            mappings=mappings,
            enrichments=enrichments,
        )

    def get_conflicts(self, status: ConflictStatus = ConflictStatus.OPEN) -> list[MappingConflict]:
        with self._unit_of_work_factory() as uow:
            return list(uow.repositories.conflicts.list_by_status(status))

    # conflicts ---------------------------------------------------------------

    def resolve_conflict(
        self,
        conflict_id: UUID,
        strategy: ConflictResolution | str,
        source_to_apply: str | None = None,
    ) -> MappingConflict:
        """Resolve a conflict, then notify ``conflict:resolved`` subscribers."""

        try:
            resolution = ConflictResolution(strategy)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown resolution strategy: {strategy!r}") from exc

        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            conflict = repositories.conflicts.get(conflict_id)
            if conflict is None:
                raise NotFoundError(f"Conflict {conflict_id} not found")

            def load_entity(entity_type: EntityType, entity_id: UUID) -> object | None:
                if entity_type == EntityType.ROOM:
                    return repositories.rooms.get(entity_id)
                return None

            resolve(
                conflict,
                resolution,
                load_entity=load_entity,
                source_to_apply=source_to_apply,
                resolved_at=self._clock(),
            )
            uow.commit()

        log.info("Resolved conflict %s with %s", conflict.id, resolution)
        self.events.publish(CONFLICT_RESOLVED, conflict)
        return conflict

    # maintenance -------------------------------------------------------------

    def bulk_recalculate_quality_scores(self, *, batch_size: int = 500) -> int:
        """Recompute every mapping's score from its stored snapshot; return rows changed."""

        updated = 0
        scanned = 0
        with self._unit_of_work_factory() as uow:
            for mapping in uow.repositories.room_mappings.iter_all(batch_size=batch_size):
                scanned += 1
                if mapping.source_data is None:
                    continue
                score = score_room(mapping.source_data)
                if score != mapping.quality_score:
                    mapping.quality_score = score
                    updated += 1
            uow.commit()

        log.info("Recalculated quality scores: scanned=%s, updated=%s", scanned, updated)
        return updated

    # helpers -----------------------------------------------------------------

    def _with_retry[T](self, operation: str, action: Callable[[], T]) -> T:
        attempt = 1
        while True:
            try:
                return action()
            except ConcurrentUpdateError:
                if attempt >= self._max_attempts:
                    log.warning("%s gave up after %s attempt(s)", operation, attempt)
                    raise
                log.info("%s lost a concurrent update, retrying (attempt %s)", operation, attempt)
                attempt += 1
