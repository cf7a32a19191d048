"""Drive parsed feed records through the room mapping service."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from roommap.domain.errors import RoomMapError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from roommap.domain.model import NormalizedRoom
    from roommap.domain.reconciliation import MappingOptions, RoomMappingService

log = logging.getLogger(__name__)

type FeedRecord = tuple[NormalizedRoom, str | None, str | None]


@dataclass(slots=True)
class IngestReport:
    """Counters describing one feed run."""

    parsed: int = 0
    mapped: int = 0
    skipped: int = 0
    failed: int = 0
    created_rooms: int = 0
    created_mappings: int = 0
    conflict_ids: set[UUID] = field(default_factory=set)

    @property
    def conflicts(self) -> int:
        return len(self.conflict_ids)


def ingest_feed(
    records: Iterable[FeedRecord],
    service: RoomMappingService,
    *,
    source: str,
    options: MappingOptions | None = None,
    default_hotel_id: str | None = None,
    tolerated_errors: tuple[type[Exception], ...] = (RoomMapError,),
) -> IngestReport:
    """Map every ``(room, source_id, hotel_id)`` record for ``source``.

    Records lacking a room source id, or a hotel id when no
    ``default_hotel_id`` is given, are skipped, as are rooms whose hotel has
    no mapping for ``source``. Failures of one record (``tolerated_errors``)
    are logged and counted without stopping the run; anything else, including
    a malformed feed, propagates.
    """

    report = IngestReport()
    for room, source_id, hotel_id in records:
        report.parsed += 1
        effective_hotel_id = hotel_id or default_hotel_id
        if not source_id or not effective_hotel_id:
            log.debug(
                "Skipping room %r: source id %s, hotel id %s",
                room.name,
                source_id,
                effective_hotel_id,
            )
            report.skipped += 1
            continue

        try:
            result = service.map_room(effective_hotel_id, source_id, source, room, options)
        except tolerated_errors:
            log.exception(
                "Failed to map %s room %s of hotel %s", source, source_id, effective_hotel_id
            )
            report.failed += 1
            continue

        if result is None:
            report.skipped += 1
            continue
        report.mapped += 1
        report.created_rooms += int(result.created_room)
        report.created_mappings += int(result.created_mapping)
        report.conflict_ids.update(result.conflict_ids)

    log.info(
        "Ingested %s feed: parsed=%s, mapped=%s, skipped=%s, failed=%s, conflicts=%s",
        source,
        report.parsed,
        report.mapped,
        report.skipped,
        report.failed,
        report.conflicts,
    )
    return report
