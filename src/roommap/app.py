"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from roommap.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMappingUnitOfWork,
    is_started,
    startup,
)
from roommap.adapters.xml_feed import HotelRoomFeedParser, open_feed
from roommap.config import get_feed_config, get_ingest_config, get_max_attempts
from roommap.domain.errors import RoomMapError
from roommap.domain.ingestion import IngestReport, ingest_feed
from roommap.domain.model import ConflictStatus, HotelMapping
from roommap.domain.ports.unit_of_work import MappingUnitOfWork
from roommap.domain.reconciliation import MappingOptions, RoomMappingService

if TYPE_CHECKING:
    from pathlib import Path
    from uuid import UUID

    from roommap.adapters.xml_feed.parser import RoomCallback
    from roommap.config import FeedConfig
    from roommap.domain.events import EventChannel
    from roommap.domain.model import ConflictResolution, MappingConflict
    from roommap.domain.reconciliation import UnifiedRoom

UnitOfWorkFactory = Callable[[], MappingUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def build_mapping_service(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    events: EventChannel | None = None,
    max_attempts: int | None = None,
) -> RoomMappingService:
    """Wire the mapping service to the SQLAlchemy adapter unless a factory is given."""

    if unit_of_work_factory is None:
        _ensure_started()
    return RoomMappingService(
        unit_of_work_factory or SqlAlchemyMappingUnitOfWork,
        events=events,
        max_attempts=max_attempts or get_max_attempts(),
    )


def parse_feed(
    location: str | Path,
    on_room: RoomCallback,
    *,
    feed_config: FeedConfig | None = None,
) -> int:
    """Parse the feed at ``location`` without touching the catalog."""

    config = feed_config or get_feed_config()
    with open_feed(location, config=config) as chunks:
        return HotelRoomFeedParser(chunks, chunk_size=config.chunk_size).parse(on_room)


def ingest_feed_file(
    location: str | Path,
    *,
    source: str | None = None,
    hotel_id: str | None = None,
    confidence: float | None = None,
    is_primary: bool | None = None,
    service: RoomMappingService | None = None,
    feed_config: FeedConfig | None = None,
) -> IngestReport:
    """Stream a feed into the catalog, one unit of work per room."""

    ingest_config = get_ingest_config(source=source)
    options = MappingOptions(
        confidence=ingest_config.confidence if confidence is None else confidence,
        is_primary=ingest_config.is_primary if is_primary is None else is_primary,
    )
    effective_service = service or build_mapping_service(max_attempts=ingest_config.max_attempts)
    config = feed_config or get_feed_config()
    log.info(
        "Starting feed ingest: source=%s, location=%s, confidence=%s, primary=%s",
        ingest_config.source,
        location,
        options.confidence,
        options.is_primary,
    )

    with open_feed(location, config=config) as chunks:
        parser = HotelRoomFeedParser(chunks, chunk_size=config.chunk_size)
        report = ingest_feed(
            parser.iter_rooms(),
            effective_service,
            source=ingest_config.source,
            options=options,
            default_hotel_id=hotel_id,
            tolerated_errors=(RoomMapError, SQLAlchemyError),
        )

    log.info(
        f"Finished feed ingest: mapped={report.mapped}, skipped={report.skipped}, "
        f"failed={report.failed}, new_rooms={report.created_rooms}, conflicts={report.conflicts}"
    )
    return report


def recalculate_quality_scores(*, service: RoomMappingService | None = None) -> int:
    return (service or build_mapping_service()).bulk_recalculate_quality_scores()


def list_conflicts(
    status: ConflictStatus = ConflictStatus.OPEN,
    *,
    service: RoomMappingService | None = None,
) -> list[MappingConflict]:
    return (service or build_mapping_service()).get_conflicts(status)


def resolve_conflict(
    conflict_id: UUID,
    strategy: ConflictResolution | str,
    *,
    source_to_apply: str | None = None,
    service: RoomMappingService | None = None,
) -> MappingConflict:
    return (service or build_mapping_service()).resolve_conflict(
        conflict_id,
        strategy,
        source_to_apply,
    )


def show_room(
    room_id: UUID,
    *,
    service: RoomMappingService | None = None,
) -> UnifiedRoom | None:
    return (service or build_mapping_service()).get_unified_room_data(room_id)


def add_hotel_mapping(
    *,
    source: str,
    source_id: str,
    hotel_id: str,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> HotelMapping:
    """Create or repoint the hotel mapping for ``(source, source_id)``."""

    if unit_of_work_factory is None:
        _ensure_started()
    factory = unit_of_work_factory or SqlAlchemyMappingUnitOfWork
    with factory() as uow:
        repository = uow.repositories.hotel_mappings
        mapping = repository.find(source=source, source_id=source_id)
        if mapping is None:
            mapping = HotelMapping(source=source, source_id=source_id, hotel_id=hotel_id)
            repository.add(mapping)
        else:
            mapping.hotel_id = hotel_id
        uow.commit()

    log.info("Hotel mapping %s/%s -> %s", source, source_id, hotel_id)
    return mapping
