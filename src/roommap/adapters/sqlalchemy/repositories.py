"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from roommap.adapters.sqlalchemy.mappings import (
    hotel_mapping_table,
    mapping_conflict_table,
    room_content_enrichment_table,
    room_mapping_table,
    room_table,
)
from roommap.domain.errors import ConcurrentUpdateError
from roommap.domain.model import (
    ConflictStatus,
    EntityType,
    HotelMapping,
    MappingConflict,
    Room,
    RoomContentEnrichment,
    RoomMapping,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session

log = logging.getLogger(__name__)


class SqlAlchemyRepository[TEntity]:
    """Shared session plumbing for the catalog repositories."""

    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> TEntity | None:
        return self.session.get(self._entity_cls, entity_id)


class SqlAlchemyHotelMappingRepository(SqlAlchemyRepository[HotelMapping]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, HotelMapping)

    def find(self, *, source: str, source_id: str) -> HotelMapping | None:
        stmt = (
            select(HotelMapping)
            .where(hotel_mapping_table.c.source == source)
            .where(hotel_mapping_table.c.source_id == source_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyRoomRepository(SqlAlchemyRepository[Room]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Room)

    def add(self, entity: Room) -> None:
        # mapping and enrichment rows reference the room by foreign key
        self.session.add(entity)
        try:
            self.session.flush()
        except IntegrityError as exc:
            self.session.rollback()
            log.info("Room %r of hotel %s was created concurrently", entity.name, entity.hotel_id)
            raise ConcurrentUpdateError(str(exc.orig)) from exc

    def find_by_name(self, *, hotel_id: str, name: str) -> Room | None:
        stmt = (
            select(Room)
            .where(room_table.c.hotel_id == hotel_id)
            .where(room_table.c.name == name)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyRoomMappingRepository(SqlAlchemyRepository[RoomMapping]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, RoomMapping)

    def find(
        self,
        *,
        source: str,
        source_id: str,
        hotel_mapping_id: UUID,
    ) -> RoomMapping | None:
        stmt = (
            select(RoomMapping)
            .where(room_mapping_table.c.source == source)
            .where(room_mapping_table.c.source_id == source_id)
            .where(room_mapping_table.c.hotel_mapping_id == hotel_mapping_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_room(self, room_id: UUID) -> Sequence[RoomMapping]:
        stmt = (
            select(RoomMapping)
            .where(room_mapping_table.c.room_id == room_id)
            .order_by(room_mapping_table.c.source, room_mapping_table.c.source_id)
        )
        return self.session.execute(stmt).scalars().all()

    def iter_all(self, *, batch_size: int = 500) -> Iterator[RoomMapping]:
        """Yield every mapping, keyset-paginated by id."""

        last_id: UUID | None = None
        while True:
            stmt = select(RoomMapping).order_by(room_mapping_table.c.id).limit(batch_size)
            if last_id is not None:
                stmt = stmt.where(room_mapping_table.c.id > last_id)
            batch = self.session.execute(stmt).scalars().all()
            if not batch:
                return
            yield from batch
            last_id = batch[-1].id


class SqlAlchemyRoomEnrichmentRepository(SqlAlchemyRepository[RoomContentEnrichment]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, RoomContentEnrichment)

    def find(
        self,
        *,
        room_id: UUID,
        source: str,
        field_name: str,
    ) -> RoomContentEnrichment | None:
        stmt = (
            select(RoomContentEnrichment)
            .where(room_content_enrichment_table.c.room_id == room_id)
            .where(room_content_enrichment_table.c.source == source)
            .where(room_content_enrichment_table.c.field_name == field_name)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_room(self, room_id: UUID) -> Sequence[RoomContentEnrichment]:
        stmt = (
            select(RoomContentEnrichment)
            .where(room_content_enrichment_table.c.room_id == room_id)
            .order_by(
                room_content_enrichment_table.c.enriched_at,
                room_content_enrichment_table.c.source,
            )
        )
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyMappingConflictRepository(SqlAlchemyRepository[MappingConflict]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, MappingConflict)

    def find_open(
        self,
        *,
        entity_type: EntityType,
        entity_id: UUID,
        field_name: str,
    ) -> MappingConflict | None:
        stmt = (
            select(MappingConflict)
            .where(mapping_conflict_table.c.entity_type == entity_type)
            .where(mapping_conflict_table.c.entity_id == entity_id)
            .where(mapping_conflict_table.c.field_name == field_name)
            .where(mapping_conflict_table.c.status == ConflictStatus.OPEN)
            .with_for_update()
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_by_status(self, status: ConflictStatus) -> Sequence[MappingConflict]:
        stmt = (
            select(MappingConflict)
            .where(mapping_conflict_table.c.status == status)
            .order_by(mapping_conflict_table.c.detected_at.desc())
        )
        return self.session.execute(stmt).scalars().all()


if TYPE_CHECKING:
    from roommap.domain.ports.persistence import (
        HotelMappingRepository,
        MappingConflictRepository,
        RoomEnrichmentRepository,
        RoomMappingRepository,
        RoomRepository,
    )

    _session_stub = cast("Session", object())
    _hotel_repo: HotelMappingRepository = SqlAlchemyHotelMappingRepository(_session_stub)
    _room_repo: RoomRepository = SqlAlchemyRoomRepository(_session_stub)
    _mapping_repo: RoomMappingRepository = SqlAlchemyRoomMappingRepository(_session_stub)
    _enrichment_repo: RoomEnrichmentRepository = SqlAlchemyRoomEnrichmentRepository(_session_stub)
    _conflict_repo: MappingConflictRepository = SqlAlchemyMappingConflictRepository(_session_stub)
