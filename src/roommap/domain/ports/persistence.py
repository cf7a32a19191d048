"""Ports for persisting the room catalog and its mappings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from roommap.domain.model import (
    HotelMapping,
    MappingConflict,
    Room,
    RoomContentEnrichment,
    RoomMapping,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from uuid import UUID

    from roommap.domain.model import ConflictStatus, EntityType


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class HotelMappingRepository(Repository[HotelMapping], Protocol):
    """Persistence contract for hotel mappings (owned by an external process)."""

    def find(self, *, source: str, source_id: str) -> HotelMapping | None: ...


@runtime_checkable
class RoomRepository(Repository[Room], Protocol):
    """Persistence contract for canonical rooms."""

    def get(self, room_id: UUID) -> Room | None: ...

    def find_by_name(self, *, hotel_id: str, name: str) -> Room | None: ...


@runtime_checkable
class RoomMappingRepository(Repository[RoomMapping], Protocol):
    """Persistence contract for per-source room mappings."""

    def get(self, mapping_id: UUID) -> RoomMapping | None: ...

    def find(
        self,
        *,
        source: str,
        source_id: str,
        hotel_mapping_id: UUID,
    ) -> RoomMapping | None: ...

    def list_for_room(self, room_id: UUID) -> Sequence[RoomMapping]: ...

    def iter_all(self, *, batch_size: int = 500) -> Iterator[RoomMapping]: ...


@runtime_checkable
class RoomEnrichmentRepository(Repository[RoomContentEnrichment], Protocol):
    """Persistence contract for per-source content enrichment."""

    def find(
        self,
        *,
        room_id: UUID,
        source: str,
        field_name: str,
    ) -> RoomContentEnrichment | None: ...

    def list_for_room(self, room_id: UUID) -> Sequence[RoomContentEnrichment]: ...


@runtime_checkable
class MappingConflictRepository(Repository[MappingConflict], Protocol):
    """Persistence contract for tracked field conflicts."""

    def get(self, conflict_id: UUID) -> MappingConflict | None: ...

    def find_open(
        self,
        *,
        entity_type: EntityType,
        entity_id: UUID,
        field_name: str,
    ) -> MappingConflict | None:
        """Return the open conflict for the key, locking it for the current transaction."""
        ...

    def list_by_status(self, status: ConflictStatus) -> Sequence[MappingConflict]:
        """Return conflicts with ``status``, most recently detected first."""
        ...
