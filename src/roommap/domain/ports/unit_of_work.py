"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from roommap.domain.ports.persistence import (
        HotelMappingRepository,
        MappingConflictRepository,
        RoomEnrichmentRepository,
        RoomMappingRepository,
        RoomRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    Leaving the context without ``commit()`` discards pending changes; leaving
    it with an exception rolls back.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None:
        """Persist pending changes; raises ``ConcurrentUpdateError`` on a lost race."""
        ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class MappingRepositories(RepositoryCollection):
    """Repositories the room mapping service reads and writes."""

    hotel_mappings: HotelMappingRepository
    rooms: RoomRepository
    room_mappings: RoomMappingRepository
    enrichments: RoomEnrichmentRepository
    conflicts: MappingConflictRepository


type MappingUnitOfWork = UnitOfWork[MappingRepositories]
