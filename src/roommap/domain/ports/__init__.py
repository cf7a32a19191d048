"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    HotelMappingRepository,
    MappingConflictRepository,
    Repository,
    RoomEnrichmentRepository,
    RoomMappingRepository,
    RoomRepository,
)
from .unit_of_work import (
    MappingRepositories,
    MappingUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "HotelMappingRepository",
    "MappingConflictRepository",
    "MappingRepositories",
    "MappingUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "RoomEnrichmentRepository",
    "RoomMappingRepository",
    "RoomRepository",
    "UnitOfWork",
]
