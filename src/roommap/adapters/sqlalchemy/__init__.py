"""SQLAlchemy adapter package for roommap."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyHotelMappingRepository,
    SqlAlchemyMappingConflictRepository,
    SqlAlchemyRoomEnrichmentRepository,
    SqlAlchemyRoomMappingRepository,
    SqlAlchemyRoomRepository,
)
from .snapshot import SnapshotVersionError, decode_snapshot, encode_snapshot
from .unit_of_work import SqlAlchemyMappingUnitOfWork, shutdown, startup

__all__ = [
    "SnapshotVersionError",
    "SqlAlchemyHotelMappingRepository",
    "SqlAlchemyMappingConflictRepository",
    "SqlAlchemyMappingUnitOfWork",
    "SqlAlchemyRoomEnrichmentRepository",
    "SqlAlchemyRoomMappingRepository",
    "SqlAlchemyRoomRepository",
    "decode_snapshot",
    "encode_snapshot",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
