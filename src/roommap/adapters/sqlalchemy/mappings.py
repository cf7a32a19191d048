"""SQLAlchemy mapping metadata for the room mapping domain model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import Any, cast

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from roommap.adapters.sqlalchemy.snapshot import RoomSnapshotType
from roommap.domain.model import (
    ConflictResolution,
    ConflictSource,
    ConflictStatus,
    EnrichmentQuality,
    EntityType,
    HotelMapping,
    MappingConflict,
    MappingType,
    Room,
    RoomContentEnrichment,
    RoomMapping,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class ConflictSourcesType(TypeDecorator[list[ConflictSource]]):
    """Ordered conflict entries stored as a JSON array."""

    impl = Text
    cache_ok = True

    def process_bind_param(
        self,
        value: list[ConflictSource] | None,
        dialect: Dialect,
    ) -> str | None:
        _ = dialect
        if value is None:
            return None
        payload = [
            {
                "source": entry.source,
                "value": entry.value,
                "detected_at": entry.detected_at.astimezone(UTC).isoformat(),
            }
            for entry in value
        ]
        return json.dumps(payload)

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[ConflictSource]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        items = cast(list[Any], loaded)
        entries: list[ConflictSource] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            raw = cast(dict[str, Any], item)
            detected_at = datetime.fromisoformat(str(raw["detected_at"]))
            if detected_at.tzinfo is None:
                detected_at = detected_at.replace(tzinfo=UTC)
            entries.append(
                ConflictSource(
                    source=str(raw["source"]),
                    value=raw.get("value"),
                    detected_at=detected_at,
                )
            )
        return entries


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Tables ----------------------------------------------------------------------

hotel_mapping_table = Table(
    "hotel_mapping",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source", String, nullable=False),
    Column("source_id", String, nullable=False),
    Column("hotel_id", String, nullable=False),
    UniqueConstraint("source", "source_id", name="uq_hotel_mapping_identity"),
)

room_table = Table(
    "room",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("hotel_id", String, nullable=False),
    Column("name", String, nullable=False),
    Column("description", String, nullable=True),
    Column("max_occupancy", Integer, nullable=False),
    Column("photos", JSON, nullable=False),
    UniqueConstraint("hotel_id", "name", name="uq_room_hotel_name"),
)

room_mapping_table = Table(
    "room_mapping",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "room_id",
        UUIDColumnType,
        ForeignKey("room.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "hotel_mapping_id",
        UUIDColumnType,
        ForeignKey("hotel_mapping.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("source", String, nullable=False),
    Column("source_id", String, nullable=False),
    Column("source_data", RoomSnapshotType(), nullable=True),
    Column("confidence", Float, nullable=False),
    Column("mapping_type", Enum(MappingType, native_enum=False), nullable=False),
    Column("is_primary", Boolean, nullable=False),
    Column("last_synced_at", UTCDateTime(), nullable=False),
    Column("quality_score", Integer, nullable=False),
    UniqueConstraint(
        "source",
        "source_id",
        "hotel_mapping_id",
        name="uq_room_mapping_identity",
    ),
    Index("ix_room_mapping_room", "room_id"),
)

room_content_enrichment_table = Table(
    "room_content_enrichment",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "room_id",
        UUIDColumnType,
        ForeignKey("room.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("source", String, nullable=False),
    Column("field_name", String, nullable=False),
    Column("content", JSON, nullable=False),
    Column("quality", Enum(EnrichmentQuality, native_enum=False), nullable=False),
    Column("enriched_at", UTCDateTime(), nullable=False),
    UniqueConstraint("room_id", "source", "field_name", name="uq_room_content_enrichment_key"),
)

mapping_conflict_table = Table(
    "mapping_conflict",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("entity_type", Enum(EntityType, native_enum=False), nullable=False),
    Column("entity_id", UUIDColumnType, nullable=False),
    Column("field_name", String, nullable=False),
    Column("conflicting_sources", ConflictSourcesType(), nullable=False),
    Column("status", Enum(ConflictStatus, native_enum=False), nullable=False),
    Column("resolution", Enum(ConflictResolution, native_enum=False), nullable=True),
    Column("detected_at", UTCDateTime(), nullable=False),
    Column("resolved_at", UTCDateTime(), nullable=True),
    Index("ix_mapping_conflict_status", "status", "detected_at"),
)

# at most one open conflict per (entity, field)
Index(
    "uq_mapping_conflict_open",
    mapping_conflict_table.c.entity_type,
    mapping_conflict_table.c.entity_id,
    mapping_conflict_table.c.field_name,
    unique=True,
    sqlite_where=mapping_conflict_table.c.status == ConflictStatus.OPEN,
    postgresql_where=mapping_conflict_table.c.status == ConflictStatus.OPEN,
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(HotelMapping, hotel_mapping_table)
    mapper_registry.map_imperatively(Room, room_table)
    mapper_registry.map_imperatively(RoomMapping, room_mapping_table)
    mapper_registry.map_imperatively(RoomContentEnrichment, room_content_enrichment_table)
    mapper_registry.map_imperatively(MappingConflict, mapping_conflict_table)

    configure_mappers()
    return mapper_registry

