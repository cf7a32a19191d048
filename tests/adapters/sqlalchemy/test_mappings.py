from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, inspect

from roommap.adapters.sqlalchemy import start_mappers
from roommap.adapters.sqlalchemy.mappings import UTCDateTime, mapper_registry
from roommap.domain.model import Room
from tests.helpers.rooms import FIXED_NOW

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session

CATALOG_TABLES = {
    "hotel_mapping",
    "room",
    "room_mapping",
    "room_content_enrichment",
    "mapping_conflict",
}


def test_start_mappers_is_idempotent() -> None:
    # First invocation happens in the sqlite_engine fixture; calling again should be harmless.
    start_mappers()
    start_mappers()


def test_migration_matches_mapped_metadata(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    assert CATALOG_TABLES <= set(inspector.get_table_names())
    assert set(mapper_registry.metadata.tables) == CATALOG_TABLES
    for table in mapper_registry.metadata.sorted_tables:
        migrated = {column["name"] for column in inspector.get_columns(table.name)}
        assert migrated == set(table.columns.keys()), table.name
    open_index = next(
        index
        for index in inspector.get_indexes("mapping_conflict")
        if index["name"] == "uq_mapping_conflict_open"
    )
    assert open_index["unique"]
    room_unique = {
        constraint["name"]: constraint["column_names"]
        for constraint in inspector.get_unique_constraints("room")
    }
    assert room_unique["uq_room_hotel_name"] == ["hotel_id", "name"]


def test_utc_datetime_normalizes_timezones() -> None:
    column_type = UTCDateTime()
    dialect = create_engine("sqlite+pysqlite:///:memory:").dialect
    plus_two = FIXED_NOW.astimezone(timezone(timedelta(hours=2)))

    assert column_type.process_bind_param(plus_two, dialect) == FIXED_NOW
    assert column_type.process_bind_param(FIXED_NOW.replace(tzinfo=None), dialect) == FIXED_NOW
    naive = datetime(2025, 3, 1, 12, 0)  # noqa: DTZ001
    assert column_type.process_result_value(naive, dialect) == FIXED_NOW


def test_room_photos_default_to_empty_list(sqlite_session: Session) -> None:
    room = Room(hotel_id="hotel-1", name="Plain")
    sqlite_session.add(room)
    sqlite_session.commit()
    sqlite_session.expire_all()

    loaded = sqlite_session.get(Room, room.id)

    assert loaded is not None
    assert loaded.photos == []
    assert loaded.max_occupancy == 2
