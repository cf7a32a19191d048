from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from roommap.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMappingUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from roommap.domain.errors import ConcurrentUpdateError
from roommap.domain.model import Room, RoomMapping
from tests.helpers.rooms import seed_hotel_mapping

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyMappingUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_repositories_require_an_open_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(StartupError):
        _ = SqlAlchemyMappingUnitOfWork().repositories


def test_unit_of_work_commits_and_discards(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyMappingUnitOfWork() as uow:
        kept = Room(hotel_id="hotel-1", name="Kept")
        uow.repositories.rooms.add(kept)
        uow.commit()

    with SqlAlchemyMappingUnitOfWork() as uow:
        discarded = Room(hotel_id="hotel-1", name="Discarded")
        uow.repositories.rooms.add(discarded)

    with SqlAlchemyMappingUnitOfWork() as uow:
        rooms = uow.repositories.rooms
        assert rooms.get(kept.id) is not None
        assert rooms.get(discarded.id) is None


def test_commit_reports_lost_uniqueness_race(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    hotel = seed_hotel_mapping(SqlAlchemyMappingUnitOfWork)

    with SqlAlchemyMappingUnitOfWork() as uow:
        room = Room(hotel_id=hotel.hotel_id, name="Deluxe King")
        uow.repositories.rooms.add(room)
        for _ in range(2):
            uow.repositories.room_mappings.add(
                RoomMapping(
                    room_id=room.id,
                    hotel_mapping_id=hotel.id,
                    source="supplier-a",
                    source_id="GR-1",
                )
            )

        with pytest.raises(ConcurrentUpdateError):
            uow.commit()

    with SqlAlchemyMappingUnitOfWork() as uow:
        assert uow.repositories.rooms.get(room.id) is None
