from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from roommap.adapters.sqlalchemy import start_mappers
from roommap.adapters.sqlalchemy.migrations import upgrade_head
from roommap.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMappingUnitOfWork,
    shutdown,
    startup,
)
from roommap.domain.events import EventChannel
from roommap.domain.reconciliation import RoomMappingService

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def sample_feed_path() -> Path:
    return DATA_DIR / "mixed_dialect_feed.xml"


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyMappingUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyMappingUnitOfWork:
        return SqlAlchemyMappingUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def event_channel() -> EventChannel:
    return EventChannel()


@pytest.fixture
def mapping_service(
    sqlite_unit_of_work: Callable[[], SqlAlchemyMappingUnitOfWork],
    event_channel: EventChannel,
) -> RoomMappingService:
    return RoomMappingService(sqlite_unit_of_work, events=event_channel)
