from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from roommap.domain.errors import (
    ConflictAlreadyResolvedError,
    InvalidInputError,
    NotFoundError,
)
from roommap.domain.model import (
    INTERNAL_SOURCE,
    ConflictResolution,
    ConflictStatus,
    EntityType,
    MappingConflict,
    Room,
)
from roommap.domain.reconciliation import detect_room_conflicts, resolve
from tests.helpers.rooms import FIXED_NOW, make_room

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class FakeConflictRepository:
    def __init__(self) -> None:
        self.items: list[MappingConflict] = []

    def add(self, entity: MappingConflict) -> None:
        self.items.append(entity)

    def get(self, conflict_id: UUID) -> MappingConflict | None:
        return next((item for item in self.items if item.id == conflict_id), None)

    def find_open(
        self,
        *,
        entity_type: EntityType,
        entity_id: UUID,
        field_name: str,
    ) -> MappingConflict | None:
        for item in self.items:
            if (
                item.is_open
                and item.entity_type == entity_type
                and item.entity_id == entity_id
                and item.field_name == field_name
            ):
                return item
        return None

    def list_by_status(self, status: ConflictStatus) -> Sequence[MappingConflict]:
        return [item for item in self.items if item.status == status]


@pytest.fixture
def repository() -> FakeConflictRepository:
    return FakeConflictRepository()


@pytest.fixture
def room() -> Room:
    return Room(hotel_id="hotel-1", name="Deluxe King", max_occupancy=2)


def test_matching_values_open_no_conflict(repository: FakeConflictRepository, room: Room) -> None:
    touched = detect_room_conflicts(
        repository,
        room,
        make_room(max_occupancy=2),
        source="supplier-a",
        detected_at=FIXED_NOW,
    )

    assert touched == []
    assert repository.items == []


def test_missing_incoming_value_is_not_a_conflict(
    repository: FakeConflictRepository,
    room: Room,
) -> None:
    touched = detect_room_conflicts(
        repository,
        room,
        make_room(max_occupancy=None),
        source="supplier-a",
        detected_at=FIXED_NOW,
    )

    assert touched == []


def test_mismatch_opens_conflict_with_internal_entry(
    repository: FakeConflictRepository,
    room: Room,
) -> None:
    touched = detect_room_conflicts(
        repository,
        room,
        make_room(max_occupancy=3),
        source="supplier-a",
        detected_at=FIXED_NOW,
    )

    assert len(touched) == 1
    conflict = touched[0]
    assert conflict.entity_type is EntityType.ROOM
    assert conflict.entity_id == room.id
    assert conflict.field_name == "maxOccupancy"
    assert [(entry.source, entry.value) for entry in conflict.conflicting_sources] == [
        (INTERNAL_SOURCE, 2),
        ("supplier-a", 3),
    ]


def test_repeated_and_new_sources_merge_into_one_open_conflict(
    repository: FakeConflictRepository,
    room: Room,
) -> None:
    for source, value in (("supplier-a", 3), ("supplier-a", 4), ("supplier-b", 5)):
        detect_room_conflicts(
            repository,
            room,
            make_room(max_occupancy=value),
            source=source,
            detected_at=FIXED_NOW,
        )

    assert len(repository.items) == 1
    assert [(entry.source, entry.value) for entry in repository.items[0].conflicting_sources] == [
        (INTERNAL_SOURCE, 2),
        ("supplier-a", 4),
        ("supplier-b", 5),
    ]


def _open(repository: FakeConflictRepository, room: Room) -> MappingConflict:
    return detect_room_conflicts(
        repository,
        room,
        make_room(max_occupancy=4),
        source="supplier-a",
        detected_at=FIXED_NOW,
    )[0]


def test_apply_source_writes_value_to_room(repository: FakeConflictRepository, room: Room) -> None:
    conflict = _open(repository, room)

    resolve(
        conflict,
        ConflictResolution.APPLY_SOURCE,
        load_entity=lambda _type, _id: room,
        source_to_apply="supplier-a",
        resolved_at=FIXED_NOW,
    )

    assert room.max_occupancy == 4
    assert conflict.status is ConflictStatus.RESOLVED
    assert conflict.resolution is ConflictResolution.APPLY_SOURCE
    assert conflict.resolved_at == FIXED_NOW


def test_keep_internal_leaves_room_unchanged(
    repository: FakeConflictRepository,
    room: Room,
) -> None:
    conflict = _open(repository, room)

    resolve(conflict, ConflictResolution.KEEP_INTERNAL, load_entity=lambda _type, _id: room)

    assert room.max_occupancy == 2
    assert conflict.resolution is ConflictResolution.KEEP_INTERNAL


@pytest.mark.parametrize("source_to_apply", [None, "supplier-z"])
def test_apply_source_rejects_unknown_source_without_mutating(
    repository: FakeConflictRepository,
    room: Room,
    source_to_apply: str | None,
) -> None:
    conflict = _open(repository, room)

    with pytest.raises(InvalidInputError):
        resolve(
            conflict,
            ConflictResolution.APPLY_SOURCE,
            load_entity=lambda _type, _id: room,
            source_to_apply=source_to_apply,
        )

    assert conflict.is_open
    assert room.max_occupancy == 2


def test_apply_source_requires_existing_entity(
    repository: FakeConflictRepository,
    room: Room,
) -> None:
    conflict = _open(repository, room)

    with pytest.raises(NotFoundError):
        resolve(
            conflict,
            ConflictResolution.APPLY_SOURCE,
            load_entity=lambda _type, _id: None,
            source_to_apply="supplier-a",
        )

    assert conflict.is_open


def test_resolving_twice_fails(repository: FakeConflictRepository, room: Room) -> None:
    conflict = _open(repository, room)
    resolve(conflict, ConflictResolution.KEEP_INTERNAL, load_entity=lambda _type, _id: room)

    with pytest.raises(ConflictAlreadyResolvedError):
        resolve(conflict, ConflictResolution.KEEP_INTERNAL, load_entity=lambda _type, _id: room)
