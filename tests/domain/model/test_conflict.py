from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest

from roommap.domain.errors import ConflictAlreadyResolvedError, InvalidInputError
from roommap.domain.model import (
    INTERNAL_SOURCE,
    ConflictResolution,
    ConflictStatus,
    EntityType,
    MappingConflict,
)
from tests.helpers.rooms import FIXED_NOW


def _open_conflict() -> MappingConflict:
    return MappingConflict.open_between(
        entity_type=EntityType.ROOM,
        entity_id=uuid4(),
        field_name="maxOccupancy",
        internal_value=2,
        source="supplier-a",
        value=3,
        detected_at=FIXED_NOW,
    )


def test_open_between_seeds_internal_and_incoming_entries() -> None:
    conflict = _open_conflict()

    assert conflict.is_open
    assert [(entry.source, entry.value) for entry in conflict.conflicting_sources] == [
        (INTERNAL_SOURCE, 2),
        ("supplier-a", 3),
    ]
    assert conflict.detected_at == FIXED_NOW
    assert conflict.resolution is None


def test_record_replaces_existing_source_entry() -> None:
    conflict = _open_conflict()
    original_list = conflict.conflicting_sources
    later = FIXED_NOW + timedelta(hours=1)

    conflict.record("supplier-a", 4, detected_at=later)

    assert conflict.conflicting_sources is not original_list
    assert len(conflict.conflicting_sources) == 2
    entry = conflict.entry_for("supplier-a")
    assert entry is not None
    assert entry.value == 4
    assert entry.detected_at == later


def test_record_appends_new_source_in_order() -> None:
    conflict = _open_conflict()

    conflict.record("supplier-b", 5)

    assert [entry.source for entry in conflict.conflicting_sources] == [
        INTERNAL_SOURCE,
        "supplier-a",
        "supplier-b",
    ]


def test_resolve_is_terminal() -> None:
    conflict = _open_conflict()

    conflict.resolve(ConflictResolution.KEEP_INTERNAL, resolved_at=FIXED_NOW)

    assert conflict.status is ConflictStatus.RESOLVED
    assert conflict.resolution is ConflictResolution.KEEP_INTERNAL
    assert conflict.resolved_at == FIXED_NOW
    with pytest.raises(ConflictAlreadyResolvedError):
        conflict.resolve(ConflictResolution.APPLY_SOURCE)


def test_already_resolved_error_is_invalid_input() -> None:
    assert issubclass(ConflictAlreadyResolvedError, InvalidInputError)
