"""Per-field conflict tracking between the canonical catalog and its sources.

Detection is table driven: each ``TrackedField`` names the conflict field, the
entity it lives on, the canonical attribute holding the internal value, and how
to read the incoming value from a normalized room. Only room occupancy is
tracked today.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from roommap.domain.errors import (
    ConflictAlreadyResolvedError,
    InvalidInputError,
    NotFoundError,
)
from roommap.domain.model import (
    ConflictResolution,
    EntityType,
    MappingConflict,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime
    from uuid import UUID

    from roommap.domain.model import ConflictValue, NormalizedRoom, Room
    from roommap.domain.ports import MappingConflictRepository

log = logging.getLogger(__name__)

type EntityLoader = Callable[[EntityType, UUID], object | None]


@dataclass(frozen=True, slots=True)
class TrackedField:
    name: str
    entity_type: EntityType
    attribute: str
    incoming: Callable[[NormalizedRoom], ConflictValue]


def _incoming_max_occupancy(room: NormalizedRoom) -> ConflictValue:
    return room.max_occupancy


MAX_OCCUPANCY: Final[TrackedField] = TrackedField(
    name="maxOccupancy",
    entity_type=EntityType.ROOM,
    attribute="max_occupancy",
    incoming=_incoming_max_occupancy,
)

TRACKED_ROOM_FIELDS: Final[tuple[TrackedField, ...]] = (MAX_OCCUPANCY,)

_TRACKED_BY_KEY: Final[dict[tuple[EntityType, str], TrackedField]] = {
    (tracked.entity_type, tracked.name): tracked for tracked in TRACKED_ROOM_FIELDS
}


def tracked_field(entity_type: EntityType, field_name: str) -> TrackedField | None:
    return _TRACKED_BY_KEY.get((entity_type, field_name))


def detect_room_conflicts(
    conflicts: MappingConflictRepository,
    room: Room,
    incoming: NormalizedRoom,
    *,
    source: str,
    detected_at: datetime,
    fields: Sequence[TrackedField] = TRACKED_ROOM_FIELDS,
) -> list[MappingConflict]:
    """Open or update a conflict for every tracked field where ``source`` disagrees.

    A field disagrees only when both the canonical and the incoming value are
    present and differ. The first detection seeds the conflict with the
    canonical value under the ``internal`` source; later detections replace
    the entry of ``source`` or append a new one.
    """

    touched: list[MappingConflict] = []
    for tracked in fields:
        internal_value: ConflictValue = getattr(room, tracked.attribute)
        incoming_value = tracked.incoming(incoming)
        if internal_value is None or incoming_value is None:
            continue
        if internal_value == incoming_value:
            continue

        conflict = conflicts.find_open(
            entity_type=tracked.entity_type,
            entity_id=room.id,
            field_name=tracked.name,
        )
        if conflict is None:
            conflict = MappingConflict.open_between(
                entity_type=tracked.entity_type,
                entity_id=room.id,
                field_name=tracked.name,
                internal_value=internal_value,
                source=source,
                value=incoming_value,
                detected_at=detected_at,
            )
            conflicts.add(conflict)
            log.info(
                "Opened %s conflict on room %s: internal=%s, %s=%s",
                tracked.name,
                room.id,
                internal_value,
                source,
                incoming_value,
            )
        else:
            conflict.record(source, incoming_value, detected_at=detected_at)
            log.debug("Recorded %s=%s on conflict %s", source, incoming_value, conflict.id)
        touched.append(conflict)
    return touched


def resolve(
    conflict: MappingConflict,
    strategy: ConflictResolution,
    *,
    load_entity: EntityLoader,
    source_to_apply: str | None = None,
    resolved_at: datetime | None = None,
) -> None:
    """Close ``conflict``, writing the chosen source's value back for ``apply_source``.

    Every check runs before anything is mutated, so a rejected resolution
    leaves both the conflict and the entity untouched.
    """

    if not conflict.is_open:
        raise ConflictAlreadyResolvedError(f"Conflict {conflict.id} is already resolved")

    if strategy == ConflictResolution.APPLY_SOURCE:
        if source_to_apply is None:
            raise InvalidInputError("apply_source requires a source to apply")
        entry = conflict.entry_for(source_to_apply)
        if entry is None:
            raise InvalidInputError(
                f"Source {source_to_apply!r} has no recorded value on conflict {conflict.id}"
            )
        tracked = tracked_field(conflict.entity_type, conflict.field_name)
        if tracked is None:
            raise InvalidInputError(f"Field {conflict.field_name!r} is not tracked")
        entity = load_entity(conflict.entity_type, conflict.entity_id)
        if entity is None:
            raise NotFoundError(f"{conflict.entity_type} {conflict.entity_id} not found")
        setattr(entity, tracked.attribute, entry.value)
        log.info(
            "Applied %s=%s from %s to %s %s",
            tracked.attribute,
            entry.value,
            source_to_apply,
            conflict.entity_type,
            conflict.entity_id,
        )

    conflict.resolve(strategy, resolved_at=resolved_at)
