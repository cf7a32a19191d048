"""Tracked disagreements between sources about a single field."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from roommap.domain.errors import ConflictAlreadyResolvedError
from roommap.domain.model.entity import Entity, utc_now
from roommap.domain.model.enums import ConflictResolution, ConflictStatus, EntityType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

INTERNAL_SOURCE: Final[str] = "internal"

type ConflictValue = str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class ConflictSource:
    """One source's observed value for the conflicting field."""

    source: str
    value: ConflictValue
    detected_at: datetime


@dataclass(eq=False, kw_only=True)
class MappingConflict(Entity):
    entity_type: EntityType
    entity_id: UUID
    field_name: str
    conflicting_sources: list[ConflictSource] = field(default_factory=list)
    status: ConflictStatus = ConflictStatus.OPEN
    resolution: ConflictResolution | None = None
    detected_at: datetime = field(default_factory=utc_now)
    resolved_at: datetime | None = None

    @classmethod
    def open_between(
        cls,
        *,
        entity_type: EntityType,
        entity_id: UUID,
        field_name: str,
        internal_value: ConflictValue,
        source: str,
        value: ConflictValue,
        detected_at: datetime | None = None,
    ) -> MappingConflict:
        """Start a conflict seeded with the internal value and the first dissenting source."""

        moment = detected_at or utc_now()
        return cls(
            entity_type=entity_type,
            entity_id=entity_id,
            field_name=field_name,
            conflicting_sources=[
                ConflictSource(source=INTERNAL_SOURCE, value=internal_value, detected_at=moment),
                ConflictSource(source=source, value=value, detected_at=moment),
            ],
            detected_at=moment,
        )

    @property
    def is_open(self) -> bool:
        return self.status == ConflictStatus.OPEN

    def entry_for(self, source: str) -> ConflictSource | None:
        for entry in self.conflicting_sources:
            if entry.source == source:
                return entry
        return None

    def record(
        self,
        source: str,
        value: ConflictValue,
        *,
        detected_at: datetime | None = None,
    ) -> None:
        """Replace the source's previous observation or append a new one."""

        entry = ConflictSource(source=source, value=value, detected_at=detected_at or utc_now())
        entries = list(self.conflicting_sources)
        for index, existing in enumerate(entries):
            if existing.source == source:
                entries[index] = entry
                break
        else:
            entries.append(entry)
        # reassign so the ORM sees the change
        self.conflicting_sources = entries

    def resolve(
        self,
        resolution: ConflictResolution,
        *,
        resolved_at: datetime | None = None,
    ) -> None:
        if not self.is_open:
            raise ConflictAlreadyResolvedError(f"Conflict {self.id} is already resolved")
        self.status = ConflictStatus.RESOLVED
        self.resolution = resolution
        self.resolved_at = resolved_at or utc_now()
