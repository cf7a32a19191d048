"""Normalized supplier records produced by feed parsing.

These are value objects: a parser builds them once per room and nothing mutates
them afterwards. They are folded into ``RoomMapping.source_data`` and the
canonical ``Room`` by the mapping service, never persisted on their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003
from typing import Final

from roommap.domain.model.enums import AmenityType, BedType, BoardType

DEFAULT_AMOUNT: Final[str] = "0.00"
DEFAULT_CURRENCY: Final[str] = "USD"
DEFAULT_PAYMENT_TYPE: Final[str] = "pay_now"
DEFAULT_RATE_SOURCE: Final[str] = "duffel_hotel_group"


@dataclass(frozen=True, slots=True)
class Bed:
    type: BedType
    count: int = 1


@dataclass(frozen=True, slots=True)
class Photo:
    url: str


@dataclass(frozen=True, slots=True)
class Amenity:
    type: AmenityType
    description: str = ""


@dataclass(frozen=True, slots=True)
class RoomAttributes:
    """Free-text classification of a room (``class`` and ``view`` in feeds)."""

    room_class: str | None = None
    view: str | None = None

    def as_mapping(self) -> dict[str, str]:
        mapping: dict[str, str] = {}
        if self.room_class:
            mapping["class"] = self.room_class
        if self.view:
            mapping["view"] = self.view
        return mapping

    def describe(self) -> str | None:
        parts = [part for part in (self.room_class, self.view) if part]
        return ", ".join(parts) or None


@dataclass(frozen=True, slots=True)
class RateCondition:
    title: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class CancellationStep:
    refund_amount: str
    currency: str
    before: datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class RateRecord:
    id: str
    code: str | None = None
    expires_at: datetime

    total_amount: str = DEFAULT_AMOUNT
    total_currency: str = DEFAULT_CURRENCY
    base_amount: str = DEFAULT_AMOUNT
    base_currency: str = DEFAULT_CURRENCY
    tax_amount: str = DEFAULT_AMOUNT
    tax_currency: str = DEFAULT_CURRENCY
    fee_amount: str = DEFAULT_AMOUNT
    fee_currency: str = DEFAULT_CURRENCY
    due_at_accommodation_amount: str = DEFAULT_AMOUNT
    due_at_accommodation_currency: str = DEFAULT_CURRENCY

    payment_type: str = DEFAULT_PAYMENT_TYPE
    board_type: BoardType = BoardType.ROOM_ONLY
    available_payment_methods: tuple[str, ...] = ("card",)
    conditions: tuple[RateCondition, ...] = ()
    cancellation_timeline: tuple[CancellationStep, ...] = ()
    loyalty_programme_required: bool = False
    supported_loyalty_programme: str | None = None
    source: str = DEFAULT_RATE_SOURCE
    description: str | None = None
    quantity_available: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NormalizedRoom:
    name: str
    max_occupancy: int | None = None
    beds: tuple[Bed, ...] = ()
    photos: tuple[Photo, ...] = ()
    amenities: tuple[Amenity, ...] = ()
    attributes: RoomAttributes = field(default_factory=RoomAttributes)
    rates: tuple[RateRecord, ...] = ()
