"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class BedType(StrEnum):
    SINGLE = "single"
    DOUBLE = "double"
    FULL = "full"
    TWIN = "twin"
    QUEEN = "queen"
    KING = "king"
    BUNK = "bunk"
    SOFABED = "sofabed"
    MURPHY = "murphy"


class AmenityType(StrEnum):
    WIFI = "wifi"
    POOL = "pool"
    PARKING = "parking"
    GYM = "gym"
    SPA = "spa"
    RESTAURANT = "restaurant"
    ROOM_SERVICE = "room_service"
    LAUNDRY = "laundry"
    CONCIERGE = "concierge"
    PETS_ALLOWED = "pets_allowed"
    BUSINESS_CENTRE = "business_centre"
    LOUNGE = "lounge"
    CHILDCARE_SERVICE = "childcare_service"
    CASH_MACHINE = "cash_machine"
    FRONT_DESK_24_HOUR = "24_hour_front_desk"
    ACCESSIBILITY_MOBILITY = "accessibility_mobility"
    ACCESSIBILITY_HEARING = "accessibility_hearing"
    ADULT_ONLY = "adult_only"


class BoardType(StrEnum):
    ROOM_ONLY = "room_only"
    BREAKFAST = "breakfast"
    ALL_INCLUSIVE = "all_inclusive"


class MappingType(StrEnum):
    AUTOMATIC = "automatic"
    MANUAL = "manual"
    VERIFIED = "verified"


class EnrichmentQuality(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"


class ConflictStatus(StrEnum):
    OPEN = "open"
    RESOLVED = "resolved"


class ConflictResolution(StrEnum):
    KEEP_INTERNAL = "keep_internal"
    APPLY_SOURCE = "apply_source"


class EntityType(StrEnum):
    """Discriminator for entities a conflict can point at."""

    ROOM = "room"
