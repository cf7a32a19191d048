"""Lookup tables mapping raw supplier tokens onto closed enumerations.

Every function here is total: unknown input falls back to a default member
instead of raising.
"""

from __future__ import annotations

import re
from typing import Final

from roommap.domain.model import AmenityType, BedType, BoardType

DEFAULT_BED_TYPE: Final[BedType] = BedType.SINGLE
DEFAULT_AMENITY_TYPE: Final[AmenityType] = AmenityType.WIFI

# Order matters: "king" must win over "double" in "Double King", etc.
_BED_TYPE_RULES: Final[tuple[tuple[str, BedType], ...]] = (
    ("king", BedType.KING),
    ("queen", BedType.QUEEN),
    ("double", BedType.DOUBLE),
    ("twin", BedType.TWIN),
    ("sofa", BedType.SOFABED),
    ("murphy", BedType.MURPHY),
    ("bunk", BedType.BUNK),
    ("full", BedType.FULL),
)

_AMENITY_KEYWORDS: Final[tuple[tuple[str, AmenityType], ...]] = (
    ("WIFI", AmenityType.WIFI),
    ("INTERNET", AmenityType.WIFI),
    ("POOL", AmenityType.POOL),
    ("SWIMMING", AmenityType.POOL),
    ("PARKING", AmenityType.PARKING),
    ("VALET", AmenityType.PARKING),
    ("GYM", AmenityType.GYM),
    ("FITNESS", AmenityType.GYM),
    ("WORKOUT", AmenityType.GYM),
    ("SPA", AmenityType.SPA),
    ("SAUNA", AmenityType.SPA),
    ("RESTAURANT", AmenityType.RESTAURANT),
    ("DINING", AmenityType.RESTAURANT),
    ("ROOMSERVICE", AmenityType.ROOM_SERVICE),
    ("LAUNDRY", AmenityType.LAUNDRY),
    ("DRYCLEANING", AmenityType.LAUNDRY),
    ("CONCIERGE", AmenityType.CONCIERGE),
    ("PETS", AmenityType.PETS_ALLOWED),
    ("DOG", AmenityType.PETS_ALLOWED),
    ("CAT", AmenityType.PETS_ALLOWED),
    ("BUSINESS", AmenityType.BUSINESS_CENTRE),
    ("LOUNGE", AmenityType.LOUNGE),
    ("BAR", AmenityType.LOUNGE),
    ("CHILDCARE", AmenityType.CHILDCARE_SERVICE),
    ("BABY", AmenityType.CHILDCARE_SERVICE),
    ("ATM", AmenityType.CASH_MACHINE),
    ("CASH", AmenityType.CASH_MACHINE),
    ("FRONTDESK", AmenityType.FRONT_DESK_24_HOUR),
    ("RECEPTION", AmenityType.FRONT_DESK_24_HOUR),
    ("ACCESSIB", AmenityType.ACCESSIBILITY_MOBILITY),
    ("HANDICAP", AmenityType.ACCESSIBILITY_MOBILITY),
    ("HEARING", AmenityType.ACCESSIBILITY_HEARING),
    ("ADULT", AmenityType.ADULT_ONLY),
)

_NON_ALPHANUMERIC = re.compile(r"[^A-Z0-9]")


def normalize_bed_type(raw: str) -> BedType:
    """Classify a free-text bed description, defaulting to ``single``."""

    lowered = raw.lower()
    for keyword, bed_type in _BED_TYPE_RULES:
        if keyword in lowered:
            return bed_type
    return DEFAULT_BED_TYPE


def map_amenity(code: str) -> AmenityType:
    """Classify an amenity code or label, defaulting to ``wifi``.

    Codes are compared upper-cased with punctuation and whitespace removed, so
    ``"Front desk (24h)"`` matches the ``FRONTDESK`` keyword.
    """

    normalized = _NON_ALPHANUMERIC.sub("", code.upper())
    for keyword, amenity_type in _AMENITY_KEYWORDS:
        if keyword in normalized:
            return amenity_type
    return DEFAULT_AMENITY_TYPE


def detect_board_type(text: str) -> BoardType:
    lowered = text.lower()
    if "breakfast" in lowered:
        return BoardType.BREAKFAST
    if "all" in lowered:
        return BoardType.ALL_INCLUSIVE
    return BoardType.ROOM_ONLY
