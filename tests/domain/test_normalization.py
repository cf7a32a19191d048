from __future__ import annotations

import pytest

from roommap.domain.model import AmenityType, BedType, BoardType
from roommap.domain.normalization import detect_board_type, map_amenity, normalize_bed_type


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("King Size", BedType.KING),
        ("Double King", BedType.KING),
        ("queen", BedType.QUEEN),
        ("Double", BedType.DOUBLE),
        ("TWIN", BedType.TWIN),
        ("Sofa bed", BedType.SOFABED),
        ("Murphy", BedType.MURPHY),
        ("bunk beds", BedType.BUNK),
        ("Full", BedType.FULL),
        ("futon", BedType.SINGLE),
        ("", BedType.SINGLE),
    ],
)
def test_normalize_bed_type(raw: str, expected: BedType) -> None:
    assert normalize_bed_type(raw) is expected


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("FREE_WIFI", AmenityType.WIFI),
        ("High-speed internet", AmenityType.WIFI),
        ("swimming pool", AmenityType.POOL),
        ("Valet", AmenityType.PARKING),
        ("fitness-centre", AmenityType.GYM),
        ("Sauna", AmenityType.SPA),
        ("room service", AmenityType.ROOM_SERVICE),
        ("dry cleaning", AmenityType.LAUNDRY),
        ("Pets welcome", AmenityType.PETS_ALLOWED),
        ("Business Center", AmenityType.BUSINESS_CENTRE),
        ("Baby sitting", AmenityType.CHILDCARE_SERVICE),
        ("ATM on site", AmenityType.CASH_MACHINE),
        ("24h Front Desk", AmenityType.FRONT_DESK_24_HOUR),
        ("Reception", AmenityType.FRONT_DESK_24_HOUR),
        ("Handicap access", AmenityType.ACCESSIBILITY_MOBILITY),
        ("hearing loop", AmenityType.ACCESSIBILITY_HEARING),
        ("adults only", AmenityType.ADULT_ONLY),
        ("telescope", AmenityType.WIFI),
    ],
)
def test_map_amenity(code: str, expected: AmenityType) -> None:
    assert map_amenity(code) is expected


def test_map_amenity_first_keyword_wins() -> None:
    # WIFI precedes POOL in the keyword table
    assert map_amenity("POOL_WIFI") is AmenityType.WIFI


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Breakfast included", BoardType.BREAKFAST),
        ("All inclusive", BoardType.ALL_INCLUSIVE),
        ("Room only", BoardType.ROOM_ONLY),
        ("", BoardType.ROOM_ONLY),
    ],
)
def test_detect_board_type(text: str, expected: BoardType) -> None:
    assert detect_board_type(text) is expected
