from __future__ import annotations

import io
from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from roommap.adapters.xml_feed import (
    FeedParseError,
    FeedParserError,
    HotelRoomFeedParser,
    ParsedRoom,
    parse_leading_int,
)
from roommap.domain.model import AmenityType, BedType, BoardType, NormalizedRoom
from tests.helpers.rooms import FIXED_NOW, ChunkRecorder

if TYPE_CHECKING:
    from pathlib import Path


def _parser(source: object, **kwargs: object) -> HotelRoomFeedParser:
    return HotelRoomFeedParser(
        source,  # type: ignore[arg-type]
        clock=lambda: FIXED_NOW,
        rate_id_factory=lambda: "rate_generated",
        **kwargs,  # type: ignore[arg-type]
    )


def _parse_all(sample_feed_path: Path) -> list[ParsedRoom]:
    with sample_feed_path.open("rb") as handle:
        return list(_parser(handle, chunk_size=64))


def test_sample_feed_yields_named_rooms_in_document_order(sample_feed_path: Path) -> None:
    rooms = _parse_all(sample_feed_path)

    assert [(parsed.room.name, parsed.source_id, parsed.hotel_id) for parsed in rooms] == [
        ("Deluxe King", "GR-1", "H-100"),
        ("Twin Garden", "TG-2", "H-100"),
        ("Family Suite", "S-1", "P-200"),
    ]


def test_attribute_dialect_room(sample_feed_path: Path) -> None:
    room = _parse_all(sample_feed_path)[0].room

    assert room.max_occupancy == 3
    assert [(bed.type, bed.count) for bed in room.beds] == [(BedType.KING, 1)]
    assert [photo.url for photo in room.photos] == [
        "https://img.example.com/gr1-a.jpg",
        "https://img.example.com/gr1-b.jpg",
    ]
    assert [(amenity.type, amenity.description) for amenity in room.amenities] == [
        (AmenityType.WIFI, "Free Wi-Fi in room"),
        (AmenityType.POOL, "Outdoor pool"),
    ]

    (rate,) = room.rates
    assert rate.id == "R-1"
    assert rate.code == "BAR"
    assert rate.total_amount == "189.00"
    assert rate.total_currency == "EUR"
    assert rate.base_currency == "EUR"
    assert rate.board_type is BoardType.BREAKFAST
    assert rate.expires_at == FIXED_NOW + timedelta(hours=24)


def test_element_dialect_room(sample_feed_path: Path) -> None:
    room = _parse_all(sample_feed_path)[1].room

    assert room.max_occupancy == 2
    assert [(bed.type, bed.count) for bed in room.beds] == [(BedType.TWIN, 2)]
    assert room.attributes.room_class == "Standard"
    assert room.attributes.view == "Garden"
    assert [(amenity.type, amenity.description) for amenity in room.amenities] == [
        (AmenityType.FRONT_DESK_24_HOUR, "24h Front Desk"),
    ]
    assert room.rates == ()


def test_rate_plan_without_id_or_currency_uses_defaults(sample_feed_path: Path) -> None:
    (rate,) = _parse_all(sample_feed_path)[2].room.rates

    assert rate.id == "rate_generated"
    assert rate.code is None
    assert rate.total_amount == "420.50"
    assert rate.total_currency == "USD"
    assert rate.board_type is BoardType.ALL_INCLUSIVE


def test_rooms_are_yielded_before_the_stream_is_exhausted() -> None:
    chunks = [
        b"<Feed><Hotel HotelCode='H-1'>",
        b"<GuestRoom id='A' name='First'></GuestRoom>",
        b"<GuestRoom id='B' name='Second'></GuestRoom>",
        b"</Hotel></Feed>",
    ]
    recorder = ChunkRecorder(chunks)
    rooms = iter(_parser(recorder))

    first = next(rooms)

    assert first.room.name == "First"
    assert recorder.consumed == 2
    assert [parsed.room.name for parsed in rooms] == ["Second"]
    assert recorder.consumed == 4


def test_hotel_id_does_not_leak_past_its_element() -> None:
    document = (
        "<Feed><Hotel HotelCode='H-1'><Room id='A' name='Inside'/></Hotel>"
        "<Room id='B' name='Outside'/></Feed>"
    )

    rooms = list(_parser(io.StringIO(document)))

    assert [(parsed.room.name, parsed.hotel_id) for parsed in rooms] == [
        ("Inside", "H-1"),
        ("Outside", None),
    ]


def test_bed_count_below_one_becomes_one() -> None:
    document = (
        "<Feed><GuestRoom id='A' name='Room'>"
        "<Bed type='Queen' count='0'/><Bed type='sofa bed'/><Bed type='bunk' count='x'/>"
        "</GuestRoom></Feed>"
    )

    (parsed,) = _parser(io.StringIO(document))

    assert [(bed.type, bed.count) for bed in parsed.room.beds] == [
        (BedType.QUEEN, 1),
        (BedType.SOFABED, 1),
        (BedType.BUNK, 1),
    ]


def test_amenity_text_only_sets_description() -> None:
    document = (
        "<Feed><GuestRoom id='A' name='Room'>"
        "<Amenity>Fitness centre</Amenity><Amenity code='SPA'/>"
        "</GuestRoom></Feed>"
    )

    (parsed,) = _parser(io.StringIO(document))

    assert [(amenity.type, amenity.description) for amenity in parsed.room.amenities] == [
        (AmenityType.WIFI, "Fitness centre"),
        (AmenityType.SPA, ""),
    ]


def test_guest_room_attributes_supply_identity_and_name() -> None:
    document = (
        '<GuestRoom name="Deluxe King" maxOccupancy="2" RoomTypeCode="DK123">'
        '<Bed type="King" count="1"/>'
        '<Amenity code="WIFI">Free High Speed Wi-Fi</Amenity>'
        '<Photo url="http://example.com/room.jpg"/>'
        "</GuestRoom>"
    )

    (parsed,) = _parser(io.StringIO(document))

    assert parsed.source_id == "DK123"
    assert parsed.hotel_id is None
    assert parsed.room.name == "Deluxe King"
    assert parsed.room.max_occupancy == 2
    assert [(bed.type, bed.count) for bed in parsed.room.beds] == [(BedType.KING, 1)]
    assert [(amenity.type, amenity.description) for amenity in parsed.room.amenities] == [
        (AmenityType.WIFI, "Free High Speed Wi-Fi"),
    ]
    assert [photo.url for photo in parsed.room.photos] == ["http://example.com/room.jpg"]


def test_malformed_feed_yields_completed_rooms_then_raises() -> None:
    document = "<Feed><Room id='A' name='Good'/><Room id='B' name='Broken'></Feed>"
    rooms: list[str] = []

    with pytest.raises(FeedParseError) as excinfo:
        for parsed in _parser(io.StringIO(document)):
            rooms.append(parsed.room.name)

    assert rooms == ["Good"]
    assert excinfo.value.line == 1
    assert isinstance(excinfo.value, FeedParserError)


def test_empty_document_is_malformed() -> None:
    with pytest.raises(FeedParseError):
        list(_parser(io.BytesIO(b"")))


def test_document_without_rooms_yields_nothing() -> None:
    assert list(_parser(io.BytesIO(b"<Feed><Hotel HotelCode='H-1'/></Feed>"))) == []


def test_parser_is_single_use() -> None:
    parser = _parser(io.BytesIO(b"<Feed/>"))
    list(parser)

    with pytest.raises(FeedParserError):
        list(parser)


def test_parse_invokes_callback_and_returns_count(sample_feed_path: Path) -> None:
    received: list[tuple[NormalizedRoom, str | None, str | None]] = []

    with sample_feed_path.open("rb") as handle:
        count = _parser(handle).parse(lambda room, source_id, hotel_id: received.append(
            (room, source_id, hotel_id)
        ))

    assert count == 3
    assert [source_id for _room, source_id, _hotel_id in received] == ["GR-1", "TG-2", "S-1"]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("4", 4),
        ("  4 guests", 4),
        ("-2", -2),
        ("guests: 4", None),
        ("", None),
    ],
)
def test_parse_leading_int(text: str, expected: int | None) -> None:
    assert parse_leading_int(text) == expected
