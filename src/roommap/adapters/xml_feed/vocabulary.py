"""Tag and attribute names understood by the feed parser.

Two dialects are accepted in the same document: an attribute-centric one
(``GuestRoom``/``Bed``/``Amenity``) and an element-centric OTA/OTM one
(``Room``/``TypeRoom``/``BedType``/``RoomAmenity``). Attribute tuples are in
priority order.
"""

from __future__ import annotations

from typing import Final

HOTEL_TAGS: Final = frozenset({"Hotel", "HotelDescriptiveContent", "Property"})
HOTEL_ID_ATTRIBUTES: Final = ("HotelCode", "HotelID", "id", "Code")

ROOM_TAGS: Final = frozenset({"Room", "GuestRoom"})
ROOM_ID_ATTRIBUTES: Final = ("id", "code", "RoomTypeCode", "RoomID")
ROOM_NAME_ATTRIBUTES: Final = ("roomTypeName", "name")
ROOM_OCCUPANCY_ATTRIBUTES: Final = ("maxOccupancy", "MaxOccupancy")

ROOM_TYPE_TAG: Final = "TypeRoom"
ROOM_TYPE_NAME_ATTRIBUTES: Final = ("name",)
ROOM_TYPE_CODE_ATTRIBUTES: Final = ("RoomTypeCode", "code")

BED_TAG: Final = "Bed"
BED_TYPE_TAG: Final = "BedType"
PHOTO_TAGS: Final = frozenset({"Photo", "Image"})
PHOTO_URL_ATTRIBUTES: Final = ("url", "src")
AMENITY_TAG: Final = "Amenity"
ROOM_AMENITY_TAG: Final = "RoomAmenity"

NAME_TAGS: Final = frozenset({"Name", "RoomName"})
MAX_OCCUPANCY_TAG: Final = "MaxOccupancy"
ROOM_CATEGORY_TAG: Final = "RoomCategory"
ROOM_VIEW_TAG: Final = "RoomView"

RATE_TAGS: Final = frozenset({"Rate", "RatePlan"})
AMOUNT_TAGS: Final = frozenset({"Amount", "Total"})
BOARD_TAGS: Final = frozenset({"Meals", "Board"})


def first_attribute(attributes: dict[str, str], names: tuple[str, ...]) -> str | None:
    """Return the first non-empty attribute among ``names``."""

    for name in names:
        value = attributes.get(name)
        if value:
            return value
    return None
