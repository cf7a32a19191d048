"""Streaming parser for supplier room feeds.

The parser is an event-driven state machine on top of the incremental expat
SAX reader. It reads the upstream stream one chunk at a time, never holds the
whole document, and hands out each room as soon as its closing tag was seen.
"""

from __future__ import annotations

import logging
import re
import xml.sax
from collections import deque
from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import TYPE_CHECKING, Final, NamedTuple, Protocol, cast
from uuid import uuid4
from xml.sax import SAXParseException
from xml.sax.handler import ContentHandler

from roommap.config.feeds import DEFAULT_FEED_CHUNK_SIZE
from roommap.domain.model import (
    Amenity,
    Bed,
    BoardType,
    NormalizedRoom,
    Photo,
    RateRecord,
    RoomAttributes,
    utc_now,
)
from roommap.domain.model.feed import DEFAULT_CURRENCY, DEFAULT_RATE_SOURCE
from roommap.domain.normalization import detect_board_type, map_amenity, normalize_bed_type

from . import vocabulary as tags
from .errors import FeedParseError, FeedParserError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from datetime import datetime
    from xml.sax.expatreader import ExpatParser
    from xml.sax.xmlreader import AttributesImpl

log = logging.getLogger(__name__)

RATE_VALIDITY: Final[timedelta] = timedelta(hours=24)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class SupportsRead(Protocol):
    def read(self, size: int = -1, /) -> bytes | str: ...


type FeedSource = SupportsRead | Iterable[bytes] | Iterable[str]
type RoomCallback = Callable[[NormalizedRoom, str | None, str | None], object]


class ParsedRoom(NamedTuple):
    room: NormalizedRoom
    source_id: str | None
    hotel_id: str | None


def parse_leading_int(text: str) -> int | None:
    """Parse an integer prefix the way lenient feeds expect (``"4 guests"`` -> 4)."""

    match = _LEADING_INT.match(text)
    if match is None:
        return None
    return int(match.group(1))


def _default_rate_id() -> str:
    return f"rate_{uuid4().hex[:9]}"


@dataclass(slots=True)
class _RateDraft:
    id: str
    code: str | None
    expires_at: datetime
    total_amount: str = "0.00"
    currency: str = DEFAULT_CURRENCY
    board_type: BoardType = BoardType.ROOM_ONLY

    def build(self, *, source: str) -> RateRecord:
        currency = self.currency
        return RateRecord(
            id=self.id,
            code=self.code,
            expires_at=self.expires_at,
            total_amount=self.total_amount,
            total_currency=currency,
            base_currency=currency,
            tax_currency=currency,
            fee_currency=currency,
            due_at_accommodation_currency=currency,
            board_type=self.board_type,
            source=source,
        )


@dataclass(slots=True)
class _RoomDraft:
    name: str = ""
    source_id: str | None = None
    max_occupancy: int | None = None
    beds: list[Bed] = field(default_factory=list[Bed])
    photos: list[Photo] = field(default_factory=list[Photo])
    amenities: list[Amenity] = field(default_factory=list[Amenity])
    room_class: str | None = None
    view: str | None = None
    rates: list[RateRecord] = field(default_factory=list[RateRecord])

    @classmethod
    def open(cls, attributes: dict[str, str]) -> _RoomDraft:
        draft = cls(
            name=tags.first_attribute(attributes, tags.ROOM_NAME_ATTRIBUTES) or "",
            source_id=tags.first_attribute(attributes, tags.ROOM_ID_ATTRIBUTES),
        )
        occupancy = tags.first_attribute(attributes, tags.ROOM_OCCUPANCY_ATTRIBUTES)
        if occupancy:
            draft.max_occupancy = parse_leading_int(occupancy)
        return draft

    def add_bed_type(self, raw: str) -> None:
        """Count one more bed of the normalized type, merging with an existing entry."""

        bed_type = normalize_bed_type(raw)
        for index, bed in enumerate(self.beds):
            if bed.type == bed_type:
                self.beds[index] = replace(bed, count=bed.count + 1)
                return
        self.beds.append(Bed(type=bed_type, count=1))

    def build(self) -> NormalizedRoom:
        return NormalizedRoom(
            name=self.name,
            max_occupancy=self.max_occupancy,
            beds=tuple(self.beds),
            photos=tuple(self.photos),
            amenities=tuple(self.amenities),
            attributes=RoomAttributes(room_class=self.room_class, view=self.view),
            rates=tuple(self.rates),
        )


class _FeedHandler(ContentHandler):
    """SAX callbacks implementing the room state machine."""

    def __init__(
        self,
        *,
        emit: Callable[[ParsedRoom], None],
        rate_source: str,
        clock: Callable[[], datetime],
        rate_id_factory: Callable[[], str],
    ) -> None:
        super().__init__()
        self._emit = emit
        self._rate_source = rate_source
        self._clock = clock
        self._rate_id_factory = rate_id_factory

        self._hotel_id: str | None = None
        self._room: _RoomDraft | None = None
        self._rate: _RateDraft | None = None
        self._text: list[str] = []
        # attributes of every open element, so close handlers can read them
        self._open_attributes: list[dict[str, str]] = []

    # SAX callbacks -----------------------------------------------------------

    def startElement(self, name: str, attrs: AttributesImpl) -> None:  # noqa: N802
        attributes = dict(attrs.items())
        self._open_attributes.append(attributes)
        self._text.clear()

        if name in tags.HOTEL_TAGS:
            self._hotel_id = tags.first_attribute(attributes, tags.HOTEL_ID_ATTRIBUTES)

        if name in tags.ROOM_TAGS:
            self._room = _RoomDraft.open(attributes)
            self._rate = None

        room = self._room
        if room is None:
            return

        if name == tags.BED_TAG:
            self._open_bed(room, attributes)
        elif name == tags.ROOM_TYPE_TAG:
            self._open_room_type(room, attributes)
        elif name in tags.PHOTO_TAGS:
            url = tags.first_attribute(attributes, tags.PHOTO_URL_ATTRIBUTES)
            if url:
                room.photos.append(Photo(url=url))
        elif name == tags.AMENITY_TAG:
            # placeholder; the element text becomes the description on close
            room.amenities.append(Amenity(type=map_amenity(attributes.get("code") or "")))
        elif name in tags.RATE_TAGS:
            self._rate = _RateDraft(
                id=attributes.get("id") or self._rate_id_factory(),
                code=attributes.get("code") or None,
                expires_at=self._clock() + RATE_VALIDITY,
            )

    def characters(self, content: str) -> None:
        if self._room is not None:
            self._text.append(content)

    def endElement(self, name: str) -> None:  # noqa: N802
        attributes = self._open_attributes.pop() if self._open_attributes else {}

        if name in tags.HOTEL_TAGS:
            self._hotel_id = None

        room = self._room
        if room is None:
            return

        content = "".join(self._text).strip()

        if self._rate is not None:
            if name in tags.RATE_TAGS:
                room.rates.append(self._rate.build(source=self._rate_source))
                self._rate = None
                return
            self._close_rate_field(self._rate, name, content, attributes)

        self._close_room_field(room, name, content)

        if name in tags.ROOM_TAGS:
            if room.name:
                self._emit(ParsedRoom(room.build(), room.source_id, self._hotel_id))
            else:
                log.debug("Dropping room without a name (source id %s)", room.source_id)
            self._room = None
            self._rate = None

    # element handlers --------------------------------------------------------

    @staticmethod
    def _open_bed(room: _RoomDraft, attributes: dict[str, str]) -> None:
        count = parse_leading_int(attributes.get("count") or "1")
        room.beds.append(
            Bed(
                type=normalize_bed_type(attributes.get("type") or ""),
                count=count if count is not None and count >= 1 else 1,
            )
        )

    @staticmethod
    def _open_room_type(room: _RoomDraft, attributes: dict[str, str]) -> None:
        type_name = tags.first_attribute(attributes, tags.ROOM_TYPE_NAME_ATTRIBUTES)
        type_code = tags.first_attribute(attributes, tags.ROOM_TYPE_CODE_ATTRIBUTES)
        if type_name and not room.name:
            room.name = type_name
        if type_code and not room.source_id:
            room.source_id = type_code

    @staticmethod
    def _close_rate_field(
        rate: _RateDraft,
        name: str,
        content: str,
        attributes: dict[str, str],
    ) -> None:
        if name in tags.AMOUNT_TAGS:
            rate.total_amount = content
            currency = attributes.get("currency")
            if currency:
                rate.currency = currency
        elif name in tags.BOARD_TAGS:
            board_type = detect_board_type(content)
            if board_type is not BoardType.ROOM_ONLY:
                rate.board_type = board_type

    @staticmethod
    def _close_room_field(room: _RoomDraft, name: str, content: str) -> None:
        if name in tags.NAME_TAGS:
            room.name = content
        elif name == tags.MAX_OCCUPANCY_TAG:
            room.max_occupancy = parse_leading_int(content)
        elif name == tags.BED_TYPE_TAG:
            room.add_bed_type(content)
        elif name == tags.ROOM_CATEGORY_TAG:
            room.room_class = content
        elif name == tags.ROOM_VIEW_TAG:
            room.view = content
        elif name == tags.ROOM_AMENITY_TAG:
            if content:
                room.amenities.append(Amenity(type=map_amenity(content), description=content))
        elif name == tags.AMENITY_TAG and room.amenities:
            room.amenities[-1] = replace(room.amenities[-1], description=content)


def _as_bytes(chunk: bytes | str) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else chunk


def iter_chunks(source: FeedSource, chunk_size: int = DEFAULT_FEED_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield non-empty byte chunks from a readable object or an iterable of chunks."""

    read = getattr(source, "read", None)
    if callable(read):
        reader = cast("SupportsRead", source)
        while chunk := reader.read(chunk_size):
            yield _as_bytes(chunk)
        return
    for chunk in cast("Iterable[bytes | str]", source):
        if chunk:
            yield _as_bytes(chunk)


class HotelRoomFeedParser:
    """Turn one feed stream into an ordered, finite, single-use sequence of rooms."""

    def __init__(
        self,
        stream: FeedSource,
        *,
        chunk_size: int = DEFAULT_FEED_CHUNK_SIZE,
        rate_source: str = DEFAULT_RATE_SOURCE,
        clock: Callable[[], datetime] = utc_now,
        rate_id_factory: Callable[[], str] = _default_rate_id,
    ) -> None:
        self._stream = stream
        self._chunk_size = chunk_size
        self._rate_source = rate_source
        self._clock = clock
        self._rate_id_factory = rate_id_factory
        self._consumed = False

    def iter_rooms(self) -> Iterator[ParsedRoom]:
        """Lazily yield rooms in document order.

        Rooms completed by a chunk are yielded before the next chunk is read.
        Malformed markup raises ``FeedParseError`` after the rooms that closed
        before the error have been yielded.
        """

        if self._consumed:
            raise FeedParserError("Feed parser instances are single use; open a new stream")
        self._consumed = True

        pending: deque[ParsedRoom] = deque()
        handler = _FeedHandler(
            emit=pending.append,
            rate_source=self._rate_source,
            clock=self._clock,
            rate_id_factory=self._rate_id_factory,
        )
        reader = cast("ExpatParser", xml.sax.make_parser())
        reader.setContentHandler(handler)

        try:
            # start the document up front so close() rejects an empty stream
            reader.feed(b"")
            for chunk in iter_chunks(self._stream, self._chunk_size):
                reader.feed(chunk)
                while pending:
                    yield pending.popleft()
            reader.close()
        except SAXParseException as exc:
            while pending:
                yield pending.popleft()
            raise FeedParseError.from_sax(exc) from exc

        while pending:
            yield pending.popleft()

    def __iter__(self) -> Iterator[ParsedRoom]:
        return self.iter_rooms()

    def parse(self, on_room: RoomCallback) -> int:
        """Invoke ``on_room(room, source_id, hotel_id)`` for every room; return the count."""

        delivered = 0
        for parsed in self.iter_rooms():
            on_room(parsed.room, parsed.source_id, parsed.hotel_id)
            delivered += 1
        return delivered
