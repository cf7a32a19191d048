"""Versioned JSON envelope for the source payload stored on a room mapping."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final, cast

from pydantic import TypeAdapter
from sqlalchemy import Text, TypeDecorator

from roommap.domain.model import NormalizedRoom

if TYPE_CHECKING:
    from sqlalchemy import Dialect

SNAPSHOT_VERSION: Final[int] = 1

_ROOM_ADAPTER: Final[TypeAdapter[NormalizedRoom]] = TypeAdapter(NormalizedRoom)


class SnapshotVersionError(ValueError):
    """Raised when a stored snapshot carries a version this code cannot read."""


def encode_snapshot(room: NormalizedRoom) -> dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "room": _ROOM_ADAPTER.dump_python(room, mode="json"),
    }


def decode_snapshot(payload: Mapping[str, Any]) -> NormalizedRoom:
    version = payload.get("version")
    if version != SNAPSHOT_VERSION:
        raise SnapshotVersionError(f"Unsupported snapshot version: {version!r}")
    return _ROOM_ADAPTER.validate_python(payload.get("room"))


class RoomSnapshotType(TypeDecorator[NormalizedRoom]):
    impl = Text
    cache_ok = True

    def process_bind_param(self, value: NormalizedRoom | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(encode_snapshot(value), separators=(",", ":"))

    def process_result_value(self, value: str | None, dialect: Dialect) -> NormalizedRoom | None:
        _ = dialect
        if value is None:
            return None
        loaded = json.loads(value)
        if not isinstance(loaded, Mapping):
            raise SnapshotVersionError("Snapshot payload is not an envelope")
        return decode_snapshot(cast("Mapping[str, Any]", loaded))
