# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from roommap.app import (
    add_hotel_mapping,
    ingest_feed_file,
    list_conflicts,
    parse_feed,
    recalculate_quality_scores,
    resolve_conflict,
    show_room,
)
from roommap.config import configure_logging
from roommap.domain.model import ConflictResolution, ConflictStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from roommap.domain.model import MappingConflict, NormalizedRoom

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Map supplier room feeds onto the room catalog")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse = subparsers.add_parser("parse", help="Parse a feed and print normalized rooms")
    parse.add_argument("feed", help="Feed file path or http(s) URL")

    ingest = subparsers.add_parser("ingest", help="Parse a feed and map its rooms")
    ingest.add_argument("feed", help="Feed file path or http(s) URL")
    ingest.add_argument(
        "--source",
        type=str,
        help="Source name of the feed (defaults to ROOMMAP_FEED_SOURCE)",
    )
    ingest.add_argument(
        "--hotel-id",
        type=str,
        help="Source hotel id for rooms outside a hotel element",
    )
    ingest.add_argument(
        "--confidence",
        type=float,
        help="Confidence stored on new and automatic mappings (0.0-1.0)",
    )
    ingest.add_argument(
        "--primary",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Mark new mappings as primary (default: true)",
    )

    subparsers.add_parser(
        "recalculate-scores",
        help="Recompute the quality score of every room mapping",
    )

    conflicts = subparsers.add_parser("conflicts", help="Inspect and resolve field conflicts")
    conflicts_sub = conflicts.add_subparsers(dest="conflicts_command", required=True)
    conflicts_list = conflicts_sub.add_parser("list", help="List conflicts")
    conflicts_list.add_argument(
        "--status",
        choices=[status.value for status in ConflictStatus],
        default=ConflictStatus.OPEN.value,
        help="Conflict status to list (default: %(default)s)",
    )
    conflicts_resolve = conflicts_sub.add_parser("resolve", help="Resolve a conflict")
    conflicts_resolve.add_argument("conflict_id", help="Conflict id")
    conflicts_resolve.add_argument(
        "--strategy",
        choices=[resolution.value for resolution in ConflictResolution],
        required=True,
        help="Keep the internal value or apply a source's value",
    )
    conflicts_resolve.add_argument(
        "--source",
        type=str,
        help="Source whose value is applied (apply_source only)",
    )

    room = subparsers.add_parser("room", help="Canonical room commands")
    room_sub = room.add_subparsers(dest="room_command", required=True)
    room_show = room_sub.add_parser("show", help="Show unified data for a room")
    room_show.add_argument("room_id", help="Canonical room id")

    hotel_mapping = subparsers.add_parser("hotel-mapping", help="Hotel mapping commands")
    hotel_mapping_sub = hotel_mapping.add_subparsers(dest="hotel_mapping_command", required=True)
    hotel_mapping_add = hotel_mapping_sub.add_parser("add", help="Map a source hotel id")
    hotel_mapping_add.add_argument("--source", type=str, required=True)
    hotel_mapping_add.add_argument("--source-id", type=str, required=True)
    hotel_mapping_add.add_argument("--hotel-id", type=str, required=True)

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _validate(args: argparse.Namespace) -> None:
    if args.command == "ingest" and args.confidence is not None:
        if not 0.0 <= args.confidence <= 1.0:
            raise ValueError("Confidence must be between 0 and 1")
    if args.command == "conflicts" and args.conflicts_command == "resolve":
        args.conflict_id = _parse_uuid(args.conflict_id)
        if args.strategy == ConflictResolution.APPLY_SOURCE and not args.source:
            raise ValueError("--source is required with --strategy apply_source")
    if args.command == "room":
        args.room_id = _parse_uuid(args.room_id)


def _print_room(room: NormalizedRoom, source_id: str | None, hotel_id: str | None) -> None:
    record = {"source_id": source_id, "hotel_id": hotel_id, "room": asdict(room)}
    print(json.dumps(record, default=str))


def _print_conflict(conflict: MappingConflict) -> None:
    entries = ", ".join(f"{entry.source}={entry.value}" for entry in conflict.conflicting_sources)
    print(
        f"{conflict.id} {conflict.entity_type}:{conflict.entity_id} {conflict.field_name} "
        f"[{conflict.status}] {entries}"
    )


def _run(args: argparse.Namespace) -> None:  # noqa: C901
    if args.command == "parse":
        count = parse_feed(args.feed, _print_room)
        log.info("Parsed %s room(s)", count)
    elif args.command == "ingest":
        report = ingest_feed_file(
            args.feed,
            source=args.source,
            hotel_id=args.hotel_id,
            confidence=args.confidence,
            is_primary=args.primary,
        )
        if report.failed:
            log.warning("%s room(s) failed to map", report.failed)
    elif args.command == "recalculate-scores":
        updated = recalculate_quality_scores()
        log.info("Updated %s quality score(s)", updated)
    elif args.command == "conflicts" and args.conflicts_command == "list":
        for conflict in list_conflicts(ConflictStatus(args.status)):
            _print_conflict(conflict)
    elif args.command == "conflicts" and args.conflicts_command == "resolve":
        conflict = resolve_conflict(
            args.conflict_id,
            args.strategy,
            source_to_apply=args.source,
        )
        log.info("Resolved conflict %s (%s)", conflict.id, conflict.resolution)
    elif args.command == "room" and args.room_command == "show":
        unified = show_room(args.room_id)
        if unified is None:
            raise LookupError(f"Room {args.room_id} not found")
        print(json.dumps(asdict(unified), default=str, indent=2))
    elif args.command == "hotel-mapping" and args.hotel_mapping_command == "add":
        mapping = add_hotel_mapping(
            source=args.source,
            source_id=args.source_id,
            hotel_id=args.hotel_id,
        )
        log.info("Hotel mapping %s stored", mapping.id)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run(parsed_args)
    except Exception:
        log.exception("Fatal error while running %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
