"""Errors raised by the room mapping domain."""

from __future__ import annotations


class RoomMapError(Exception):
    """Base class for failures of a single mapping operation."""


class NotFoundError(RoomMapError, LookupError):
    """Raised when a referenced entity does not exist."""


class InvalidInputError(RoomMapError, ValueError):
    """Raised when an operation is called with arguments it cannot honour."""


class ConflictAlreadyResolvedError(InvalidInputError):
    """Raised when resolving a conflict that is no longer open."""


class ConcurrentUpdateError(RoomMapError):
    """Raised by a unit of work when a commit lost a race with another writer."""
