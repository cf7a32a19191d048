"""Errors raised while reading supplier feeds."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xml.sax import SAXParseException


class FeedParserError(RuntimeError):
    """Base class for feed parsing failures."""


class FeedParseError(FeedParserError):
    """Raised when the feed markup is malformed; the whole parse is aborted."""

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column

    @classmethod
    def from_sax(cls, exc: SAXParseException) -> FeedParseError:
        line = exc.getLineNumber()
        column = exc.getColumnNumber()
        return cls(
            f"Malformed feed at line {line}, column {column}: {exc.getMessage()}",
            line=line,
            column=column,
        )
