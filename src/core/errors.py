"""Tabio exception hierarchy.

This module defines structured domain errors for the table and IO layers.
Each failure kind has its own type so callers can tell them apart.
"""

from __future__ import annotations


class TabioError(Exception):
    """Base exception for all Tabio failures."""


class TabioConfigError(TabioError):
    """Raised for invalid runtime configuration."""


class TabioDependencyError(TabioError):
    """Raised when an optional runtime dependency is missing."""


class ParseError(TabioError):
    """Raised for malformed input bytes.

    Attributes:
        reason: Short description of what is malformed.
        position: Zero-based character offset, when known.
        line: One-based line number, when known.
        column: One-based column number, when known.
    """

    def __init__(
        self,
        reason: str,
        position: int | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.reason = reason
        self.position = position
        self.line = line
        self.column = column
        super().__init__(_with_location(reason, line, column))


class DuplicateHeaderError(TabioError):
    """Raised when a header row or table repeats a column name.

    Attributes:
        name: The repeated column name.
        position: Zero-based character offset of the duplicate, when parsed.
    """

    def __init__(self, name: str, position: int | None = None) -> None:
        self.name = name
        self.position = position
        location = f" at offset {position}" if position is not None else ""
        super().__init__(
            f"Duplicate column name '{name}'{location}. "
            "Column names must be unique within a table."
        )


class TypeMismatchError(TabioError):
    """Raised when a value or field disagrees with its column kind.

    Attributes:
        position: Zero-based character offset of a parsed field, when known.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        self.position = position
        super().__init__(message)


class RowCountMismatchError(TabioError):
    """Raised when a column length disagrees with the table row count."""


class ShapeMismatchError(TabioError):
    """Raised when packed values cannot be reshaped to the requested shape."""


class KeyNotFoundError(TabioError):
    """Raised for a missing column name or format identifier."""


class UnsupportedFormatError(TabioError):
    """Raised when a known format has no available backend."""


def _with_location(reason: str, line: int | None, column: int | None) -> str:
    if line is None:
        return reason
    if column is None:
        return f"{reason} (line {line})"
    return f"{reason} (line {line}, column {column})"
