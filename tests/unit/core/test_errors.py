"""Unit tests for the error hierarchy."""

from __future__ import annotations

from core.errors import (
    DuplicateHeaderError,
    KeyNotFoundError,
    ParseError,
    TabioError,
    TypeMismatchError,
    UnsupportedFormatError,
)


def test_parse_error_message_includes_location() -> None:
    """Parse errors should report line and column when known."""
    error = ParseError("Unterminated quoted field", position=12, line=3, column=5)

    assert str(error) == "Unterminated quoted field (line 3, column 5)"
    assert error.position == 12


def test_parse_error_without_location_keeps_reason() -> None:
    """Parse errors without a location should carry only the reason."""
    assert str(ParseError("Invalid Parquet payload")) == "Invalid Parquet payload"


def test_duplicate_header_error_exposes_name_and_offset() -> None:
    """Duplicate header errors should name the repeated column."""
    error = DuplicateHeaderError("a", position=4)

    assert error.name == "a" and "offset 4" in str(error)


def test_all_domain_errors_share_base() -> None:
    """Callers can catch every domain failure through TabioError."""
    errors = [
        KeyNotFoundError("missing"),
        TypeMismatchError("kind", position=1),
        UnsupportedFormatError("hdf5"),
    ]

    assert all(isinstance(error, TabioError) for error in errors)
