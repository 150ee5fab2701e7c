"""Unit tests for extension helpers shared by backends."""

from __future__ import annotations

import pytest

from formats.backend import extension_matches, normalize_extension


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("data/m.CSV", ".csv"),
        (".csv", ".csv"),
        ("csv", ".csv"),
        ("matrix.parquet", ".parquet"),
        ("archive/table", ""),
    ],
)
def test_normalize_extension(value: str, expected: str) -> None:
    """Paths, dotted and bare extensions normalize to a lower-case suffix."""
    assert normalize_extension(value) == expected


def test_extension_matches_requires_a_suffix() -> None:
    """Paths without a suffix never match."""
    assert not extension_matches("archive/table", (".csv",))
