"""Unit tests for the table container."""

from __future__ import annotations

import pytest

from core.errors import (
    DuplicateHeaderError,
    KeyNotFoundError,
    RowCountMismatchError,
    TypeMismatchError,
)
from core.types import NUMERIC, TEXT
from store.column import Column
from store.table import Table


def test_first_column_sets_row_count() -> None:
    """An empty table adopts the length of its first column."""
    table = Table()
    table.set_column("x", [1.0, 2.0, 3.0])

    assert table.row_count() == 3 and table.column_count() == 1


def test_set_column_rejects_length_mismatch() -> None:
    """New columns must match the table row count."""
    table = Table({"x": [1.0, 2.0]})

    with pytest.raises(RowCountMismatchError):
        table.set_column("y", [1.0])


def test_set_column_replaces_in_place_keeping_order() -> None:
    """Replacing a column keeps its position among the names."""
    table = Table({"a": [1.0], "b": ["x"], "c": [2.0]})
    table["b"] = ["y"]

    assert table.column_names() == ("a", "b", "c") and table["b"].to_list() == ["y"]


def test_replacement_may_change_kind() -> None:
    """A replacing column brings its own kind."""
    table = Table({"a": [1.0], "b": [2.0]})
    table["b"] = ["text"]

    assert table["b"].kind == TEXT


def test_replacing_only_column_with_other_length_is_rejected() -> None:
    """The row count is fixed while the table has columns."""
    table = Table({"a": [1.0, 2.0]})

    with pytest.raises(RowCountMismatchError):
        table.set_column("a", [1.0])


def test_set_column_copies_incoming_column() -> None:
    """Later changes to the caller's column must not reach the table."""
    source = Column.from_values("raw", [1.0, 2.0])
    table = Table()
    table.set_column("x", source)
    source.set(0, 50.0)

    assert table["x"].to_list() == [1.0, 2.0] and table["x"].name == "x"


def test_column_lookup_raises_key_not_found() -> None:
    """Unknown names should raise KeyNotFoundError."""
    with pytest.raises(KeyNotFoundError):
        Table({"a": [1.0]}).column("b")


def test_remove_last_column_resets_row_count() -> None:
    """A table without columns has zero rows."""
    table = Table({"a": [1.0, 2.0]})
    del table["a"]

    assert table.row_count() == 0 and "a" not in table


def test_rename_column_rejects_existing_name() -> None:
    """Renames cannot introduce duplicate names."""
    table = Table({"a": [1.0], "b": [2.0]})

    with pytest.raises(DuplicateHeaderError):
        table.rename_column("a", "b")


def test_rename_column_keeps_position() -> None:
    """Renamed columns stay where they were."""
    table = Table({"a": [1.0], "b": [2.0]})
    table.rename_column("a", "z")

    assert table.column_names() == ("z", "b") and table["z"].name == "z"


def test_append_row_accepts_mapping() -> None:
    """Rows may be given by column name."""
    table = Table({"name": ["a"], "value": [1.0]})
    table.append_row({"value": 2.0, "name": "b"})

    assert list(table.rows()) == [("a", 1.0), ("b", 2.0)]


def test_append_row_is_atomic_on_kind_mismatch() -> None:
    """A rejected row must not leave some columns longer than others."""
    table = Table({"name": ["a"], "value": [1.0]})

    with pytest.raises(TypeMismatchError):
        table.append_row(["b", "not a number"])

    assert table.row_count() == 1 and len(table["name"]) == 1


def test_append_row_requires_every_column() -> None:
    """Short rows are rejected."""
    table = Table({"name": ["a"], "value": [1.0]})

    with pytest.raises(RowCountMismatchError):
        table.append_row(["b"])


def test_resize_pads_each_kind() -> None:
    """Table resize pads numeric with 0.0 and text with ''."""
    table = Table({"name": ["a"], "value": [1.0]})
    table.resize(2)

    assert table.row(1) == ("", 0.0)


def test_copy_is_independent_snapshot() -> None:
    """Copies do not observe later mutations."""
    table = Table({"value": [1.0]})
    snapshot = table.copy()
    table["value"][0] = 5.0

    assert snapshot["value"].to_list() == [1.0]


def test_replace_contents_overwrites_in_place() -> None:
    """replace_contents keeps identity but takes the other table's data."""
    target = Table({"old": [1.0]})
    source = Table({"new": ["x", "y"]})
    target.replace_contents(source)

    assert target == source and target is not source


def test_empty_value_list_becomes_numeric_column() -> None:
    """Columns created from no values default to numeric."""
    assert Table({"x": []})["x"].kind == NUMERIC


def test_len_and_iteration_follow_rows_and_names() -> None:
    """len() counts rows and iteration yields column names."""
    table = Table({"a": [1.0, 2.0], "b": ["x", "y"]})

    assert len(table) == 2 and list(table) == ["a", "b"]
