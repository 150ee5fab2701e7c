"""Mixed-kind table of aligned columns.

This module owns the table container: uniquely named columns in insertion
order, all sharing one row count. Columns assigned into a table are copied
and owned by it, so row alignment cannot be broken from outside.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Mapping, Sequence

from core.errors import (
    DuplicateHeaderError,
    KeyNotFoundError,
    RowCountMismatchError,
)
from store.column import Column
from store.table_transforms import derive_column


class Table:
    """Ordered collection of uniquely named, equally long columns.

    A table is not safe for concurrent mutation. Hand ``copy()`` to other
    threads instead of sharing a live instance.
    """

    def __init__(self, columns: Mapping[str, Any] | None = None) -> None:
        """Create a table, optionally from a name-to-values mapping.

        Args:
            columns: Optional mapping of column names to columns or values.

        Raises:
            RowCountMismatchError: If the supplied columns differ in length.
            TypeMismatchError: If a value sequence mixes kinds.
        """
        self._columns: dict[str, Column] = {}
        self._row_count = 0
        for name, values in (columns or {}).items():
            self.set_column(name, values)

    def column_names(self) -> tuple[str, ...]:
        """Return column names in column order."""
        return tuple(self._columns)

    def column(self, name: str) -> Column:
        """Return the live column called ``name``.

        Raises:
            KeyNotFoundError: If the table has no such column.
        """
        try:
            return self._columns[name]
        except KeyError:
            raise KeyNotFoundError(
                f"Column '{name}' not found. Available columns: {list(self._columns)}."
            ) from None

    def set_column(self, name: str, values: Any) -> Column:
        """Insert a new column or replace the column with the same name.

        Args:
            name: Target column name; an existing column keeps its position.
            values: A ``Column`` (copied and renamed) or values accepted by
                ``Column.from_values``.

        Returns:
            The column now owned by the table.

        Raises:
            RowCountMismatchError: If the length disagrees with the row count
                of a table that already has columns.
            TypeMismatchError: If values mix kinds.
        """
        column = Column.from_values(name, values)
        if self._columns and len(column) != self._row_count:
            raise RowCountMismatchError(
                f"Column '{name}' has {len(column)} values but the table has "
                f"{self._row_count} rows. Resize the column or the table first."
            )
        previous = self._columns.get(name)
        if previous is not None:
            previous._owned = False
        column._owned = True
        self._columns[name] = column
        self._row_count = len(column)
        return column

    def remove_column(self, name: str) -> Column:
        """Detach and return the column called ``name``.

        Raises:
            KeyNotFoundError: If the table has no such column.
        """
        column = self.column(name)
        del self._columns[name]
        column._owned = False
        if not self._columns:
            self._row_count = 0
        return column

    def rename_column(self, old_name: str, new_name: str) -> None:
        """Rename a column in place, keeping its position.

        Raises:
            KeyNotFoundError: If ``old_name`` is missing.
            DuplicateHeaderError: If ``new_name`` names another column.
        """
        column = self.column(old_name)
        if new_name == old_name:
            return
        if new_name in self._columns:
            raise DuplicateHeaderError(new_name)
        column._name = new_name
        self._columns = {
            (new_name if name == old_name else name): value
            for name, value in self._columns.items()
        }

    def row_count(self) -> int:
        """Return the shared length of all columns."""
        return self._row_count

    def column_count(self) -> int:
        """Return the number of columns."""
        return len(self._columns)

    def row(self, index: int) -> tuple[Any, ...]:
        """Return one row as a tuple in column order."""
        return tuple(column.get(index) for column in self._columns.values())

    def rows(self) -> Iterator[tuple[Any, ...]]:
        """Yield rows as tuples in column order."""
        for index in range(self._row_count):
            yield self.row(index)

    def append_row(self, values: Sequence[Any] | Mapping[str, Any]) -> None:
        """Append one row to every column.

        Args:
            values: One value per column, in column order or keyed by name.

        Raises:
            RowCountMismatchError: If the row does not cover every column.
            KeyNotFoundError: If a mapping names an unknown column.
            TypeMismatchError: If a value disagrees with its column kind.
        """
        ordered = self._ordered_row_values(values)
        coerced = [
            column._coerce(value) for column, value in zip(self._columns.values(), ordered)
        ]
        for column, value in zip(self._columns.values(), coerced):
            column._append(value)
        self._row_count += 1

    def resize(self, new_length: int) -> None:
        """Truncate or pad every column to ``new_length`` rows.

        Raises:
            RowCountMismatchError: If the table has no columns.
            ValueError: If ``new_length`` is negative.
        """
        if not self._columns:
            raise RowCountMismatchError(
                "Cannot resize a table without columns. Add a column first."
            )
        if new_length < 0:
            raise ValueError(f"Row count must be non-negative, got {new_length}.")
        for column in self._columns.values():
            column._resize_values(new_length)
        self._row_count = new_length

    def derive(
        self,
        source: str,
        func: Callable[[Any], Any],
        target: str | None = None,
        vectorized: bool = True,
    ) -> Column:
        """Apply an elementwise numeric function and assign the result.

        See ``store.table_transforms.derive_column``.
        """
        return derive_column(self, source, func, target=target, vectorized=vectorized)

    def copy(self) -> "Table":
        """Return a deep, independent snapshot of the table."""
        snapshot = Table()
        for name, column in self._columns.items():
            snapshot.set_column(name, column)
        return snapshot

    def replace_contents(self, other: "Table") -> None:
        """Overwrite this table in place with a copy of ``other``."""
        snapshot = other.copy()
        for column in self._columns.values():
            column._owned = False
        self._columns = snapshot._columns
        self._row_count = snapshot._row_count

    def __getitem__(self, name: str) -> Column:
        return self.column(name)

    def __setitem__(self, name: str, values: Any) -> None:
        self.set_column(name, values)

    def __delitem__(self, name: str) -> None:
        self.remove_column(name)

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._columns))

    def __len__(self) -> int:
        return self._row_count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return (
            self.column_names() == other.column_names()
            and self._row_count == other._row_count
            and all(self._columns[name] == other._columns[name] for name in self._columns)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        kinds = ", ".join(f"{name}:{column.kind}" for name, column in self._columns.items())
        return f"Table([{kinds}], rows={self._row_count})"

    def _ordered_row_values(self, values: Sequence[Any] | Mapping[str, Any]) -> list[Any]:
        if not self._columns:
            raise RowCountMismatchError(
                "Cannot append a row to a table without columns. Add columns first."
            )
        if isinstance(values, Mapping):
            unknown = [name for name in values if name not in self._columns]
            if unknown:
                raise KeyNotFoundError(
                    f"Row names unknown columns {unknown}. "
                    f"Available columns: {list(self._columns)}."
                )
            missing = [name for name in self._columns if name not in values]
            if missing:
                raise RowCountMismatchError(
                    f"Row is missing values for columns {missing}. "
                    "Every column needs a value in each row."
                )
            return [values[name] for name in self._columns]
        ordered = list(values)
        if len(ordered) != len(self._columns):
            raise RowCountMismatchError(
                f"Row has {len(ordered)} values but the table has "
                f"{len(self._columns)} columns."
            )
        return ordered
