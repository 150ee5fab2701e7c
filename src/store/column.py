"""Typed column storage.

This module implements the two concrete column variants, numeric and text.
The variant is fixed when a column is created, so per-value operations never
dispatch on a runtime type tag; they only validate incoming values.
"""

from __future__ import annotations

from numbers import Real
from typing import Any, Iterable, Iterator

import numpy as np

from core.constants import MIN_NUMERIC_CAPACITY, NUMERIC_PAD_VALUE, TEXT_PAD_VALUE
from core.errors import RowCountMismatchError, ShapeMismatchError, TypeMismatchError
from core.types import COLUMN_KINDS, NUMERIC, TEXT, ColumnKind, ShapeDescriptor


class Column:
    """Named, homogeneously typed, ordered sequence of values.

    Build columns with ``Column.create`` or ``Column.from_values``. A column
    stored in a ``Table`` is owned by it: its length can then only change
    through table operations.

    Attributes:
        shape: Optional shape descriptor carried as column metadata.
    """

    kind: ColumnKind

    def __init__(self, name: str) -> None:
        self._name = name
        self._owned = False
        self.shape: ShapeDescriptor | None = None

    @staticmethod
    def create(name: str, kind: ColumnKind) -> "Column":
        """Create an empty column of the given kind.

        Args:
            name: Column name.
            kind: ``"numeric"`` or ``"text"``.

        Returns:
            Empty concrete column.

        Raises:
            TypeMismatchError: If the kind is unknown.
        """
        if kind == NUMERIC:
            return NumericColumn(name)
        if kind == TEXT:
            return TextColumn(name)
        raise TypeMismatchError(
            f"Unknown column kind '{kind}' for column '{name}'. "
            f"Use one of {COLUMN_KINDS}."
        )

    @staticmethod
    def from_values(
        name: str,
        values: Iterable[Any],
        kind: ColumnKind | None = None,
    ) -> "Column":
        """Create a column holding a copy of ``values``.

        Args:
            name: Column name.
            values: Real numbers, strings, a 1-D numpy array or another column.
            kind: Optional explicit kind; inferred from the values when omitted.

        Returns:
            Populated concrete column.

        Raises:
            TypeMismatchError: If values mix kinds or disagree with ``kind``.
            ShapeMismatchError: If a numpy array is not one-dimensional.
        """
        if isinstance(values, Column):
            if kind is not None and kind != values.kind:
                raise TypeMismatchError(
                    f"Cannot create {kind} column '{name}' from {values.kind} "
                    f"column '{values.name}'."
                )
            return values.copy(name)
        if isinstance(values, np.ndarray):
            if values.ndim != 1:
                raise ShapeMismatchError(
                    f"Cannot store a {values.ndim}-D array in column '{name}'. "
                    "Pack multi-dimensional structures before assigning them."
                )
            materialized: Any = values
        else:
            materialized = list(values)
        column = Column.create(name, kind or infer_kind(materialized, name))
        column._extend(materialized)
        return column

    @property
    def name(self) -> str:
        """Column name."""
        return self._name

    def __len__(self) -> int:
        raise NotImplementedError

    def __iter__(self) -> Iterator[Any]:
        for index in range(len(self)):
            yield self._get(index)

    def __getitem__(self, index: int) -> Any:
        return self.get(index)

    def __setitem__(self, index: int, value: Any) -> None:
        self.set(index, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Column):
            return NotImplemented
        return (
            self.name == other.name
            and self.kind == other.kind
            and len(self) == len(other)
            and self._values_equal(other)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        preview = self.to_list()[:5]
        suffix = ", ..." if len(self) > 5 else ""
        return f"{type(self).__name__}({self.name!r}, {preview}{suffix})"

    def get(self, index: int) -> Any:
        """Return the value at ``index`` (negative indices count from the end)."""
        return self._get(self._normalize_index(index))

    def set(self, index: int, value: Any) -> None:
        """Replace the value at ``index``.

        Raises:
            TypeMismatchError: If the value's kind disagrees with the column.
            IndexError: If the index is out of range.
        """
        position = self._normalize_index(index)
        self._set(position, self._coerce(value))

    def append(self, value: Any) -> None:
        """Append one value, growing the column by one.

        Raises:
            TypeMismatchError: If the value's kind disagrees with the column.
            RowCountMismatchError: If the column is owned by a table.
        """
        self._ensure_unowned("append to")
        self._append(self._coerce(value))

    def resize(self, new_length: int) -> None:
        """Truncate or pad the column to ``new_length`` values.

        Padding uses ``0.0`` for numeric columns and ``""`` for text columns.

        Raises:
            RowCountMismatchError: If the column is owned by a table.
            ValueError: If ``new_length`` is negative.
        """
        self._ensure_unowned("resize")
        self._resize_values(_checked_length(new_length))

    def to_list(self) -> list[Any]:
        """Return the values as a plain Python list."""
        raise NotImplementedError

    def copy(self, name: str | None = None) -> "Column":
        """Return an unowned deep copy, optionally under a new name."""
        duplicate = Column.create(self.name if name is None else name, self.kind)
        duplicate._extend(self._raw_values())
        duplicate.shape = self.shape
        return duplicate

    def _normalize_index(self, index: int) -> int:
        length = len(self)
        position = index + length if index < 0 else index
        if not 0 <= position < length:
            raise IndexError(
                f"Index {index} out of range for column '{self.name}' of length {length}."
            )
        return position

    def _ensure_unowned(self, action: str) -> None:
        if self._owned:
            raise RowCountMismatchError(
                f"Cannot {action} column '{self.name}' while it belongs to a table. "
                "Use the table's append_row or resize to keep columns aligned."
            )

    def _get(self, index: int) -> Any:
        raise NotImplementedError

    def _set(self, index: int, value: Any) -> None:
        raise NotImplementedError

    def _append(self, value: Any) -> None:
        raise NotImplementedError

    def _coerce(self, value: Any) -> Any:
        raise NotImplementedError

    def _extend(self, values: Any) -> None:
        raise NotImplementedError

    def _resize_values(self, new_length: int) -> None:
        raise NotImplementedError

    def _raw_values(self) -> Any:
        raise NotImplementedError

    def _values_equal(self, other: "Column") -> bool:
        raise NotImplementedError


class NumericColumn(Column):
    """Column of float64 values backed by a growable numpy buffer."""

    kind: ColumnKind = NUMERIC

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._buffer = np.empty(MIN_NUMERIC_CAPACITY, dtype=np.float64)
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def to_list(self) -> list[float]:
        return self._buffer[: self._length].tolist()

    def to_numpy(self) -> np.ndarray:
        """Return a copy of the values as a float64 array."""
        return self._buffer[: self._length].copy()

    def _get(self, index: int) -> float:
        return float(self._buffer[index])

    def _set(self, index: int, value: float) -> None:
        self._buffer[index] = value

    def _append(self, value: float) -> None:
        self._reserve(self._length + 1)
        self._buffer[self._length] = value
        self._length += 1

    def _coerce(self, value: Any) -> float:
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, Real):
            raise TypeMismatchError(
                f"Cannot store {value!r} in numeric column '{self.name}': "
                "expected a real number."
            )
        return float(value)

    def _extend(self, values: Any) -> None:
        if isinstance(values, np.ndarray) and values.dtype.kind in "fiu":
            incoming = values.astype(np.float64)
        else:
            incoming = np.array([self._coerce(value) for value in values], dtype=np.float64)
        end = self._length + len(incoming)
        self._reserve(end)
        self._buffer[self._length : end] = incoming
        self._length = end

    def _resize_values(self, new_length: int) -> None:
        if new_length > self._length:
            self._reserve(new_length)
            self._buffer[self._length : new_length] = NUMERIC_PAD_VALUE
        self._length = new_length

    def _reserve(self, capacity: int) -> None:
        if capacity <= len(self._buffer):
            return
        grown = np.empty(max(capacity, 2 * len(self._buffer)), dtype=np.float64)
        grown[: self._length] = self._buffer[: self._length]
        self._buffer = grown

    def _raw_values(self) -> np.ndarray:
        return self._buffer[: self._length]

    def _values_equal(self, other: Column) -> bool:
        return bool(np.array_equal(self._raw_values(), other._raw_values(), equal_nan=True))


class TextColumn(Column):
    """Column of Python strings."""

    kind: ColumnKind = TEXT

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._values: list[str] = []

    def __len__(self) -> int:
        return len(self._values)

    def to_list(self) -> list[str]:
        return list(self._values)

    def _get(self, index: int) -> str:
        return self._values[index]

    def _set(self, index: int, value: str) -> None:
        self._values[index] = value

    def _append(self, value: str) -> None:
        self._values.append(value)

    def _coerce(self, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeMismatchError(
                f"Cannot store {value!r} in text column '{self.name}': expected a string."
            )
        return str(value)

    def _extend(self, values: Any) -> None:
        if isinstance(values, np.ndarray) and values.dtype.kind == "U":
            self._values.extend(values.tolist())
            return
        self._values.extend(self._coerce(value) for value in values)

    def _resize_values(self, new_length: int) -> None:
        if new_length < len(self._values):
            del self._values[new_length:]
        else:
            self._values.extend([TEXT_PAD_VALUE] * (new_length - len(self._values)))

    def _raw_values(self) -> list[str]:
        return self._values

    def _values_equal(self, other: Column) -> bool:
        return self._values == other._raw_values()


def infer_kind(values: Any, name: str = "") -> ColumnKind:
    """Infer the column kind shared by all ``values``.

    Empty inputs are numeric.

    Raises:
        TypeMismatchError: If values mix kinds or hold unsupported types.
    """
    if isinstance(values, np.ndarray):
        if values.dtype.kind in "fiu":
            return NUMERIC
        if values.dtype.kind == "U":
            return TEXT
        values = values.tolist()
    kinds = {_value_kind(value, name) for value in values}
    if not kinds:
        return NUMERIC
    if len(kinds) > 1:
        raise TypeMismatchError(
            f"Column '{name}' mixes numbers and strings. "
            "Columns hold one kind of value; convert values before assigning."
        )
    return kinds.pop()


def _value_kind(value: Any, name: str) -> ColumnKind:
    if isinstance(value, str):
        return TEXT
    if isinstance(value, Real) and not isinstance(value, (bool, np.bool_)):
        return NUMERIC
    raise TypeMismatchError(
        f"Unsupported value {value!r} for column '{name}': expected a real number or string."
    )


def _checked_length(new_length: int) -> int:
    if new_length < 0:
        raise ValueError(f"Column length must be non-negative, got {new_length}.")
    return int(new_length)
