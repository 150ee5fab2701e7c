"""Polynomial coefficient container.

A polynomial packs as its coefficient vector, lowest power first. It also
serializes to a two-column table (``power``, ``coefficient``); the IO layer
prefers the single-column form.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from core.errors import ShapeMismatchError, TypeMismatchError
from core.types import NUMERIC, ShapeDescriptor
from adapters.protocol import PackedColumn
from store.column import Column
from store.table import Table

_POWER_COLUMN = "power"
_COEFFICIENT_COLUMN = "coefficient"


@dataclass(eq=False)
class Polynomial:
    """Polynomial ``c0 + c1*x + c2*x**2 + ...``.

    Attributes:
        coefficients: Coefficients ordered by increasing power.
    """

    coefficients: Any

    def __post_init__(self) -> None:
        coefficients = np.asarray(self.coefficients, dtype=np.float64)
        if coefficients.ndim != 1:
            raise ShapeMismatchError(
                f"Polynomial coefficients must be one-dimensional, got shape "
                f"{coefficients.shape}."
            )
        self.coefficients = coefficients

    @property
    def degree(self) -> int:
        return max(len(self.coefficients) - 1, 0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return bool(np.array_equal(self.coefficients, other.coefficients))

    def pack(self) -> PackedColumn:
        column = Column.from_values("coefficients", self.coefficients, NUMERIC)
        return PackedColumn(column=column, shape=ShapeDescriptor((len(self.coefficients),)))

    @classmethod
    def unpack(cls, column: Column, shape: ShapeDescriptor | None) -> "Polynomial":
        if shape is not None and len(shape.dimensions) != 1:
            raise ShapeMismatchError(
                f"Polynomial coefficients are one-dimensional; got shape "
                f"{list(shape.dimensions)}."
            )
        return cls(column.to_list())

    def serialize(self) -> Table:
        powers = np.arange(len(self.coefficients), dtype=np.float64)
        return Table({_POWER_COLUMN: powers, _COEFFICIENT_COLUMN: self.coefficients})

    @classmethod
    def deserialize(cls, table: Table) -> "Polynomial":
        powers = _numeric_values(table, _POWER_COLUMN)
        coefficients = _numeric_values(table, _COEFFICIENT_COLUMN)
        if sorted(powers) != list(range(len(powers))):
            raise ShapeMismatchError(
                "Polynomial table must list each power from 0 upward exactly once."
            )
        ordered = [value for _, value in sorted(zip(powers, coefficients))]
        return cls(ordered)


def _numeric_values(table: Table, name: str) -> list[float]:
    column = table.column(name)
    if column.kind != NUMERIC:
        raise TypeMismatchError(
            f"Polynomial column '{name}' must be numeric, found {column.kind}."
        )
    return column.to_list()
