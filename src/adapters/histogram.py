"""Histogram container.

A histogram is a short run of contiguous bins. It has no natural flat
layout, so it converts to a three-column table (``lower``, ``upper``,
``count``) with one row per bin.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from core.constants import (
    HISTOGRAM_COUNT_COLUMN,
    HISTOGRAM_LOWER_COLUMN,
    HISTOGRAM_UPPER_COLUMN,
)
from core.errors import ShapeMismatchError, TypeMismatchError
from core.types import NUMERIC
from store.table import Table


@dataclass(eq=False)
class Histogram:
    """Binned counts over contiguous intervals.

    Attributes:
        edges: Bin boundaries, one more than the number of bins.
        counts: Count per bin.
    """

    edges: Any
    counts: Any

    def __post_init__(self) -> None:
        edges = np.asarray(self.edges, dtype=np.float64).reshape(-1)
        counts = np.asarray(self.counts, dtype=np.float64).reshape(-1)
        if len(counts) < 1:
            raise ShapeMismatchError("Histogram needs at least one bin.")
        if len(edges) != len(counts) + 1:
            raise ShapeMismatchError(
                f"Histogram with {len(counts)} bins needs {len(counts) + 1} edges, "
                f"got {len(edges)}."
            )
        self.edges = edges
        self.counts = counts

    @property
    def bin_count(self) -> int:
        return len(self.counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Histogram):
            return NotImplemented
        return bool(
            np.array_equal(self.edges, other.edges)
            and np.array_equal(self.counts, other.counts)
        )

    def serialize(self) -> Table:
        return Table(
            {
                HISTOGRAM_LOWER_COLUMN: self.edges[:-1],
                HISTOGRAM_UPPER_COLUMN: self.edges[1:],
                HISTOGRAM_COUNT_COLUMN: self.counts,
            }
        )

    @classmethod
    def deserialize(cls, table: Table) -> "Histogram":
        """Rebuild a histogram from its bin table.

        Raises:
            KeyNotFoundError: If one of the bin columns is missing.
            TypeMismatchError: If a bin column is not numeric.
            ShapeMismatchError: If the table has no rows or the bins are not
                contiguous.
        """
        lower = _bin_values(table, HISTOGRAM_LOWER_COLUMN)
        upper = _bin_values(table, HISTOGRAM_UPPER_COLUMN)
        counts = _bin_values(table, HISTOGRAM_COUNT_COLUMN)
        if len(lower) == 0:
            raise ShapeMismatchError("Histogram table has no bins.")
        if not np.array_equal(lower[1:], upper[:-1]):
            raise ShapeMismatchError(
                "Histogram bins are not contiguous: each lower edge must equal the "
                "previous upper edge."
            )
        edges = np.append(lower, upper[-1])
        return cls(edges, counts)


def _bin_values(table: Table, name: str) -> np.ndarray:
    column = table.column(name)
    if column.kind != NUMERIC:
        raise TypeMismatchError(
            f"Histogram column '{name}' must be numeric, found {column.kind}."
        )
    return np.asarray(column.to_list(), dtype=np.float64)
