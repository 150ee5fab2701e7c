"""Derived-column transforms.

This module applies elementwise numeric functions to table columns and
assigns the results back, preserving row order and length.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

import numpy as np

from core.errors import RowCountMismatchError, TypeMismatchError
from core.types import NUMERIC
from store.column import Column, NumericColumn

if TYPE_CHECKING:
    from store.table import Table


def derive_column(
    table: "Table",
    source: str,
    func: Callable[[Any], Any],
    target: str | None = None,
    vectorized: bool = True,
) -> Column:
    """Apply ``func`` to a numeric column and assign the result.

    Args:
        table: Table holding the source column.
        source: Name of the numeric input column.
        func: Elementwise function. In vectorized mode it receives the whole
            float64 array (numpy ufuncs and arithmetic work as-is); otherwise
            it is called once per value in row order.
        target: Output column name; defaults to overwriting ``source``.
        vectorized: Whether ``func`` accepts arrays.

    Returns:
        The derived column owned by ``table``.

    Raises:
        KeyNotFoundError: If ``source`` is missing.
        TypeMismatchError: If ``source`` is not numeric or results are not real.
        RowCountMismatchError: If ``func`` changes the number of values.
    """
    column = table.column(source)
    if column.kind != NUMERIC or not isinstance(column, NumericColumn):
        raise TypeMismatchError(
            f"Cannot derive from {column.kind} column '{source}': "
            "transforms apply to numeric columns only."
        )
    inputs = column.to_numpy()
    if vectorized:
        outputs = np.asarray(func(inputs))
    else:
        outputs = np.asarray([func(value) for value in inputs.tolist()])
    if outputs.ndim == 0:
        outputs = np.full(len(inputs), outputs.item())
    if outputs.shape != inputs.shape:
        raise RowCountMismatchError(
            f"Transform of column '{source}' returned shape {outputs.shape}, "
            f"expected ({len(inputs)},). Use an elementwise function."
        )
    if outputs.dtype.kind not in "fiu":
        raise TypeMismatchError(
            f"Transform of column '{source}' produced {outputs.dtype} values; "
            "derived columns must be real numbers."
        )
    return table.set_column(target or source, outputs.astype(np.float64))
