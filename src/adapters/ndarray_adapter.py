"""numpy array adapter.

Vectors, matrices and higher-rank arrays pack into one float64 column in
row-major (C) order. Shapes are restored from explicit dimensions or column
metadata; without either the array comes back one-dimensional.
"""

from __future__ import annotations

import numpy as np

from core.errors import ShapeMismatchError, TypeMismatchError
from core.types import NUMERIC, ShapeDescriptor
from adapters.protocol import PackedColumn
from store.column import Column, NumericColumn


class NdarrayAdapter:
    """Single-column adapter for ``numpy.ndarray``."""

    def pack(self, structure: np.ndarray) -> PackedColumn:
        array = np.asarray(structure)
        if array.dtype.kind not in "fiu":
            raise TypeMismatchError(
                f"Cannot pack an array of dtype {array.dtype}: expected real numbers."
            )
        if array.dtype.kind == "f" and array.dtype.itemsize > np.dtype(np.float64).itemsize:
            raise TypeMismatchError(
                f"Cannot pack {array.dtype} values into float64 without losing precision."
            )
        flat = np.ascontiguousarray(array, dtype=np.float64).reshape(-1)
        column = Column.from_values("values", flat, NUMERIC)
        return PackedColumn(column=column, shape=ShapeDescriptor.of(array.shape))

    def unpack(self, column: Column, shape: ShapeDescriptor | None) -> np.ndarray:
        if not isinstance(column, NumericColumn):
            raise TypeMismatchError(f"Column '{column.name}' is not numeric.")
        values = column.to_numpy()
        if shape is None:
            return values
        return values.reshape(shape.dimensions)

    def overwrite(self, target: np.ndarray, value: np.ndarray) -> None:
        """Copy ``value`` into ``target`` in place.

        Raises:
            ShapeMismatchError: If the two arrays differ in shape.
        """
        if target.shape != value.shape:
            raise ShapeMismatchError(
                f"Cannot read an array of shape {value.shape} into one of shape "
                f"{target.shape}."
            )
        np.copyto(target, value, casting="unsafe")
