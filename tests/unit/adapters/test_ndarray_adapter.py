"""Unit tests for the numpy array adapter."""

from __future__ import annotations

import numpy as np
import pytest

from adapters.protocol import overwrite, pack, unpack
from core.errors import ShapeMismatchError, TypeMismatchError
from core.types import ShapeDescriptor


def test_matrix_packs_row_major() -> None:
    """Rows are laid out one after another."""
    packed = pack(np.array([[1.0, 2.0], [3.0, 4.0]]))

    assert packed.column.to_list() == [1.0, 2.0, 3.0, 4.0]
    assert packed.shape == ShapeDescriptor((2, 2))


def test_fortran_ordered_input_still_packs_row_major() -> None:
    """Memory layout of the input does not change the traversal order."""
    matrix = np.asfortranarray(np.array([[1.0, 2.0], [3.0, 4.0]]))

    assert pack(matrix).column.to_list() == [1.0, 2.0, 3.0, 4.0]


def test_pack_unpack_inverse_for_rank_three() -> None:
    """Higher-rank arrays round-trip element for element."""
    array = np.arange(24, dtype=np.float64).reshape(2, 3, 4)
    packed = pack(array)

    assert np.array_equal(unpack(packed.column, np.ndarray, packed.shape), array)


def test_integer_arrays_pack_as_float() -> None:
    """Integers widen to float64 without loss for common ranges."""
    packed = pack(np.array([1, 2, 3], dtype=np.int32))

    assert packed.column.to_list() == [1.0, 2.0, 3.0]


def test_unpack_without_shape_is_one_dimensional() -> None:
    """With no shape anywhere the array comes back flat."""
    packed = pack(np.eye(2))

    assert unpack(packed.column, np.ndarray).shape == (4,)


def test_complex_arrays_are_rejected() -> None:
    """Only real numbers can be packed."""
    with pytest.raises(TypeMismatchError):
        pack(np.array([1 + 2j]))


def test_overwrite_copies_into_target() -> None:
    """Overwriting keeps the target object and dtype."""
    target = np.zeros((2, 2), dtype=np.float32)
    overwrite(target, np.array([[1.0, 2.0], [3.0, 4.0]]))

    assert target.dtype == np.float32 and target[1, 0] == 3.0


def test_overwrite_rejects_different_shape() -> None:
    """Targets are not resized."""
    with pytest.raises(ShapeMismatchError):
        overwrite(np.zeros(3), np.zeros(4))


def test_pack_names_the_column() -> None:
    """Callers may choose the packed column's name."""
    packed = pack(np.ones(2), "M")

    assert packed.column.name == "M" and packed.shape == ShapeDescriptor((2,))
