"""Unit tests for shared typed models."""

from __future__ import annotations

import pytest

from core.errors import ShapeMismatchError
from core.types import ShapeDescriptor


def test_shape_size_is_product_of_dimensions() -> None:
    """Shape size should multiply every extent."""
    assert ShapeDescriptor((3, 4)).size == 12


def test_empty_shape_describes_one_element() -> None:
    """A rank-zero shape holds a single scalar."""
    assert ShapeDescriptor(()).size == 1


def test_shape_rejects_negative_extent() -> None:
    """Dimensions must be non-negative integers."""
    with pytest.raises(ShapeMismatchError):
        ShapeDescriptor((2, -1))


def test_shape_of_converts_integer_like_values() -> None:
    """ShapeDescriptor.of should accept numpy-style shape tuples."""
    assert ShapeDescriptor.of([2.0, 3]).dimensions == (2, 3)


def test_shape_text_encoding_round_trips() -> None:
    """Metadata text should decode back to the same dimensions."""
    shape = ShapeDescriptor((2, 5, 1))

    assert ShapeDescriptor.from_text(shape.to_text()) == shape


def test_shape_from_text_rejects_garbage() -> None:
    """Malformed metadata should raise a shape error."""
    with pytest.raises(ShapeMismatchError):
        ShapeDescriptor.from_text("2,x")
