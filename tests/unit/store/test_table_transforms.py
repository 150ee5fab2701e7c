"""Unit tests for derived-column transforms."""

from __future__ import annotations

import math

import numpy as np
import pytest

from core.errors import RowCountMismatchError, TypeMismatchError
from store.table import Table


def test_vectorized_transform_creates_new_column() -> None:
    """A ufunc result should land in the target column in row order."""
    table = Table({"x": [1.0, 4.0, 9.0]})
    table.derive("x", np.sqrt, target="root")

    assert table["root"].to_list() == [1.0, 2.0, 3.0]
    assert table["x"].to_list() == [1.0, 4.0, 9.0]


def test_scalar_transform_overwrites_source_by_default() -> None:
    """Per-value functions run in row order and replace the source."""
    table = Table({"x": [0.0, math.pi / 2]})
    table.derive("x", math.sin, vectorized=False)

    assert table["x"].to_list() == pytest.approx([0.0, 1.0])


def test_constant_result_is_broadcast() -> None:
    """A scalar result fills every row."""
    table = Table({"x": [1.0, 2.0]})
    table.derive("x", lambda values: 3.0, target="three")

    assert table["three"].to_list() == [3.0, 3.0]


def test_transform_rejects_text_source() -> None:
    """Only numeric columns can be transformed."""
    table = Table({"name": ["a"]})

    with pytest.raises(TypeMismatchError):
        table.derive("name", np.sqrt)


def test_transform_rejects_length_change() -> None:
    """Reductions are not elementwise and must be rejected."""
    table = Table({"x": [1.0, 2.0]})

    with pytest.raises(RowCountMismatchError):
        table.derive("x", lambda values: values[:1], target="y")
