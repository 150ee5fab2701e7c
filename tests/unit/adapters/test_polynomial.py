"""Unit tests for the polynomial structure."""

from __future__ import annotations

import pytest

from adapters.polynomial import Polynomial
from adapters.protocol import pack, supports_column_form, unpack
from core.errors import ShapeMismatchError, TypeMismatchError
from store.table import Table


def test_pack_unpack_inverse() -> None:
    """Coefficients survive packing in order."""
    polynomial = Polynomial([1.0, -2.0, 0.5])
    packed = pack(polynomial)

    assert unpack(packed.column, Polynomial, packed.shape) == polynomial


def test_column_form_is_preferred_over_table_form() -> None:
    """Polynomials offer both forms; the column form is used."""
    assert supports_column_form(Polynomial)


def test_serialize_lists_powers() -> None:
    """The table form pairs each coefficient with its power."""
    table = Polynomial([3.0, 4.0]).serialize()

    assert table["power"].to_list() == [0.0, 1.0]
    assert table["coefficient"].to_list() == [3.0, 4.0]


def test_deserialize_sorts_by_power() -> None:
    """Rows may arrive in any order."""
    table = Table({"power": [1.0, 0.0], "coefficient": [4.0, 3.0]})

    assert Polynomial.deserialize(table) == Polynomial([3.0, 4.0])


def test_deserialize_rejects_gap_in_powers() -> None:
    """Every power up to the degree must be present."""
    table = Table({"power": [0.0, 2.0], "coefficient": [1.0, 1.0]})

    with pytest.raises(ShapeMismatchError):
        Polynomial.deserialize(table)


def test_deserialize_rejects_text_coefficients() -> None:
    """Coefficient columns must be numeric."""
    table = Table({"power": [0.0], "coefficient": ["one"]})

    with pytest.raises(TypeMismatchError):
        Polynomial.deserialize(table)


def test_two_dimensional_coefficients_are_rejected() -> None:
    """Coefficients form a vector."""
    with pytest.raises(ShapeMismatchError):
        Polynomial([[1.0, 2.0]])


def test_degree() -> None:
    """Degree is one less than the coefficient count."""
    assert Polynomial([1.0, 0.0, 2.0]).degree == 2
