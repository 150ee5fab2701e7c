"""Unit tests for the Parquet backend."""

from __future__ import annotations

import math

import pytest

pytest.importorskip("pyarrow")

from core.errors import KeyNotFoundError, ParseError, TypeMismatchError
from core.types import NUMERIC, TEXT, ShapeDescriptor
from formats.parquet_backend import ParquetBackend
from store.table import Table


def test_round_trip_preserves_kinds_and_values() -> None:
    """Numeric and text columns survive a Parquet round trip."""
    table = Table({"name": ["a", ""], "value": [1.5, math.nan]})
    backend = ParquetBackend()

    parsed = backend.parse(backend.render(table))

    assert parsed == table
    assert parsed["name"].kind == TEXT and parsed["value"].kind == NUMERIC


def test_shape_metadata_travels_with_column() -> None:
    """Column shapes are stored in field metadata."""
    table = Table({"values": [1.0, 2.0, 3.0, 4.0]})
    table["values"].shape = ShapeDescriptor((2, 2))
    backend = ParquetBackend()

    parsed = backend.parse(backend.render(table))

    assert parsed["values"].shape == ShapeDescriptor((2, 2))


def test_columns_without_shape_read_back_without_metadata() -> None:
    """Plain columns carry no shape."""
    backend = ParquetBackend()

    parsed = backend.parse(backend.render(Table({"x": [1.0]})))

    assert parsed["x"].shape is None


def test_corrupt_payload_is_parse_error() -> None:
    """Bytes that are not Parquet fail as parse errors."""
    with pytest.raises(ParseError):
        ParquetBackend().parse(b"not parquet at all")


def test_declared_kind_mismatch_fails() -> None:
    """Declared kinds are checked against stored field types."""
    backend = ParquetBackend()
    payload = backend.render(Table({"x": [1.0]}))

    with pytest.raises(TypeMismatchError):
        backend.parse(payload, kinds={"x": TEXT})


def test_declared_kind_for_missing_column_fails() -> None:
    """Kinds for unknown columns are rejected."""
    backend = ParquetBackend()
    payload = backend.render(Table({"x": [1.0]}))

    with pytest.raises(KeyNotFoundError):
        backend.parse(payload, kinds={"y": NUMERIC})


def test_integer_fields_read_as_numeric() -> None:
    """Parquet files written by other tools may hold integers."""
    import pyarrow as pa
    import pyarrow.parquet as pq

    sink = pa.BufferOutputStream()
    pq.write_table(pa.table({"n": pa.array([1, None, 3], type=pa.int64())}), sink)

    parsed = ParquetBackend().parse(sink.getvalue().to_pybytes())

    assert parsed["n"].kind == NUMERIC and math.isnan(parsed["n"].get(1))


def test_unsupported_field_type_is_parse_error() -> None:
    """Types outside numbers and strings cannot be read."""
    import pyarrow as pa
    import pyarrow.parquet as pq

    sink = pa.BufferOutputStream()
    pq.write_table(pa.table({"flag": pa.array([True, False])}), sink)

    with pytest.raises(ParseError, match="flag"):
        ParquetBackend().parse(sink.getvalue().to_pybytes())


def test_capabilities_report_binary_with_shapes() -> None:
    """Parquet is binary and carries shapes."""
    capabilities = ParquetBackend().capabilities()

    assert capabilities.binary and capabilities.supports_shape_metadata
