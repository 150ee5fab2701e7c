"""Parquet binary backend.

This module stores tables as Parquet through pyarrow when it is installed.
Shape descriptors of packed columns travel in Arrow field metadata, so
structures read back without the caller supplying dimensions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from core.constants import PARQUET_EXTENSIONS, PARQUET_FORMAT_ID, SHAPE_METADATA_KEY
from core.errors import (
    DuplicateHeaderError,
    KeyNotFoundError,
    ParseError,
    TabioDependencyError,
    TypeMismatchError,
)
from core.logging_config import get_logger
from core.types import NUMERIC, TEXT, BackendCapabilities, ColumnKind, ShapeDescriptor
from formats.backend import extension_matches
from store.column import Column, NumericColumn
from store.table import Table

_LOGGER = get_logger(__name__)

_SHAPE_METADATA_BYTES = SHAPE_METADATA_KEY.encode("utf-8")


class ParquetBackend:
    """Parquet format backend backed by pyarrow."""

    format_id = PARQUET_FORMAT_ID
    extensions = PARQUET_EXTENSIONS

    def __init__(self) -> None:
        """Create the backend.

        Raises:
            TabioDependencyError: If pyarrow is not installed.
        """
        self._pa, self._pq = _import_pyarrow()

    def capabilities(self) -> BackendCapabilities:
        """Parquet carries shape metadata per column."""
        return BackendCapabilities(supports_shape_metadata=True, binary=True)

    def can_handle(self, path_or_extension: str | Path) -> bool:
        """Return whether the path or extension belongs to Parquet."""
        return extension_matches(path_or_extension, self.extensions)

    def parse(
        self,
        payload: bytes,
        kinds: Mapping[str, ColumnKind] | None = None,
    ) -> Table:
        """Parse a Parquet payload into a table.

        Args:
            payload: Parquet file content.
            kinds: Optional expected kinds by column name, checked against
                the stored field types.

        Returns:
            Parsed table.

        Raises:
            ParseError: If the payload is not readable Parquet or holds
                unsupported field types.
            DuplicateHeaderError: If a field name repeats.
            TypeMismatchError: If a stored kind disagrees with ``kinds``.
            KeyNotFoundError: If ``kinds`` names a missing column.
        """
        arrow_table = self._read_arrow_table(payload)
        expected = dict(kinds or {})
        missing = [name for name in expected if name not in arrow_table.schema.names]
        if missing:
            raise KeyNotFoundError(
                f"Declared kinds name missing columns {missing}. "
                f"Stored columns: {arrow_table.schema.names}."
            )
        table = Table()
        for field, chunked in zip(arrow_table.schema, arrow_table.columns):
            if field.name in table:
                raise DuplicateHeaderError(field.name)
            kind = self._field_kind(field)
            if field.name in expected and expected[field.name] != kind:
                raise TypeMismatchError(
                    f"Column '{field.name}' is stored as {kind} but was declared "
                    f"{expected[field.name]}."
                )
            column = Column.from_values(field.name, self._field_values(kind, chunked), kind)
            column.shape = _shape_from_metadata(field.metadata)
            table.set_column(field.name, column)
        _LOGGER.debug(
            "parquet_parsed",
            column_count=table.column_count(),
            row_count=table.row_count(),
        )
        return table

    def render(self, table: Table) -> bytes:
        """Render a table as a Parquet payload.

        Args:
            table: Table to render.

        Returns:
            Complete Parquet file content.
        """
        pa = self._pa
        fields = []
        arrays = []
        for name in table.column_names():
            column = table.column(name)
            metadata = (
                {SHAPE_METADATA_KEY: column.shape.to_text()} if column.shape is not None else None
            )
            if isinstance(column, NumericColumn):
                arrow_type = pa.float64()
                arrays.append(pa.array(column.to_numpy(), type=arrow_type))
            else:
                arrow_type = pa.string()
                arrays.append(pa.array(column.to_list(), type=arrow_type))
            fields.append(pa.field(name, arrow_type, metadata=metadata))
        arrow_table = pa.Table.from_arrays(arrays, schema=pa.schema(fields))
        sink = pa.BufferOutputStream()
        self._pq.write_table(arrow_table, sink)
        return sink.getvalue().to_pybytes()

    def _read_arrow_table(self, payload: bytes) -> Any:
        pa = self._pa
        try:
            return self._pq.read_table(pa.BufferReader(payload))
        except (pa.ArrowException, OSError) as error:
            raise ParseError(f"Invalid Parquet payload: {error}") from error

    def _field_kind(self, field: Any) -> ColumnKind:
        types = self._pa.types
        if types.is_floating(field.type) or types.is_integer(field.type):
            return NUMERIC
        if types.is_string(field.type) or types.is_large_string(field.type):
            return TEXT
        raise ParseError(
            f"Unsupported Parquet type {field.type} for column '{field.name}'. "
            "Only numeric and string columns can be read."
        )

    def _field_values(self, kind: ColumnKind, chunked: Any) -> Any:
        if kind == NUMERIC:
            as_float = chunked.cast(self._pa.float64()).fill_null(float("nan"))
            return as_float.to_numpy()
        return chunked.fill_null("").to_pylist()


def _import_pyarrow() -> tuple[Any, Any]:
    """Import pyarrow lazily.

    Returns:
        The ``pyarrow`` and ``pyarrow.parquet`` modules.

    Raises:
        TabioDependencyError: If pyarrow is missing.
    """
    try:
        import pyarrow
        import pyarrow.parquet
    except ImportError as error:
        raise TabioDependencyError(
            "Parquet support requires pyarrow, but it is not installed. "
            "Install pyarrow (pip install 'tabio[binary]') to read and write .parquet files."
        ) from error
    return pyarrow, pyarrow.parquet


def _shape_from_metadata(metadata: Mapping[bytes, bytes] | None) -> ShapeDescriptor | None:
    if not metadata or _SHAPE_METADATA_BYTES not in metadata:
        return None
    return ShapeDescriptor.from_text(metadata[_SHAPE_METADATA_BYTES].decode("utf-8"))
