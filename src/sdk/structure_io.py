"""Typed-structure read/write facade.

This module connects the format registry, the table layer and the
pack/unpack adapters. Writes go structure -> table -> backend -> file and
reads run the same path in reverse.
"""

from __future__ import annotations

import os
from pathlib import Path
import stat
import tempfile
from typing import Any, Mapping

import numpy as np

import adapters  # noqa: F401  registers the numpy array adapter
from adapters.protocol import (
    ShapeLike,
    deserialize,
    overwrite,
    pack,
    serialize,
    supports_column_form,
    unpack,
)
from core.config import TabioConfig
from core.errors import KeyNotFoundError
from core.logging_config import get_logger
from core.types import ColumnKind
from formats.backend import FormatBackend
from formats.registry import FormatRegistry, build_default_registry, default_registry
from store.column import Column
from store.table import Table

_LOGGER = get_logger(__name__)


class TabioClient:
    """Primary entry point for reading and writing tables and structures."""

    def __init__(
        self,
        config: TabioConfig | None = None,
        registry: FormatRegistry | None = None,
    ) -> None:
        """Create a client.

        Args:
            config: Optional runtime configuration. Defaults to the
                environment.
            registry: Optional format registry. Defaults to the process-wide
                registry, or one built from ``config`` when it is given.
        """
        self._config = config or TabioConfig.from_env()
        if registry is not None:
            self._registry = registry
        elif config is not None:
            self._registry = build_default_registry(config)
        else:
            self._registry = default_registry()

    @property
    def registry(self) -> FormatRegistry:
        return self._registry

    def write(
        self,
        path: str | Path,
        value: Any,
        column: str | None = None,
        format_id: str | None = None,
    ) -> Path:
        """Write a table or an adaptable structure to ``path``.

        Structures with a single-column form are packed into one column named
        ``column`` (default from config); table-form structures are
        serialized. The destination is replaced atomically.

        Args:
            path: Destination file.
            value: ``Table`` or adaptable structure.
            column: Column name for packed structures.
            format_id: Explicit format identifier, else chosen by extension.

        Returns:
            Destination path.

        Raises:
            KeyNotFoundError: If no format matches.
            UnsupportedFormatError: If the format is known but unavailable.
            TypeMismatchError: If the value cannot be converted to a table.
        """
        destination = Path(path)
        backend = self._registry.resolve(destination, format_id)
        table = self._to_table(value, backend, column)
        payload = backend.render(table)
        _write_atomically(destination, payload)
        _LOGGER.info(
            "table_written",
            path=str(destination),
            format_id=backend.format_id,
            columns=table.column_count(),
            rows=table.row_count(),
            bytes=len(payload),
        )
        return destination

    def write_table(
        self,
        path: str | Path,
        table: Table,
        format_id: str | None = None,
    ) -> Path:
        """Write ``table`` to ``path``."""
        return self.write(path, table, format_id=format_id)

    def read_table(
        self,
        path: str | Path,
        format_id: str | None = None,
        kinds: Mapping[str, ColumnKind] | None = None,
    ) -> Table:
        """Read the table stored at ``path``.

        Args:
            path: Source file.
            format_id: Explicit format identifier, else chosen by extension.
            kinds: Optional declared kind per column name.

        Returns:
            Parsed table.

        Raises:
            KeyNotFoundError: If no format matches or a declared column is
                missing.
            UnsupportedFormatError: If the format is known but unavailable.
            ParseError: If the payload is malformed.
        """
        source = Path(path)
        backend = self._registry.resolve(source, format_id)
        payload = source.read_bytes()
        table = backend.parse(payload, kinds=kinds)
        _LOGGER.info(
            "table_read",
            path=str(source),
            format_id=backend.format_id,
            columns=table.column_count(),
            rows=table.row_count(),
        )
        return table

    def read(
        self,
        path: str | Path,
        structure_type: type = Table,
        column: str | None = None,
        shape: ShapeLike = None,
        format_id: str | None = None,
        kinds: Mapping[str, ColumnKind] | None = None,
    ) -> Any:
        """Read ``path`` and build a value of ``structure_type``.

        Args:
            path: Source file.
            structure_type: ``Table`` or an adaptable structure type.
            column: Packed column to unpack. Defaults to the configured pack
                column, or the only column of a single-column table.
            shape: Explicit dimensions; overrides stored shape metadata.
            format_id: Explicit format identifier, else chosen by extension.
            kinds: Optional declared kind per column name.

        Returns:
            The reconstructed value.

        Raises:
            ShapeMismatchError: If the column disagrees with the dimensions.
            TypeMismatchError: If the type has no adapter or the packed column
                is not numeric.
        """
        table = self.read_table(path, format_id=format_id, kinds=kinds)
        if structure_type is Table:
            return table
        if supports_column_form(structure_type):
            packed = self._packed_column(table, column)
            return unpack(packed, structure_type, shape)
        return deserialize(table, structure_type)

    def read_into(
        self,
        path: str | Path,
        out: Any,
        column: str | None = None,
        shape: ShapeLike = None,
        format_id: str | None = None,
        kinds: Mapping[str, ColumnKind] | None = None,
    ) -> Any:
        """Read ``path`` and replace the contents of ``out`` in place.

        ``out`` is only modified after the whole value has been read and
        rebuilt; on failure it keeps its previous contents. An array
        ``out`` without an explicit ``shape`` is read with its own shape.

        Returns:
            ``out``.
        """
        if shape is None and isinstance(out, np.ndarray):
            shape = out.shape
        value = self.read(
            path,
            type(out),
            column=column,
            shape=shape,
            format_id=format_id,
            kinds=kinds,
        )
        overwrite(out, value)
        return out

    def _to_table(self, value: Any, backend: FormatBackend, column: str | None) -> Table:
        if isinstance(value, Table):
            return value
        if not supports_column_form(type(value)):
            return serialize(value)
        packed = pack(value, column or self._config.default_pack_column)
        packed_column = packed.column
        shape_metadata = backend.capabilities().supports_shape_metadata
        packed_column.shape = packed.shape if shape_metadata else None
        return Table({packed_column.name: packed_column})

    def _packed_column(self, table: Table, column: str | None) -> Column:
        if column is not None:
            return table.column(column)
        default_name = self._config.default_pack_column
        if default_name in table:
            return table.column(default_name)
        names = table.column_names()
        if len(names) == 1:
            return table.column(names[0])
        raise KeyNotFoundError(
            f"Table has no '{default_name}' column and {len(names)} candidates "
            f"{list(names)}. Pass column= to choose the packed column."
        )


def _write_atomically(destination: Path, payload: bytes) -> None:
    handle, temp_name = tempfile.mkstemp(
        prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent
    )
    temp_path = Path(temp_name)
    try:
        with os.fdopen(handle, "wb") as stream:
            stream.write(payload)
        os.chmod(temp_path, _target_mode(destination))
        os.replace(temp_path, destination)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def _target_mode(destination: Path) -> int:
    """Return the permission bits the written file should end up with.

    An existing destination keeps its mode; a new file gets the mode a plain
    ``open`` would give it under the current umask.
    """
    try:
        return stat.S_IMODE(destination.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask
