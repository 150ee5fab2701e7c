"""Public SDK surface for Tabio.

This module provides a stable import path for users. It re-exports the
client, the table types and the adapter entry points, and offers
module-level ``read``/``write``/``read_into`` backed by a default client.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from adapters.histogram import Histogram
from adapters.polynomial import Polynomial
from adapters.protocol import PackedColumn, pack, register_adapter, unpack
from core.config import TabioConfig
from core.errors import (
    DuplicateHeaderError,
    KeyNotFoundError,
    ParseError,
    RowCountMismatchError,
    ShapeMismatchError,
    TabioError,
    TypeMismatchError,
    UnsupportedFormatError,
)
from core.types import NUMERIC, TEXT, ShapeDescriptor
from sdk.structure_io import TabioClient
from store.column import Column
from store.table import Table

_DEFAULT_CLIENT: TabioClient | None = None


def default_client() -> TabioClient:
    """Return the process-wide client, creating it on first use."""
    global _DEFAULT_CLIENT
    if _DEFAULT_CLIENT is None:
        _DEFAULT_CLIENT = TabioClient()
    return _DEFAULT_CLIENT


def write(path: str | Path, value: Any, **options: Any) -> Path:
    """Write a table or structure with the default client."""
    return default_client().write(path, value, **options)


def read(path: str | Path, structure_type: type = Table, **options: Any) -> Any:
    """Read a table or structure with the default client."""
    return default_client().read(path, structure_type, **options)


def read_into(path: str | Path, out: Any, **options: Any) -> Any:
    """Overwrite ``out`` from ``path`` with the default client."""
    return default_client().read_into(path, out, **options)


__all__ = [
    "Column",
    "DuplicateHeaderError",
    "Histogram",
    "KeyNotFoundError",
    "NUMERIC",
    "PackedColumn",
    "ParseError",
    "Polynomial",
    "RowCountMismatchError",
    "ShapeDescriptor",
    "ShapeMismatchError",
    "TEXT",
    "Table",
    "TabioClient",
    "TabioConfig",
    "TabioError",
    "TypeMismatchError",
    "UnsupportedFormatError",
    "default_client",
    "pack",
    "read",
    "read_into",
    "register_adapter",
    "unpack",
    "write",
]
