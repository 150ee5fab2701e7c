"""Pack/unpack adapter protocol.

This module defines how numeric structures cross into tables without a
common base class. A structure type qualifies in one of two ways:

* single-column form: ``pack(structure) -> PackedColumn`` and
  ``unpack(column, shape) -> structure``;
* table form: ``serialize(structure) -> Table`` and
  ``deserialize(table) -> structure``.

Either form can be provided by an adapter object passed to
``register_adapter`` (for types we do not own, such as numpy arrays) or by
methods on the structure class itself (``pack``/``serialize`` on instances,
``unpack``/``deserialize`` as class methods). When both forms exist the
single-column form is used.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral
from typing import Any, Iterable, Protocol

from core.errors import ShapeMismatchError, TypeMismatchError
from core.types import NUMERIC, ShapeDescriptor
from store.column import Column
from store.table import Table

ShapeLike = ShapeDescriptor | Iterable[int] | int | None

_ADAPTERS: dict[type, Any] = {}


@dataclass(frozen=True)
class PackedColumn:
    """A flattened structure.

    Attributes:
        column: Numeric column holding the elements in row-major order.
        shape: Dimensions needed to rebuild the structure.
    """

    column: Column
    shape: ShapeDescriptor


class ColumnAdapter(Protocol):
    """Single-column adapter for one structure type."""

    def pack(self, structure: Any) -> PackedColumn: ...

    def unpack(self, column: Column, shape: ShapeDescriptor | None) -> Any: ...


class TableAdapter(Protocol):
    """Table-form adapter for small fixed-size structures."""

    def serialize(self, structure: Any) -> Table: ...

    def deserialize(self, table: Table) -> Any: ...


def register_adapter(structure_type: type, adapter: Any) -> None:
    """Register an adapter object for ``structure_type`` and its subclasses.

    Args:
        structure_type: Type the adapter handles.
        adapter: Object implementing ``ColumnAdapter``, ``TableAdapter`` or
            both, optionally with ``overwrite(target, value)``.

    Raises:
        TypeMismatchError: If the adapter implements neither form.
    """
    if not (_has_column_form(adapter) or _has_table_form(adapter)):
        raise TypeMismatchError(
            f"Adapter {adapter!r} for {structure_type.__name__} implements neither "
            "pack/unpack nor serialize/deserialize."
        )
    _ADAPTERS[structure_type] = adapter


def supports_column_form(structure_type: type) -> bool:
    """Return whether ``structure_type`` can be packed into one column."""
    adapter = _registered_adapter(structure_type)
    return _has_column_form(adapter) or _has_column_form(structure_type)


def supports_table_form(structure_type: type) -> bool:
    """Return whether ``structure_type`` serializes to a whole table."""
    adapter = _registered_adapter(structure_type)
    return _has_table_form(adapter) or _has_table_form(structure_type)


def pack(structure: Any, name: str | None = None) -> PackedColumn:
    """Flatten ``structure`` into a numeric column and its shape.

    Args:
        structure: Value whose type has a single-column form.
        name: Optional name for the packed column; adapters choose one
            otherwise.

    Raises:
        TypeMismatchError: If the type has no single-column form or the
            packed column is not numeric.
        ShapeMismatchError: If the packed column disagrees with its shape.
    """
    structure_type = type(structure)
    adapter = _registered_adapter(structure_type)
    if _has_column_form(adapter):
        packed = adapter.pack(structure)
    elif _has_column_form(structure_type):
        packed = structure.pack()
    else:
        raise _no_adapter(structure_type, "pack/unpack")
    if packed.column.kind != NUMERIC:
        raise TypeMismatchError(
            f"Packing {structure_type.__name__} produced a {packed.column.kind} column; "
            "packed columns must be numeric."
        )
    check_shape(packed.column, packed.shape)
    if name is not None and name != packed.column.name:
        return PackedColumn(column=packed.column.copy(name), shape=packed.shape)
    return packed


def unpack(column: Column, structure_type: type, shape: ShapeLike = None) -> Any:
    """Rebuild a structure of ``structure_type`` from a packed column.

    Args:
        column: Numeric column holding the flattened elements.
        structure_type: Type to rebuild.
        shape: Explicit dimensions (a ``ShapeDescriptor``, a sequence of
            extents or a single extent). When omitted the column's shape
            metadata is used, and failing that the adapter's default.

    Returns:
        Reconstructed structure.

    Raises:
        ShapeMismatchError: If the column length differs from the product of
            the dimensions.
        TypeMismatchError: If the column is not numeric or the type has no
            single-column form.
    """
    resolved = as_shape(shape) if shape is not None else column.shape
    if column.kind != NUMERIC:
        raise TypeMismatchError(
            f"Cannot unpack {structure_type.__name__} from {column.kind} column "
            f"'{column.name}': packed columns are numeric."
        )
    if resolved is not None:
        check_shape(column, resolved)
    adapter = _registered_adapter(structure_type)
    if _has_column_form(adapter):
        return adapter.unpack(column, resolved)
    if _has_column_form(structure_type):
        return structure_type.unpack(column, resolved)
    raise _no_adapter(structure_type, "pack/unpack")


def serialize(structure: Any) -> Table:
    """Convert a table-form structure into a table.

    Raises:
        TypeMismatchError: If the type has no table form.
    """
    structure_type = type(structure)
    adapter = _registered_adapter(structure_type)
    if _has_table_form(adapter):
        return adapter.serialize(structure)
    if _has_table_form(structure_type):
        return structure.serialize()
    raise _no_adapter(structure_type, "serialize/deserialize")


def deserialize(table: Table, structure_type: type) -> Any:
    """Rebuild a table-form structure from ``table``.

    Raises:
        TypeMismatchError: If the type has no table form.
    """
    adapter = _registered_adapter(structure_type)
    if _has_table_form(adapter):
        return adapter.deserialize(table)
    if _has_table_form(structure_type):
        return structure_type.deserialize(table)
    raise _no_adapter(structure_type, "serialize/deserialize")


def overwrite(target: Any, value: Any) -> None:
    """Replace the contents of ``target`` in place with those of ``value``.

    Tables use ``Table.replace_contents``; registered adapters may provide
    ``overwrite``; other structures get their instance attributes replaced.
    """
    if isinstance(target, Table):
        target.replace_contents(value)
        return
    adapter = _registered_adapter(type(target))
    if adapter is not None and hasattr(adapter, "overwrite"):
        adapter.overwrite(target, value)
        return
    vars(target).clear()
    vars(target).update(vars(value))


def as_shape(shape: ShapeDescriptor | Iterable[int] | int) -> ShapeDescriptor:
    """Normalize explicit dimensions into a ``ShapeDescriptor``."""
    if isinstance(shape, ShapeDescriptor):
        return shape
    if isinstance(shape, Integral):
        return ShapeDescriptor((shape if isinstance(shape, bool) else int(shape),))
    return ShapeDescriptor.of(shape)


def check_shape(column: Column, shape: ShapeDescriptor) -> None:
    """Fail unless ``column`` holds exactly ``shape.size`` values.

    Raises:
        ShapeMismatchError: On a length/shape disagreement.
    """
    if len(column) != shape.size:
        raise ShapeMismatchError(
            f"Column '{column.name}' holds {len(column)} values but shape "
            f"{list(shape.dimensions)} needs {shape.size}. "
            "Pass the dimensions the structure was written with."
        )


def _registered_adapter(structure_type: type) -> Any:
    for candidate in structure_type.__mro__:
        if candidate in _ADAPTERS:
            return _ADAPTERS[candidate]
    return None


def _has_column_form(owner: Any) -> bool:
    return owner is not None and hasattr(owner, "pack") and hasattr(owner, "unpack")


def _has_table_form(owner: Any) -> bool:
    return owner is not None and hasattr(owner, "serialize") and hasattr(owner, "deserialize")


def _no_adapter(structure_type: type, form: str) -> TypeMismatchError:
    return TypeMismatchError(
        f"{structure_type.__name__} has no {form} adapter. Implement the methods "
        "on the class or call register_adapter for the type."
    )
