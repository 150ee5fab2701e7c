"""Shared typed models.

This module defines immutable models used by the store, adapter and
format layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterable, Literal

from core.errors import ShapeMismatchError

ColumnKind = Literal["numeric", "text"]
NUMERIC: ColumnKind = "numeric"
TEXT: ColumnKind = "text"
COLUMN_KINDS: tuple[ColumnKind, ...] = (NUMERIC, TEXT)


@dataclass(frozen=True)
class ShapeDescriptor:
    """Dimensions needed to invert the flattening of a packed structure.

    Attributes:
        dimensions: Extent of each axis, outermost first. An empty tuple
            describes a single scalar element.
    """

    dimensions: tuple[int, ...]

    def __post_init__(self) -> None:
        for extent in self.dimensions:
            if isinstance(extent, bool) or not isinstance(extent, int) or extent < 0:
                raise ShapeMismatchError(
                    f"Invalid shape {self.dimensions}: every dimension must be a "
                    "non-negative integer."
                )

    @classmethod
    def of(cls, dimensions: Iterable[int]) -> "ShapeDescriptor":
        """Build a descriptor from any iterable of integer-like extents."""
        return cls(tuple(int(extent) for extent in dimensions))

    @property
    def size(self) -> int:
        """Number of elements the shape holds."""
        return math.prod(self.dimensions)

    def to_text(self) -> str:
        """Encode dimensions as comma-separated text for metadata channels."""
        return ",".join(str(extent) for extent in self.dimensions)

    @classmethod
    def from_text(cls, encoded: str) -> "ShapeDescriptor":
        """Decode dimensions written by ``to_text``.

        Raises:
            ShapeMismatchError: If the text is not a dimension list.
        """
        if not encoded:
            return cls(())
        try:
            return cls(tuple(int(part) for part in encoded.split(",")))
        except ValueError as error:
            raise ShapeMismatchError(
                f"Invalid shape metadata '{encoded}': expected comma-separated integers."
            ) from error


@dataclass(frozen=True)
class BackendCapabilities:
    """Feature descriptor published by a format backend.

    Attributes:
        supports_shape_metadata: Whether packed shapes travel inside files.
        binary: Whether the format is binary rather than text.
    """

    supports_shape_metadata: bool
    binary: bool
