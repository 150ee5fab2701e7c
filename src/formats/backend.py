"""Format backend contract.

This module defines the interface every file format implements and the
extension matching shared by backends and the registry.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol

from core.types import BackendCapabilities, ColumnKind
from store.table import Table


class FormatBackend(Protocol):
    """Parser and renderer for one file format.

    Attributes:
        format_id: Registry identifier, e.g. ``"csv"``.
        extensions: Lower-case file suffixes handled, with leading dots.
    """

    format_id: str
    extensions: tuple[str, ...]

    def parse(
        self,
        payload: bytes,
        kinds: Mapping[str, ColumnKind] | None = None,
    ) -> Table: ...

    def render(self, table: Table) -> bytes: ...

    def can_handle(self, path_or_extension: str | Path) -> bool: ...

    def capabilities(self) -> BackendCapabilities: ...


def normalize_extension(path_or_extension: str | Path) -> str:
    """Return the lower-case suffix of a path, or a bare extension with a dot.

    ``"data/m.CSV"``, ``".csv"`` and ``"csv"`` all normalize to ``".csv"``.
    """
    text = str(path_or_extension)
    if "/" not in text and "\\" not in text and text.count(".") <= 1:
        bare = text.lower()
        if bare.startswith("."):
            return bare
        if "." not in bare:
            return f".{bare}" if bare else ""
    return Path(text).suffix.lower()


def extension_matches(path_or_extension: str | Path, extensions: tuple[str, ...]) -> bool:
    """Return whether a path or extension ends with one of ``extensions``."""
    extension = normalize_extension(path_or_extension)
    return bool(extension) and extension in extensions
