"""Format backend registry.

This module maps format identifiers and file extensions to backends.
The process-wide registry is built once from config and then frozen; optional
backends whose dependency is missing are recorded as unavailable instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.config import TabioConfig
from core.constants import (
    HDF5_EXTENSIONS,
    HDF5_FORMAT_ID,
    PARQUET_EXTENSIONS,
    PARQUET_FORMAT_ID,
    TSV_DELIMITER,
    TSV_EXTENSIONS,
    TSV_FORMAT_ID,
)
from core.errors import (
    KeyNotFoundError,
    TabioDependencyError,
    TabioError,
    UnsupportedFormatError,
)
from core.logging_config import get_logger
from formats.backend import FormatBackend, extension_matches, normalize_extension
from formats.csv_backend import CsvBackend
from formats.parquet_backend import ParquetBackend

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class UnavailableFormat:
    """A known format without a usable backend.

    Attributes:
        format_id: Registry identifier.
        extensions: File suffixes that route to the format.
        reason: Human-readable explanation of the capability gap.
    """

    format_id: str
    extensions: tuple[str, ...]
    reason: str


class FormatRegistry:
    """Identifier-keyed collection of format backends."""

    def __init__(self) -> None:
        self._backends: dict[str, FormatBackend] = {}
        self._unavailable: dict[str, UnavailableFormat] = {}
        self._frozen = False

    def register(self, backend: FormatBackend) -> None:
        """Register a backend under its ``format_id``.

        Raises:
            TabioError: If the registry is frozen, or the identifier or one of
                its extensions is already claimed.
        """
        self._ensure_mutable(backend.format_id)
        self._ensure_unclaimed(backend.format_id, backend.extensions)
        self._backends[backend.format_id] = backend

    def mark_unavailable(
        self,
        format_id: str,
        extensions: tuple[str, ...],
        reason: str,
    ) -> None:
        """Record a known format that has no backend in this process.

        Raises:
            TabioError: If the registry is frozen or the format is claimed.
        """
        self._ensure_mutable(format_id)
        self._ensure_unclaimed(format_id, extensions)
        self._unavailable[format_id] = UnavailableFormat(format_id, extensions, reason)

    def freeze(self) -> None:
        """Reject further registrations."""
        self._frozen = True

    def get(self, format_id: str) -> FormatBackend:
        """Return the backend registered for ``format_id``.

        Raises:
            UnsupportedFormatError: If the format is known but unavailable.
            KeyNotFoundError: If the identifier is unknown.
        """
        backend = self._backends.get(format_id)
        if backend is not None:
            return backend
        unavailable = self._unavailable.get(format_id)
        if unavailable is not None:
            raise _unsupported(unavailable)
        raise KeyNotFoundError(
            f"Unknown format '{format_id}'. Registered formats: {list(self._backends)}."
        )

    def for_path(self, path: str | Path) -> FormatBackend:
        """Return the backend handling the extension of ``path``.

        Raises:
            UnsupportedFormatError: If the extension belongs to an
                unavailable format.
            KeyNotFoundError: If no format claims the extension.
        """
        for backend in self._backends.values():
            if backend.can_handle(path):
                return backend
        for unavailable in self._unavailable.values():
            if extension_matches(path, unavailable.extensions):
                raise _unsupported(unavailable)
        raise KeyNotFoundError(
            f"No format handles extension '{normalize_extension(path)}' of {path}. "
            "Pass an explicit format identifier or use a registered extension."
        )

    def resolve(self, path: str | Path, format_id: str | None = None) -> FormatBackend:
        """Return the backend for an explicit identifier, else by extension."""
        if format_id is not None:
            return self.get(format_id)
        return self.for_path(path)

    def format_ids(self) -> tuple[str, ...]:
        """Return registered identifiers in sorted order."""
        return tuple(sorted(self._backends))

    def unavailable_formats(self) -> tuple[UnavailableFormat, ...]:
        """Return known but unavailable formats in identifier order."""
        return tuple(self._unavailable[key] for key in sorted(self._unavailable))

    def _ensure_mutable(self, format_id: str) -> None:
        if self._frozen:
            raise TabioError(
                f"Cannot register format '{format_id}': the registry is frozen. "
                "Register backends on a new FormatRegistry before freezing it."
            )

    def _ensure_unclaimed(self, format_id: str, extensions: tuple[str, ...]) -> None:
        if format_id in self._backends or format_id in self._unavailable:
            raise TabioError(f"Format '{format_id}' is already registered.")
        claimed = {
            extension: owner
            for owner, owner_extensions in self._claimed_extensions()
            for extension in owner_extensions
        }
        for extension in extensions:
            if extension in claimed:
                raise TabioError(
                    f"Extension '{extension}' for format '{format_id}' is already "
                    f"handled by '{claimed[extension]}'."
                )

    def _claimed_extensions(self) -> list[tuple[str, tuple[str, ...]]]:
        owners = [(key, backend.extensions) for key, backend in self._backends.items()]
        owners.extend((key, item.extensions) for key, item in self._unavailable.items())
        return owners


def build_default_registry(config: TabioConfig) -> FormatRegistry:
    """Build and freeze the standard registry for ``config``.

    Registers CSV and TSV, Parquet when pyarrow is importable and binary
    backends are enabled, and records HDF5 as unavailable.

    Args:
        config: Runtime configuration.

    Returns:
        Frozen registry.
    """
    registry = FormatRegistry()
    registry.register(
        CsvBackend(delimiter=config.csv_delimiter, float_precision=config.float_precision)
    )
    registry.register(
        CsvBackend(
            delimiter=TSV_DELIMITER,
            float_precision=config.float_precision,
            format_id=TSV_FORMAT_ID,
            extensions=TSV_EXTENSIONS,
        )
    )
    _register_parquet(registry, config)
    registry.mark_unavailable(
        HDF5_FORMAT_ID,
        HDF5_EXTENSIONS,
        "No HDF5 backend is built into this installation. "
        "Write binary tables as Parquet (.parquet) instead.",
    )
    registry.freeze()
    return registry


_DEFAULT_REGISTRY: FormatRegistry | None = None


def default_registry() -> FormatRegistry:
    """Return the process-wide registry, building it on first use."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = build_default_registry(TabioConfig.from_env())
    return _DEFAULT_REGISTRY


def _register_parquet(registry: FormatRegistry, config: TabioConfig) -> None:
    if not config.enable_binary_backends:
        registry.mark_unavailable(
            PARQUET_FORMAT_ID,
            PARQUET_EXTENSIONS,
            "Binary backends are disabled by TABIO_ENABLE_BINARY.",
        )
        return
    try:
        backend = ParquetBackend()
    except TabioDependencyError as error:
        registry.mark_unavailable(PARQUET_FORMAT_ID, PARQUET_EXTENSIONS, str(error))
        _LOGGER.warning(
            "backend_unavailable",
            format_id=PARQUET_FORMAT_ID,
            reason="missing_dependency",
        )
        return
    registry.register(backend)


def _unsupported(unavailable: UnavailableFormat) -> UnsupportedFormatError:
    return UnsupportedFormatError(
        f"Format '{unavailable.format_id}' is not available: {unavailable.reason}"
    )
