"""Formats command wiring for Tabio CLI."""

from __future__ import annotations

from typing import Any

from sdk.structure_io import TabioClient


def add_formats_command(subparsers: Any) -> None:
    """Register formats subcommand."""
    subparsers.add_parser("formats", help="List available and unavailable formats")


def run_formats_command(client: TabioClient) -> int:
    """Print registered formats, then known formats that cannot be used."""
    registry = client.registry
    for format_id in registry.format_ids():
        backend = registry.get(format_id)
        capabilities = backend.capabilities()
        print(
            f"{format_id}\t"
            f"{','.join(backend.extensions)}\t"
            f"binary={str(capabilities.binary).lower()}\t"
            f"shape_metadata={str(capabilities.supports_shape_metadata).lower()}"
        )
    for unavailable in registry.unavailable_formats():
        extensions = ",".join(unavailable.extensions)
        print(f"{unavailable.format_id}\t{extensions}\tunavailable: {unavailable.reason}")
    return 0
