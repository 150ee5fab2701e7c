"""Shared fixture path helpers for tests."""

from __future__ import annotations

from pathlib import Path


def fixture_path(relative_path: str) -> Path:
    """Resolve a CSV fixture under tests/fixtures.

    Args:
        relative_path: File name or path under the fixtures root.

    Returns:
        Absolute fixture path.
    """
    return Path(__file__).resolve().parent / "fixtures" / relative_path


def fixture_bytes(relative_path: str) -> bytes:
    """Return the raw bytes of a fixture file."""
    return fixture_path(relative_path).read_bytes()
