"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def text_only_config():
    """Config with binary backends disabled, independent of installed extras."""
    from core.config import TabioConfig

    return TabioConfig(enable_binary_backends=False)


@pytest.fixture
def client(text_only_config):
    """Client over a private registry built from ``text_only_config``."""
    from sdk.structure_io import TabioClient

    return TabioClient(text_only_config)


@pytest.fixture(autouse=True)
def _clear_tabio_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer TABIO_* variables out of test runs."""
    for variable in (
        "TABIO_CSV_DELIMITER",
        "TABIO_FLOAT_PRECISION",
        "TABIO_ENABLE_BINARY",
        "TABIO_LOG_LEVEL",
        "TABIO_PACK_COLUMN",
    ):
        monkeypatch.delenv(variable, raising=False)
