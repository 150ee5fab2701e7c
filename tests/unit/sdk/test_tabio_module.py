"""Unit tests for the module-level public API."""

from __future__ import annotations

import numpy as np

import tabio


def test_module_functions_use_default_client(tmp_path) -> None:
    """write/read/read_into work without building a client."""
    path = tabio.write(tmp_path / "v.csv", np.array([1.0, 2.0, 3.0]))
    out = np.zeros(3)

    tabio.read_into(path, out)

    assert out.tolist() == [1.0, 2.0, 3.0]
    assert tabio.read(path) == tabio.Table({"values": [1.0, 2.0, 3.0]})


def test_default_client_is_reused() -> None:
    """The module keeps a single default client."""
    assert tabio.default_client() is tabio.default_client()
