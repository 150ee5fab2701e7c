"""End-to-end tests for structures stored in CSV files."""

from __future__ import annotations

import numpy as np

from adapters.protocol import pack, unpack
from formats.csv_backend import CsvBackend
from sdk.structure_io import TabioClient
from store.table import Table


def test_matrix_column_survives_csv_round_trip(tmp_path) -> None:
    """A packed 2x2 matrix in column M reads back equal with shape [2, 2]."""
    matrix = np.array([[1.0, 2.0], [3.0, 4.0]])
    packed = pack(matrix)
    table = Table()
    table["M"] = packed.column
    path = tmp_path / "matrix.csv"
    path.write_bytes(CsvBackend().render(table))

    parsed = CsvBackend().parse(path.read_bytes())
    restored = unpack(parsed.column("M"), np.ndarray, [2, 2])

    assert packed.shape.dimensions == (2, 2)
    assert np.array_equal(restored, matrix)


def test_name_value_table_file_round_trip(client: TabioClient, tmp_path) -> None:
    """A mixed table writes the exact CSV body and reads back unchanged."""
    table = Table({"name": ["a", "b"], "value": [1.5, 2.5]})
    path = client.write_table(tmp_path / "t.csv", table)

    assert path.read_bytes() == b"name,value\na,1.5\nb,2.5\n"
    assert client.read_table(path) == table


def test_derived_column_written_and_reread(client: TabioClient, tmp_path) -> None:
    """Derived columns are ordinary columns on disk."""
    table = Table({"x": [1.0, 2.0, 3.0]})
    table.derive("x", lambda values: values * values, target="x_squared")

    reread = client.read_table(client.write_table(tmp_path / "d.csv", table))

    assert reread["x_squared"].to_list() == [1.0, 4.0, 9.0]
