"""Core constants used across Tabio modules.

This module centralizes format identifiers and defaults.
Keeping values here avoids magic literals in parsers and adapters.
"""

from __future__ import annotations

CSV_FORMAT_ID = "csv"
TSV_FORMAT_ID = "tsv"
PARQUET_FORMAT_ID = "parquet"
HDF5_FORMAT_ID = "hdf5"
CSV_EXTENSIONS = (".csv",)
TSV_EXTENSIONS = (".tsv", ".tab")
PARQUET_EXTENSIONS = (".parquet", ".pq")
HDF5_EXTENSIONS = (".h5", ".hdf5")
DEFAULT_CSV_DELIMITER = ","
TSV_DELIMITER = "\t"
CSV_QUOTE_CHAR = '"'
NUMBER_LITERAL_CHARACTERS = frozenset("0123456789.+-eEnNaAiIfFtTyY")
CSV_LINE_TERMINATOR = "\n"
TEXT_ENCODING = "utf-8"
UTF8_BOM = "\ufeff"
MAX_FLOAT_PRECISION = 17
DEFAULT_PACK_COLUMN = "values"
DEFAULT_LOG_LEVEL = "WARNING"
SHAPE_METADATA_KEY = "tabio.shape"
NUMERIC_PAD_VALUE = 0.0
TEXT_PAD_VALUE = ""
MIN_NUMERIC_CAPACITY = 8
HISTOGRAM_LOWER_COLUMN = "lower"
HISTOGRAM_UPPER_COLUMN = "upper"
HISTOGRAM_COUNT_COLUMN = "count"
