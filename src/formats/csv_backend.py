"""Delimited text backend.

This module turns tokenized CSV records into typed tables and renders tables
back to RFC 4180 text. The first record is the header. Column kinds are
inferred once per column unless the caller declares them.
"""

from __future__ import annotations

import math
from pathlib import Path
import re
from typing import Iterable, Mapping

from core.constants import (
    CSV_EXTENSIONS,
    CSV_FORMAT_ID,
    CSV_LINE_TERMINATOR,
    CSV_QUOTE_CHAR,
    DEFAULT_CSV_DELIMITER,
    NUMBER_LITERAL_CHARACTERS,
    TEXT_ENCODING,
    UTF8_BOM,
)
from core.errors import (
    DuplicateHeaderError,
    KeyNotFoundError,
    ParseError,
    TabioConfigError,
    TypeMismatchError,
)
from core.logging_config import get_logger
from core.types import COLUMN_KINDS, NUMERIC, TEXT, BackendCapabilities, ColumnKind
from formats.backend import extension_matches
from formats.csv_automaton import CsvField, tokenize_records
from store.column import Column, NumericColumn
from store.table import Table

_LOGGER = get_logger(__name__)

_NUMBER_PATTERN = re.compile(
    r"[+-]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|nan|inf|infinity)",
    re.IGNORECASE,
)


class CsvBackend:
    """CSV (or other single-character delimited) format backend."""

    def __init__(
        self,
        delimiter: str = DEFAULT_CSV_DELIMITER,
        float_precision: int | None = None,
        format_id: str = CSV_FORMAT_ID,
        extensions: tuple[str, ...] = CSV_EXTENSIONS,
    ) -> None:
        """Create a delimited text backend.

        Args:
            delimiter: Single field delimiter character.
            float_precision: Significant digits for numbers, or ``None`` for
                the shortest text that reads back to the same float.
            format_id: Registry identifier.
            extensions: File suffixes handled by this backend.

        Raises:
            TabioConfigError: If the delimiter is unusable.
        """
        if (
            len(delimiter) != 1
            or delimiter in (CSV_QUOTE_CHAR, "\n", "\r")
            or delimiter in NUMBER_LITERAL_CHARACTERS
        ):
            raise TabioConfigError(
                f"Invalid delimiter {delimiter!r} for format '{format_id}': "
                "expected one character other than a quote, a newline or a "
                "character that can appear in a number."
            )
        self.format_id = format_id
        self.extensions = extensions
        self._delimiter = delimiter
        self._float_precision = float_precision

    def capabilities(self) -> BackendCapabilities:
        """Delimited text carries no shape metadata."""
        return BackendCapabilities(supports_shape_metadata=False, binary=False)

    def can_handle(self, path_or_extension: str | Path) -> bool:
        """Return whether the path or extension belongs to this format."""
        return extension_matches(path_or_extension, self.extensions)

    def parse(
        self,
        payload: bytes,
        kinds: Mapping[str, ColumnKind] | None = None,
    ) -> Table:
        """Parse delimited text into a table.

        Args:
            payload: Encoded file content.
            kinds: Optional declared kinds by column name; other columns are
                inferred.

        Returns:
            Parsed table. Empty input yields an empty table.

        Raises:
            ParseError: For undecodable or malformed input.
            DuplicateHeaderError: If a header name repeats.
            TypeMismatchError: If a field violates a declared kind.
            KeyNotFoundError: If ``kinds`` names a missing column.
        """
        records = tokenize_records(_decode(payload), self._delimiter)
        header = records[0] if records else []
        names = _header_names(header)
        declared = _declared_kinds(names, kinds or {})
        body = records[1:]
        _check_record_widths(len(names), body)
        table = Table()
        for index, name in enumerate(names):
            fields = [record[index] for record in body]
            kind = declared.get(name) or infer_field_kind(fields)
            table.set_column(name, _build_column(name, kind, fields))
        _LOGGER.debug(
            "csv_parsed",
            format_id=self.format_id,
            column_count=table.column_count(),
            row_count=table.row_count(),
        )
        return table

    def render(self, table: Table) -> bytes:
        """Render a table as delimited text.

        Every record, including the last, ends with a single ``\\n``.

        Args:
            table: Table to render.

        Returns:
            UTF-8 encoded text; empty for a table without columns.
        """
        names = table.column_names()
        if not names:
            return b""
        rendered_columns = [self._render_column(table.column(name)) for name in names]
        lines = [self._delimiter.join(self._escape(name) for name in names)]
        lines.extend(self._delimiter.join(row) for row in zip(*rendered_columns))
        text = CSV_LINE_TERMINATOR.join(lines) + CSV_LINE_TERMINATOR
        return text.encode(TEXT_ENCODING)

    def _render_column(self, column: Column) -> list[str]:
        if isinstance(column, NumericColumn):
            return [self._format_number(value) for value in column.to_list()]
        return [self._escape(value) for value in column.to_list()]

    def _format_number(self, value: float) -> str:
        if self._float_precision is None or not math.isfinite(value):
            return repr(value)
        return format(value, f".{self._float_precision}g")

    def _escape(self, text: str) -> str:
        if _needs_quotes(text, self._delimiter):
            doubled = text.replace(CSV_QUOTE_CHAR, CSV_QUOTE_CHAR * 2)
            return f"{CSV_QUOTE_CHAR}{doubled}{CSV_QUOTE_CHAR}"
        return text


def is_number_literal(text: str) -> bool:
    """Return whether ``text`` is entirely a real-number literal.

    Accepts an optional sign, digits with an optional fraction, an optional
    exponent, and the non-finite spellings ``nan``, ``inf`` and ``infinity``.
    """
    return _NUMBER_PATTERN.fullmatch(text) is not None


def infer_field_kind(fields: Iterable[CsvField]) -> ColumnKind:
    """Decide the kind of one column from its fields.

    Only quoted or non-empty fields count as evidence. The column is numeric
    when there is evidence and every piece of it is an unquoted number.
    """
    evidence = [field for field in fields if field.quoted or field.text]
    if evidence and all(
        not field.quoted and is_number_literal(field.text) for field in evidence
    ):
        return NUMERIC
    return TEXT


def _decode(payload: bytes) -> str:
    try:
        text = payload.decode(TEXT_ENCODING)
    except UnicodeDecodeError as error:
        raise ParseError(
            f"Input is not valid UTF-8: {error.reason}", position=error.start
        ) from error
    return text.removeprefix(UTF8_BOM)


def _header_names(header: list[CsvField]) -> list[str]:
    seen: set[str] = set()
    names: list[str] = []
    for field in header:
        if field.text in seen:
            raise DuplicateHeaderError(field.text, field.position)
        seen.add(field.text)
        names.append(field.text)
    return names


def _declared_kinds(
    names: list[str],
    kinds: Mapping[str, ColumnKind],
) -> dict[str, ColumnKind]:
    unknown = [name for name in kinds if name not in names]
    if unknown:
        raise KeyNotFoundError(
            f"Declared kinds name missing columns {unknown}. Header columns: {names}."
        )
    for name, kind in kinds.items():
        if kind not in COLUMN_KINDS:
            raise TypeMismatchError(
                f"Unknown kind '{kind}' declared for column '{name}'. "
                f"Use one of {COLUMN_KINDS}."
            )
    return dict(kinds)


def _check_record_widths(width: int, records: list[list[CsvField]]) -> None:
    for record in records:
        if len(record) != width:
            first = record[0]
            raise ParseError(
                f"Record has {len(record)} fields but the header has {width}",
                first.position,
                first.line,
                first.column,
            )


def _build_column(name: str, kind: ColumnKind, fields: list[CsvField]) -> Column:
    if kind == TEXT:
        return Column.from_values(name, [field.text for field in fields], TEXT)
    return Column.from_values(name, [_field_number(name, field) for field in fields], NUMERIC)


def _field_number(name: str, field: CsvField) -> float:
    if not field.text:
        return math.nan
    if not is_number_literal(field.text):
        raise TypeMismatchError(
            f"Field {field.text!r} in numeric column '{name}' is not a number "
            f"(line {field.line}, column {field.column}).",
            position=field.position,
        )
    return float(field.text)


def _needs_quotes(text: str, delimiter: str) -> bool:
    if not text or is_number_literal(text):
        return True
    return any(char in text for char in (delimiter, CSV_QUOTE_CHAR, "\n", "\r"))
