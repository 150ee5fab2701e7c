"""Field-level CSV tokenizer.

This module splits decoded CSV text into records of fields with a small
state machine. It knows nothing about headers or column kinds; every field
keeps its source location and whether it was quoted.

States and transitions::

    field_start --char--> in_field --delimiter--> field_start
    field_start --quote--> in_quoted_field --quote--> quote_seen
    quote_seen --quote--> in_quoted_field  (escaped literal quote)
    quote_seen --delimiter/newline--> field_start / record end
    in_field --newline--> record end
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from core.constants import CSV_QUOTE_CHAR
from core.errors import ParseError

FieldState = Literal["field_start", "in_field", "in_quoted_field", "quote_seen"]
FIELD_START: FieldState = "field_start"
IN_FIELD: FieldState = "in_field"
IN_QUOTED_FIELD: FieldState = "in_quoted_field"
QUOTE_SEEN: FieldState = "quote_seen"


@dataclass(frozen=True)
class CsvField:
    """One tokenized field.

    Attributes:
        text: Field content with quoting removed.
        quoted: Whether the field was written inside quotes.
        position: Zero-based character offset where the field starts.
        line: One-based line of the field start.
        column: One-based column of the field start.
    """

    text: str
    quoted: bool
    position: int
    line: int
    column: int


def tokenize_records(text: str, delimiter: str) -> list[list[CsvField]]:
    """Split CSV text into records of fields.

    CRLF, LF and lone CR end records outside quotes; inside quotes they are
    kept verbatim. Blank lines at the end of the input are dropped.

    Args:
        text: Decoded CSV content.
        delimiter: Single-character field delimiter.

    Returns:
        Records in input order.

    Raises:
        ParseError: For unterminated quotes or stray quote characters.
    """
    records = _RecordAutomaton(text, delimiter).run()
    while records and _is_blank_record(records[-1]):
        records.pop()
    return records


class _RecordAutomaton:
    """Single-pass state machine over one decoded payload."""

    def __init__(self, text: str, delimiter: str) -> None:
        self._text = text
        self._delimiter = delimiter
        self._state: FieldState = FIELD_START
        self._records: list[list[CsvField]] = []
        self._record: list[CsvField] = []
        self._chars: list[str] = []
        self._quoted = False
        self._start = (0, 1, 1)
        self._line = 1
        self._column = 1

    def run(self) -> list[list[CsvField]]:
        text = self._text
        index = 0
        while index < len(text):
            char = text[index]
            newline_width = self._newline_width(index)
            if newline_width and self._state != IN_QUOTED_FIELD:
                self._on_newline(index)
                index += newline_width
                self._line += 1
                self._column = 1
                continue
            self._on_char(char, index)
            index += 1
            if char == "\n" or (char == "\r" and not text.startswith("\n", index)):
                self._line += 1
                self._column = 1
            else:
                self._column += 1
        self._on_end(len(text))
        return self._records

    def _newline_width(self, index: int) -> int:
        char = self._text[index]
        if char == "\n":
            return 1
        if char == "\r":
            return 2 if self._text.startswith("\n", index + 1) else 1
        return 0

    def _on_char(self, char: str, index: int) -> None:
        state = self._state
        if state == FIELD_START:
            self._start = (index, self._line, self._column)
            if char == self._delimiter:
                self._emit_field()
            elif char == CSV_QUOTE_CHAR:
                self._quoted = True
                self._state = IN_QUOTED_FIELD
            else:
                self._chars.append(char)
                self._state = IN_FIELD
        elif state == IN_FIELD:
            if char == self._delimiter:
                self._emit_field()
            elif char == CSV_QUOTE_CHAR:
                self._fail("Unexpected quote inside an unquoted field", index)
            else:
                self._chars.append(char)
        elif state == IN_QUOTED_FIELD:
            if char == CSV_QUOTE_CHAR:
                self._state = QUOTE_SEEN
            else:
                self._chars.append(char)
        elif char == CSV_QUOTE_CHAR:
            self._chars.append(char)
            self._state = IN_QUOTED_FIELD
        elif char == self._delimiter:
            self._emit_field()
        else:
            self._fail(f"Unexpected character {char!r} after closing quote", index)

    def _on_newline(self, index: int) -> None:
        if self._state == FIELD_START:
            self._start = (index, self._line, self._column)
        self._emit_field()
        self._end_record()

    def _on_end(self, index: int) -> None:
        if self._state == IN_QUOTED_FIELD:
            position, line, column = self._start
            raise ParseError("Unterminated quoted field", position, line, column)
        if self._state != FIELD_START or self._record:
            if self._state == FIELD_START:
                self._start = (index, self._line, self._column)
            self._emit_field()
            self._end_record()

    def _emit_field(self) -> None:
        position, line, column = self._start
        self._record.append(
            CsvField(
                text="".join(self._chars),
                quoted=self._quoted,
                position=position,
                line=line,
                column=column,
            )
        )
        self._chars = []
        self._quoted = False
        self._state = FIELD_START

    def _end_record(self) -> None:
        self._records.append(self._record)
        self._record = []

    def _fail(self, reason: str, index: int) -> None:
        raise ParseError(reason, index, self._line, self._column)


def _is_blank_record(record: list[CsvField]) -> bool:
    return len(record) == 1 and not record[0].quoted and not record[0].text
