"""Unit tests for structured logging setup."""

from __future__ import annotations

import json

from core.logging_config import configure_logging, get_logger


def test_logger_writes_json_events_to_stderr(capsys) -> None:
    """Events at or above the level should render as JSON on stderr."""
    configure_logging("INFO")
    try:
        get_logger("tests.logging").info("table_written", rows=2)
        captured = capsys.readouterr()
    finally:
        configure_logging()

    event = json.loads(captured.err.strip().splitlines()[-1])
    assert event["event"] == "table_written" and event["rows"] == 2
    assert captured.out == ""


def test_logger_filters_below_level(capsys) -> None:
    """Events below the configured level should be dropped."""
    configure_logging("WARNING")

    get_logger("tests.logging").info("csv_parsed", rows=1)

    assert capsys.readouterr().err == ""
