"""Runtime configuration model for Tabio.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os

from core.constants import (
    CSV_QUOTE_CHAR,
    DEFAULT_CSV_DELIMITER,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PACK_COLUMN,
    MAX_FLOAT_PRECISION,
    NUMBER_LITERAL_CHARACTERS,
)
from core.errors import TabioConfigError

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class TabioConfig:
    """Validated runtime configuration.

    Attributes:
        csv_delimiter: Field delimiter used by the CSV backend.
        float_precision: Significant digits for rendered numbers, or ``None``
            for the shortest representation that reads back exactly.
        enable_binary_backends: Whether optional binary backends may register.
        log_level: Standard logging level name.
        default_pack_column: Column name used when packing a structure.
    """

    csv_delimiter: str = DEFAULT_CSV_DELIMITER
    float_precision: int | None = None
    enable_binary_backends: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    default_pack_column: str = DEFAULT_PACK_COLUMN

    @classmethod
    def from_env(cls) -> "TabioConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            TabioConfigError: If environment values are invalid.
        """
        return cls(
            csv_delimiter=_parse_delimiter(
                os.getenv("TABIO_CSV_DELIMITER", DEFAULT_CSV_DELIMITER)
            ),
            float_precision=_parse_float_precision(os.getenv("TABIO_FLOAT_PRECISION")),
            enable_binary_backends=_parse_flag(
                "TABIO_ENABLE_BINARY", os.getenv("TABIO_ENABLE_BINARY", "true")
            ),
            log_level=_parse_log_level(os.getenv("TABIO_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
            default_pack_column=_parse_pack_column(
                os.getenv("TABIO_PACK_COLUMN", DEFAULT_PACK_COLUMN)
            ),
        )


def _parse_delimiter(raw_value: str) -> str:
    """Validate the CSV delimiter value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Single-character delimiter.

    Raises:
        TabioConfigError: If the delimiter is unusable.
    """
    if raw_value == "\\t":
        return "\t"
    if (
        len(raw_value) != 1
        or raw_value in (CSV_QUOTE_CHAR, "\n", "\r")
        or raw_value in NUMBER_LITERAL_CHARACTERS
    ):
        raise TabioConfigError(
            "Invalid TABIO_CSV_DELIMITER value: "
            "expected one character other than a quote, a newline or a character "
            f"that can appear in a number, got {raw_value!r}. "
            "Set TABIO_CSV_DELIMITER to a single character such as ',' or ';'."
        )
    return raw_value


def _parse_float_precision(raw_value: str | None) -> int | None:
    """Parse the float precision environment value.

    Args:
        raw_value: Raw string from environment, or ``None`` when unset.

    Returns:
        Parsed precision, or ``None`` for shortest round-trip output.

    Raises:
        TabioConfigError: If the value is not an integer in range.
    """
    if raw_value is None or not raw_value.strip():
        return None
    try:
        precision = int(raw_value)
    except ValueError as error:
        raise TabioConfigError(
            "Invalid TABIO_FLOAT_PRECISION value: "
            f"expected integer, got '{raw_value}'. "
            "Set TABIO_FLOAT_PRECISION to a number of significant digits."
        ) from error
    if not 1 <= precision <= MAX_FLOAT_PRECISION:
        raise TabioConfigError(
            "Invalid TABIO_FLOAT_PRECISION value: "
            f"expected 1..{MAX_FLOAT_PRECISION}, got {precision}. "
            f"Use {MAX_FLOAT_PRECISION} or unset the variable for exact round trips."
        )
    return precision


def _parse_flag(variable: str, raw_value: str) -> bool:
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise TabioConfigError(
        f"Invalid {variable} value: expected one of "
        f"{_TRUE_VALUES + _FALSE_VALUES}, got '{raw_value}'."
    )


def _parse_log_level(raw_value: str) -> str:
    level_name = raw_value.strip().upper()
    if not isinstance(logging.getLevelName(level_name), int):
        raise TabioConfigError(
            f"Invalid TABIO_LOG_LEVEL value: '{raw_value}' is not a logging level. "
            "Use DEBUG, INFO, WARNING or ERROR."
        )
    return level_name


def _parse_pack_column(raw_value: str) -> str:
    if not raw_value:
        raise TabioConfigError(
            "Invalid TABIO_PACK_COLUMN value: column name must not be empty."
        )
    return raw_value
