"""Tabio CLI entry points.

This module exposes table inspection, format conversion and format listing.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from cli.convert_command import add_convert_command, run_convert_command
from cli.formats_command import add_formats_command, run_formats_command
from cli.inspect_command import add_inspect_command, run_inspect_command
from core.config import TabioConfig
from core.errors import TabioError
from core.logging_config import configure_logging
from sdk.structure_io import TabioClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="tabio", description="Tabular IO for numeric data")
    parser.add_argument("--log-level", help="Override TABIO_LOG_LEVEL for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_inspect_command(subparsers)
    add_convert_command(subparsers)
    add_formats_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Tabio CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = TabioConfig.from_env()
        configure_logging(args.log_level or config.log_level)
        client = TabioClient(config)
        if args.command == "inspect":
            return run_inspect_command(client, args)
        if args.command == "convert":
            return run_convert_command(client, args)
        if args.command == "formats":
            return run_formats_command(client)
    except TabioError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2
