"""Inspect command wiring for Tabio CLI."""

from __future__ import annotations

import argparse
from typing import Any

from sdk.structure_io import TabioClient


def add_inspect_command(subparsers: Any) -> None:
    """Register inspect subcommand."""
    parser = subparsers.add_parser("inspect", help="Print the columns and row count of a table")
    parser.add_argument("path", help="Table file")
    parser.add_argument("--format", dest="format_id", help="Format id, default by extension")


def run_inspect_command(client: TabioClient, args: argparse.Namespace) -> int:
    """Print one ``name<TAB>kind`` line per column, then the row count."""
    table = client.read_table(args.path, format_id=args.format_id)
    for name in table.column_names():
        print(f"{name}\t{table.column(name).kind}")
    print(f"rows={table.row_count()}")
    return 0
