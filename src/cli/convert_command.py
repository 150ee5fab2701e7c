"""Convert command wiring for Tabio CLI."""

from __future__ import annotations

import argparse
from typing import Any

from sdk.structure_io import TabioClient


def add_convert_command(subparsers: Any) -> None:
    """Register convert subcommand."""
    parser = subparsers.add_parser("convert", help="Rewrite a table in another format")
    parser.add_argument("source", help="Input table file")
    parser.add_argument("destination", help="Output table file")
    parser.add_argument("--from", dest="source_format", help="Input format id")
    parser.add_argument("--to", dest="destination_format", help="Output format id")


def run_convert_command(client: TabioClient, args: argparse.Namespace) -> int:
    """Read ``source`` with one backend and write it with another."""
    table = client.read_table(args.source, format_id=args.source_format)
    destination = client.write_table(
        args.destination,
        table,
        format_id=args.destination_format,
    )
    print(destination)
    return 0
