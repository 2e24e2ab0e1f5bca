"""Dump command wiring for avroread CLI."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from container.file_reader import open_container
from container.record_format import format_record
from core.config import AvroReadConfig
from core.constants import SUPPORTED_OUTPUT_FORMATS
from core.errors import AvroReadError
from core.types import DumpOptions


def add_dump_command(subparsers: Any) -> None:
    """Register dump subcommand."""
    parser = subparsers.add_parser("dump", help="Print every record of a container file")
    parser.add_argument("path", help="Avro container file path")
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=SUPPORTED_OUTPUT_FORMATS,
        help="Record output format (default: AVROREAD_OUTPUT_FORMAT or repr)",
    )
    parser.add_argument("--limit", type=int, help="Maximum number of records to print")
    parser.add_argument(
        "--fields",
        help="Comma-separated top-level fields to print, in order",
    )


def run_dump_command(config: AvroReadConfig, args: argparse.Namespace) -> int:
    """Print decoded records, one per line, and report failures on stderr."""
    options = DumpOptions(
        source_path=Path(args.path),
        output_format=args.output_format or config.output_format,
        limit=args.limit,
        fields=_parse_fields(args.fields),
    )
    try:
        dump_records(options, config)
    except AvroReadError as error:
        print(f"error={error}", file=sys.stderr)
        return 1
    return 0


def dump_records(options: DumpOptions, config: AvroReadConfig) -> int:
    """Stream records from a container file to stdout.

    Args:
        options: Dump options.
        config: Runtime configuration for reader options.

    Returns:
        Number of records printed.

    Raises:
        AvroReadError: If the file cannot be opened or decoded.
    """
    printed = 0
    if options.limit is not None and options.limit <= 0:
        return printed
    with open_container(options.source_path, config.reader_options()) as reader:
        for record in reader:
            print(format_record(record, options.output_format, options.fields))
            printed += 1
            if options.limit is not None and printed >= options.limit:
                break
    return printed


def _parse_fields(raw_fields: str | None) -> tuple[str, ...] | None:
    if not raw_fields:
        return None
    fields = tuple(name.strip() for name in raw_fields.split(",") if name.strip())
    return fields or None
