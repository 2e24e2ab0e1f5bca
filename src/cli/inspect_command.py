"""Header and block inspection commands for avroread CLI."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from container.file_reader import open_container
from core.config import AvroReadConfig
from core.errors import AvroReadError
from core.types import ContainerSummary


def add_meta_command(subparsers: Any) -> None:
    """Register meta subcommand."""
    parser = subparsers.add_parser("meta", help="Print header metadata and writer schema")
    parser.add_argument("path", help="Avro container file path")


def add_count_command(subparsers: Any) -> None:
    """Register count subcommand."""
    parser = subparsers.add_parser(
        "count",
        help="Count blocks and records without decoding them",
    )
    parser.add_argument("path", help="Avro container file path")


def run_meta_command(config: AvroReadConfig, args: argparse.Namespace) -> int:
    """Print codec, sync marker, user metadata and the pretty-printed schema."""
    try:
        with open_container(args.path, config.reader_options()) as reader:
            header = reader.header
            print(f"codec={header.codec}")
            print(f"sync_marker={header.sync_marker.hex()}")
            for key in sorted(header.user_metadata):
                value = header.user_metadata[key].decode("utf-8", errors="replace")
                print(f"meta.{key}={value}")
            print(json.dumps(json.loads(header.schema_json), indent=2))
    except AvroReadError as error:
        print(f"error={error}", file=sys.stderr)
        return 1
    return 0


def run_count_command(config: AvroReadConfig, args: argparse.Namespace) -> int:
    """Print block and record counts as key=value rows."""
    try:
        with open_container(args.path, config.reader_options()) as reader:
            summary = reader.summary()
    except AvroReadError as error:
        print(f"error={error}", file=sys.stderr)
        return 1
    print(render_count_rows(summary))
    return 0


def render_count_rows(summary: ContainerSummary) -> str:
    """Render block and record counts for one summary."""
    return "\n".join(
        (
            f"source={summary.source}",
            f"blocks={summary.block_count}",
            f"records={summary.record_count}",
        )
    )
