"""avroread CLI entry points.

This module exposes commands for dumping and inspecting Avro
container files. It maps argparse commands onto reader calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import Sequence

from cli.dump_command import add_dump_command, run_dump_command
from cli.inspect_command import (
    add_count_command,
    add_meta_command,
    run_count_command,
    run_meta_command,
)
from core.config import AvroReadConfig
from core.constants import SUPPORTED_LOG_LEVELS
from core.errors import AvroReadConfigError
from core.logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="avroread", description="Read Avro container files")
    parser.add_argument(
        "--log-level",
        choices=SUPPORTED_LOG_LEVELS,
        help="Override AVROREAD_LOG_LEVEL for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_dump_command(subparsers)
    add_meta_command(subparsers)
    add_count_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the avroread CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.log_level)
    except AvroReadConfigError as error:
        print(f"error={error}", file=sys.stderr)
        return 2
    configure_logging(config.log_level)
    if args.command == "dump":
        return run_dump_command(config, args)
    if args.command == "meta":
        return run_meta_command(config, args)
    if args.command == "count":
        return run_count_command(config, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(log_level: str | None) -> AvroReadConfig:
    """Build runtime config with optional log-level override.

    Args:
        log_level: Optional override level name.

    Returns:
        Validated runtime configuration.
    """
    config = AvroReadConfig.from_env()
    if log_level:
        config = replace(config, log_level=log_level)
    return config
