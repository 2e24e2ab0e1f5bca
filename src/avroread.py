"""Public SDK surface for avroread.

This module provides a stable import path for library users.
It re-exports the container reader, typed options, and errors.
"""

from __future__ import annotations

from container.file_reader import ContainerFileReader, open_container
from container.header import ContainerHeader
from container.record_format import format_record
from container.schema_parser import parse_schema_json
from core.config import AvroReadConfig
from core.errors import (
    AvroReadConfigError,
    AvroReadError,
    AvroReadFormatError,
    AvroReadIOError,
    AvroReadNotFoundError,
    AvroReadSchemaError,
)
from core.types import ContainerSummary, DataBlock, DumpOptions, ReaderOptions

__all__ = [
    "AvroReadConfig",
    "AvroReadConfigError",
    "AvroReadError",
    "AvroReadFormatError",
    "AvroReadIOError",
    "AvroReadNotFoundError",
    "AvroReadSchemaError",
    "ContainerFileReader",
    "ContainerHeader",
    "ContainerSummary",
    "DataBlock",
    "DumpOptions",
    "ReaderOptions",
    "format_record",
    "open_container",
    "parse_schema_json",
]
