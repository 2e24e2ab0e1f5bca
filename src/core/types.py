"""Shared typed models.

This module defines immutable data models used by the container reader,
SDK, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from core.constants import (
    DEFAULT_MAX_BLOCK_BYTES,
    DEFAULT_MAX_COLLECTION_ITEMS,
    DEFAULT_OUTPUT_FORMAT,
)

Record = Any


@dataclass(frozen=True)
class ReaderOptions:
    """Decoding options for a container reader.

    Attributes:
        max_block_bytes: Largest accepted block payload length.
        max_collection_items: Largest accepted array or map item count.
        decode_logical_types: Convert logical types to Python values.
    """

    max_block_bytes: int = DEFAULT_MAX_BLOCK_BYTES
    max_collection_items: int = DEFAULT_MAX_COLLECTION_ITEMS
    decode_logical_types: bool = True


@dataclass(frozen=True)
class DataBlock:
    """One sync-validated data block.

    Attributes:
        record_count: Number of records encoded in the payload.
        payload: Raw (uncompressed) payload bytes.
        offset: Byte offset of the block's count prefix in the file.
    """

    record_count: int
    payload: bytes
    offset: int


@dataclass(frozen=True)
class ContainerSummary:
    """Header and block statistics for one container file.

    Attributes:
        source: Path or stream name of the container.
        codec: Block compression codec name.
        sync_marker: Hex-encoded 16-byte sync marker.
        block_count: Number of data blocks scanned.
        record_count: Total records across scanned blocks.
        schema_json: Writer schema JSON text.
        user_metadata: Non-reserved metadata entries.
    """

    source: str
    codec: str
    sync_marker: str
    block_count: int
    record_count: int
    schema_json: str
    user_metadata: Mapping[str, bytes] = field(default_factory=dict)


@dataclass(frozen=True)
class DumpOptions:
    """Options for printing container records.

    Attributes:
        source_path: Container file to read.
        output_format: One of ``repr``, ``tsv`` or ``json``.
        limit: Optional maximum number of records to print.
        fields: Optional top-level field selection, in output order.
    """

    source_path: Path
    output_format: str = DEFAULT_OUTPUT_FORMAT
    limit: int | None = None
    fields: tuple[str, ...] | None = None
