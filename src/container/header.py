"""Container header parsing.

This module validates the magic bytes, reads the metadata map and
sync marker, and parses the embedded writer schema.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from container.binary_decoder import BinaryDecoder
from container.schema_parser import parse_schema_json
from container.schema_types import Schema
from core.constants import (
    CODEC_METADATA_KEY,
    CONTAINER_MAGIC,
    NULL_CODEC,
    RESERVED_METADATA_PREFIX,
    SCHEMA_METADATA_KEY,
    SUPPORTED_CODECS,
    SYNC_MARKER_SIZE,
)
from core.errors import AvroReadFormatError, AvroReadSchemaError


@dataclass(frozen=True)
class ContainerHeader:
    """Parsed container header.

    Attributes:
        metadata: Full metadata map, including reserved ``avro.*`` keys.
        schema: Parsed writer schema.
        schema_json: Writer schema JSON text.
        codec: Block codec name.
        sync_marker: 16-byte marker repeated after every block.
    """

    metadata: Mapping[str, bytes]
    schema: Schema = field(repr=False)
    schema_json: str
    codec: str
    sync_marker: bytes

    @property
    def user_metadata(self) -> dict[str, bytes]:
        """Metadata entries outside the reserved ``avro.`` namespace."""
        return {
            key: value
            for key, value in self.metadata.items()
            if not key.startswith(RESERVED_METADATA_PREFIX)
        }


def read_header(decoder: BinaryDecoder, source: str) -> ContainerHeader:
    """Read and validate a container header.

    Args:
        decoder: Decoder positioned at the start of the file.
        source: Path or stream name for error messages.

    Returns:
        Parsed header; the decoder is left at the first block.

    Raises:
        AvroReadFormatError: If the magic, metadata or codec is invalid.
        AvroReadSchemaError: If the writer schema is missing or malformed.
    """
    magic = decoder.read_exact(len(CONTAINER_MAGIC))
    if magic != CONTAINER_MAGIC:
        raise AvroReadFormatError(
            f"Not an Avro container file: {source} starts with {magic!r}, "
            f"expected {CONTAINER_MAGIC!r}."
        )
    metadata = _read_metadata(decoder)
    sync_marker = decoder.read_exact(SYNC_MARKER_SIZE)
    codec = _resolve_codec(metadata, source)
    schema_json = _resolve_schema_json(metadata, source)
    return ContainerHeader(
        metadata=metadata,
        schema=parse_schema_json(schema_json),
        schema_json=schema_json,
        codec=codec,
        sync_marker=sync_marker,
    )


def _read_metadata(decoder: BinaryDecoder) -> dict[str, bytes]:
    metadata: dict[str, bytes] = {}
    count = decoder.read_block_count()
    while count:
        for _ in range(count):
            key = decoder.read_string()
            metadata[key] = decoder.read_bytes()
        count = decoder.read_block_count()
    return metadata


def _resolve_codec(metadata: Mapping[str, bytes], source: str) -> str:
    raw_codec = metadata.get(CODEC_METADATA_KEY, NULL_CODEC.encode("utf-8"))
    codec = raw_codec.decode("utf-8", errors="replace")
    if codec not in SUPPORTED_CODECS:
        raise AvroReadFormatError(
            f"Unsupported codec '{codec}' in {source}. "
            f"Only {SUPPORTED_CODECS} blocks can be read; rewrite the file without compression."
        )
    return codec


def _resolve_schema_json(metadata: Mapping[str, bytes], source: str) -> str:
    raw_schema = metadata.get(SCHEMA_METADATA_KEY)
    if raw_schema is None:
        raise AvroReadSchemaError(
            f"Container header in {source} is missing the '{SCHEMA_METADATA_KEY}' entry."
        )
    try:
        return raw_schema.decode("utf-8")
    except UnicodeDecodeError as error:
        raise AvroReadSchemaError(
            f"Writer schema in {source} is not valid UTF-8: {error.reason}."
        ) from error
