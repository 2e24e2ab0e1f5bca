"""Shared container-file builders for tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping

import fastavro

TEST_SYNC_MARKER = bytes(range(0xF0, 0x100))

USER_SCHEMA: dict[str, Any] = {
    "type": "record",
    "name": "User",
    "namespace": "example.avro",
    "fields": [
        {"name": "name", "type": "string"},
        {"name": "favorite_number", "type": ["null", "int"]},
        {"name": "favorite_color", "type": ["null", "string"]},
    ],
}


def sample_users(count: int) -> list[dict[str, Any]]:
    """Build ``count`` distinct user records."""
    colors = ("red", None, "blue")
    return [
        {
            "name": f"user-{index}",
            "favorite_number": index if index % 2 == 0 else None,
            "favorite_color": colors[index % len(colors)],
        }
        for index in range(count)
    ]


def write_container(
    path: Path,
    records: Iterable[Mapping[str, Any]],
    schema: Mapping[str, Any] | None = None,
    one_block_per_record: bool = False,
    codec: str = "null",
    metadata: Mapping[str, str] | None = None,
) -> Path:
    """Write a container file with the fixed test sync marker.

    Args:
        path: Output file path.
        records: Records to write, in order.
        schema: Writer schema; defaults to ``USER_SCHEMA``.
        one_block_per_record: Flush a block after every record.
        codec: fastavro codec name.
        metadata: Optional user metadata entries.

    Returns:
        The written path.
    """
    sync_interval = 1 if one_block_per_record else 16000
    with path.open("wb") as handle:
        fastavro.writer(
            handle,
            dict(schema or USER_SCHEMA),
            list(records),
            codec=codec,
            sync_interval=sync_interval,
            metadata=dict(metadata or {}),
            sync_marker=TEST_SYNC_MARKER,
        )
    return path


def header_length(data: bytes) -> int:
    """Return the byte length of the container header in ``data``."""
    return data.index(TEST_SYNC_MARKER) + len(TEST_SYNC_MARKER)


def encode_long(value: int) -> bytes:
    """Zig-zag varint encode one long."""
    encoded = bytearray()
    zigzag = (value << 1) ^ (value >> 63)
    while zigzag & ~0x7F:
        encoded.append((zigzag & 0x7F) | 0x80)
        zigzag >>= 7
    encoded.append(zigzag)
    return bytes(encoded)


def encode_bytes(value: bytes) -> bytes:
    """Length-prefix one byte string."""
    return encode_long(len(value)) + value


def build_container_bytes(
    metadata: Mapping[str, bytes],
    blocks: Iterable[tuple[int, bytes]] = (),
    sync_marker: bytes = TEST_SYNC_MARKER,
) -> bytes:
    """Assemble raw container bytes from metadata and (count, payload) blocks."""
    header = bytearray(b"Obj\x01")
    if metadata:
        header += encode_long(len(metadata))
        for key, value in metadata.items():
            header += encode_bytes(key.encode("utf-8")) + encode_bytes(value)
    header += encode_long(0) + sync_marker
    for record_count, payload in blocks:
        header += encode_long(record_count) + encode_bytes(payload) + sync_marker
    return bytes(header)
