"""Avro object-container file reader.

This module owns the open file handle, parses the header once, and
exposes records as a lazy, non-restartable iterator over sync-validated
data blocks.
"""

from __future__ import annotations

import io
from pathlib import Path
from types import TracebackType
from typing import Any, BinaryIO, Iterator, Mapping

from container.binary_decoder import BinaryDecoder
from container.datum_reader import DatumReader
from container.header import ContainerHeader, read_header
from container.schema_types import Schema
from core.constants import SYNC_MARKER_SIZE
from core.errors import (
    AvroReadFormatError,
    AvroReadIOError,
    AvroReadNotFoundError,
)
from core.logging_config import get_logger
from core.types import ContainerSummary, DataBlock, ReaderOptions, Record

_LOGGER = get_logger(__name__)


class ContainerFileReader:
    """Reader for one Avro object-container file.

    The reader owns its stream. Use it as a context manager, or call
    ``close()``, to release the handle on every exit path.
    """

    def __init__(
        self,
        stream: BinaryIO,
        source: str = "<stream>",
        options: ReaderOptions | None = None,
    ) -> None:
        """Parse the header of an already-open container stream.

        Args:
            stream: Readable binary stream positioned at the magic bytes.
            source: Path or name used in errors and logs.
            options: Optional decoding options.

        Raises:
            AvroReadFormatError: If the magic bytes or header framing are invalid.
            AvroReadSchemaError: If the writer schema is missing or malformed.
        """
        self._stream = stream
        self._source = source
        self._options = options or ReaderOptions()
        self._closed = False
        self._decoder = BinaryDecoder(stream, source)
        try:
            self._header = read_header(self._decoder, source)
        except BaseException:
            self.close()
            raise
        self._datum_reader = DatumReader(
            self._header.schema,
            decode_logical_types=self._options.decode_logical_types,
            max_collection_items=self._options.max_collection_items,
        )
        self._records: Iterator[Record] | None = None
        self._blocks_read = 0
        self._records_read = 0
        _LOGGER.info(
            "container_opened",
            source=source,
            codec=self._header.codec,
            sync_marker=self._header.sync_marker.hex(),
        )

    @classmethod
    def open(cls, path: str | Path, options: ReaderOptions | None = None) -> "ContainerFileReader":
        """Open a container file from disk.

        Args:
            path: Local container file path.
            options: Optional decoding options.

        Returns:
            Reader positioned at the first data block.

        Raises:
            AvroReadNotFoundError: If the file does not exist.
            AvroReadIOError: If the file cannot be opened.
            AvroReadFormatError: If the file is not a valid container.
            AvroReadSchemaError: If the writer schema is missing or malformed.
        """
        file_path = Path(path).expanduser()
        try:
            stream = file_path.open("rb")
        except FileNotFoundError as error:
            raise AvroReadNotFoundError(
                f"Failed to open container at {file_path}: file does not exist. "
                "Provide an existing Avro container file."
            ) from error
        except OSError as error:
            raise AvroReadIOError(
                f"Failed to open container at {file_path}: {error}."
            ) from error
        return cls(stream, source=str(file_path), options=options)

    def __enter__(self) -> "ContainerFileReader":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def __iter__(self) -> "ContainerFileReader":
        return self

    def __next__(self) -> Record:
        if self._records is None:
            self._records = self._iter_records()
        return next(self._records)

    @property
    def header(self) -> ContainerHeader:
        """Parsed container header."""
        return self._header

    @property
    def schema(self) -> Schema:
        """Parsed writer schema."""
        return self._header.schema

    @property
    def metadata(self) -> Mapping[str, bytes]:
        """Full header metadata map."""
        return self._header.metadata

    @property
    def codec(self) -> str:
        """Block codec name."""
        return self._header.codec

    @property
    def sync_marker(self) -> bytes:
        """16-byte sync marker shared by every block."""
        return self._header.sync_marker

    @property
    def source(self) -> str:
        """Path or name of the underlying stream."""
        return self._source

    @property
    def closed(self) -> bool:
        """Whether the underlying handle has been released."""
        return self._closed

    def blocks(self) -> Iterator[DataBlock]:
        """Yield the remaining data blocks without decoding records.

        Blocks are drawn from the same stream as record iteration.

        Raises:
            AvroReadFormatError: On a sync mismatch or a truncated block.
            AvroReadIOError: If the reader is closed or the read fails.
        """
        while True:
            block = self._read_block()
            if block is None:
                return
            yield block

    def summary(self) -> ContainerSummary:
        """Scan the remaining blocks and summarize the container."""
        block_count = 0
        record_count = 0
        for block in self.blocks():
            block_count += 1
            record_count += block.record_count
        return ContainerSummary(
            source=self._source,
            codec=self._header.codec,
            sync_marker=self._header.sync_marker.hex(),
            block_count=block_count,
            record_count=record_count,
            schema_json=self._header.schema_json,
            user_metadata=self._header.user_metadata,
        )

    def close(self) -> None:
        """Release the underlying stream; safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True
        self._stream.close()
        _LOGGER.debug("container_closed", source=self._source)

    def _iter_records(self) -> Iterator[Record]:
        for block in self.blocks():
            yield from self._decode_block(block)
        _LOGGER.info(
            "container_exhausted",
            source=self._source,
            blocks=self._blocks_read,
            records=self._records_read,
        )

    def _decode_block(self, block: DataBlock) -> Iterator[Any]:
        block_source = f"{self._source} block at offset {block.offset}"
        payload = io.BytesIO(block.payload)
        decoder = BinaryDecoder(payload, block_source, size=len(block.payload))
        for _ in range(block.record_count):
            record = self._datum_reader.read(decoder)
            self._records_read += 1
            yield record
        remaining = len(block.payload) - payload.tell()
        if remaining:
            raise AvroReadFormatError(
                f"Block payload in {block_source} has {remaining} undecoded bytes "
                f"after {block.record_count} records. The file may be corrupt."
            )

    def _read_block(self) -> DataBlock | None:
        if self._closed:
            raise AvroReadIOError(f"Cannot read from {self._source}: reader is closed.")
        offset = self._decoder.tell()
        record_count = self._decoder.read_optional_long()
        if record_count is None:
            return None
        byte_length = self._decoder.read_long()
        self._check_block_framing(offset, record_count, byte_length)
        payload = self._decoder.read_exact(byte_length)
        trailing_marker = self._decoder.read_exact(SYNC_MARKER_SIZE)
        if trailing_marker != self._header.sync_marker:
            raise AvroReadFormatError(
                f"Sync marker mismatch in {self._source} after block at offset {offset}: "
                f"expected {self._header.sync_marker.hex()}, found {trailing_marker.hex()}. "
                "The file is corrupt or misaligned."
            )
        self._blocks_read += 1
        _LOGGER.debug(
            "block_read",
            source=self._source,
            offset=offset,
            records=record_count,
            bytes=byte_length,
        )
        return DataBlock(record_count=record_count, payload=payload, offset=offset)

    def _check_block_framing(self, offset: int, record_count: int, byte_length: int) -> None:
        if record_count < 0 or byte_length < 0:
            raise AvroReadFormatError(
                f"Invalid block header in {self._source} at offset {offset}: "
                f"record count {record_count}, byte length {byte_length}."
            )
        if byte_length > self._options.max_block_bytes:
            raise AvroReadFormatError(
                f"Block at offset {offset} in {self._source} declares {byte_length} bytes, "
                f"above the {self._options.max_block_bytes} byte limit. "
                "Raise AVROREAD_MAX_BLOCK_BYTES if the file is trusted."
            )


def open_container(
    path: str | Path, options: ReaderOptions | None = None
) -> ContainerFileReader:
    """Open a container file; see ``ContainerFileReader.open``."""
    return ContainerFileReader.open(path, options)
