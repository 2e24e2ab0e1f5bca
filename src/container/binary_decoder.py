"""Avro binary encoding primitives.

This module reads zig-zag varints, IEEE floats, length-prefixed bytes
and strings from a binary stream. Short reads are format errors.
"""

from __future__ import annotations

import struct
from typing import BinaryIO

from core.constants import INT_MAX_VALUE, INT_MIN_VALUE, MAX_VARINT_BYTES
from core.errors import AvroReadFormatError, AvroReadIOError

_FLOAT_STRUCT = struct.Struct("<f")
_DOUBLE_STRUCT = struct.Struct("<d")


class BinaryDecoder:
    """Sequential reader for Avro binary-encoded values."""

    def __init__(
        self, stream: BinaryIO, source: str = "<stream>", size: int | None = None
    ) -> None:
        """Create a decoder over a readable binary stream.

        Args:
            stream: Binary stream positioned at the first value.
            source: Human-readable origin used in error messages.
            size: Total stream length when known, such as a block payload.
        """
        self._stream = stream
        self._source = source
        self._size = size

    @property
    def source(self) -> str:
        """Human-readable origin used in error messages."""
        return self._source

    def tell(self) -> int:
        """Return the current stream offset."""
        return self._stream.tell()

    def remaining(self) -> int | None:
        """Return unread bytes when the stream size is known."""
        if self._size is None:
            return None
        return self._size - self.tell()

    def read_exact(self, size: int) -> bytes:
        """Read exactly ``size`` bytes.

        Args:
            size: Number of bytes to read.

        Returns:
            The bytes read.

        Raises:
            AvroReadFormatError: If the stream ends first.
            AvroReadIOError: If the stream read fails.
        """
        if size == 0:
            return b""
        offset = self.tell()
        data = self._read(size)
        if len(data) != size:
            raise AvroReadFormatError(
                f"Unexpected end of data in {self._source} at offset {offset}: "
                f"expected {size} bytes, found {len(data)}. The file may be truncated."
            )
        return data

    def read_optional_long(self) -> int | None:
        """Read a long, or return None at a clean end of stream.

        Raises:
            AvroReadFormatError: If the stream ends inside the varint.
        """
        first = self._read(1)
        if not first:
            return None
        return self._finish_long(first[0])

    def read_long(self) -> int:
        """Read a zig-zag varint long."""
        return self._finish_long(self.read_exact(1)[0])

    def read_int(self) -> int:
        """Read a zig-zag varint constrained to 32 bits."""
        offset = self.tell()
        value = self.read_long()
        if not INT_MIN_VALUE <= value <= INT_MAX_VALUE:
            raise AvroReadFormatError(
                f"Invalid int in {self._source} at offset {offset}: "
                f"{value} does not fit in 32 bits."
            )
        return value

    def read_null(self) -> None:
        """Read a null value, which occupies no bytes."""
        return None

    def read_boolean(self) -> bool:
        """Read a single-byte boolean."""
        offset = self.tell()
        value = self.read_exact(1)[0]
        if value not in (0, 1):
            raise AvroReadFormatError(
                f"Invalid boolean byte {value:#04x} in {self._source} at offset {offset}."
            )
        return value == 1

    def read_float(self) -> float:
        """Read a 4-byte little-endian IEEE float."""
        return _FLOAT_STRUCT.unpack(self.read_exact(4))[0]

    def read_double(self) -> float:
        """Read an 8-byte little-endian IEEE double."""
        return _DOUBLE_STRUCT.unpack(self.read_exact(8))[0]

    def read_bytes(self) -> bytes:
        """Read a long length followed by that many bytes."""
        return self.read_exact(self.read_length())

    def read_string(self) -> str:
        """Read a length-prefixed UTF-8 string."""
        offset = self.tell()
        data = self.read_bytes()
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as error:
            raise AvroReadFormatError(
                f"Invalid UTF-8 string in {self._source} at offset {offset}: {error.reason}."
            ) from error

    def read_fixed(self, size: int) -> bytes:
        """Read a fixed-size byte sequence."""
        return self.read_exact(size)

    def read_length(self) -> int:
        """Read a non-negative long used as a byte or item length."""
        offset = self.tell()
        length = self.read_long()
        if length < 0:
            raise AvroReadFormatError(
                f"Invalid negative length {length} in {self._source} at offset {offset}."
            )
        return length

    def read_block_count(self) -> int:
        """Read an array/map block item count.

        A negative count is followed by the block byte size, which is
        skipped; the absolute count is returned.
        """
        count = self.read_long()
        if count < 0:
            self.read_long()
            count = -count
        return count

    def _finish_long(self, first_byte: int) -> int:
        offset = self.tell() - 1
        current = first_byte
        accumulator = current & 0x7F
        shift = 7
        consumed = 1
        while current & 0x80:
            if consumed >= MAX_VARINT_BYTES:
                raise AvroReadFormatError(
                    f"Varint longer than {MAX_VARINT_BYTES} bytes in {self._source} "
                    f"at offset {offset}."
                )
            current = self.read_exact(1)[0]
            accumulator |= (current & 0x7F) << shift
            shift += 7
            consumed += 1
        return (accumulator >> 1) ^ -(accumulator & 1)

    def _read(self, size: int) -> bytes:
        try:
            return self._stream.read(size)
        except OSError as error:
            raise AvroReadIOError(f"Failed to read {self._source}: {error}.") from error
