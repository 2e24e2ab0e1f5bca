"""Schema-driven datum decoding.

This module decodes one value of any Avro type from a binary decoder
using the writer schema, recursing through complex types.
"""

from __future__ import annotations

from typing import Any

from container.binary_decoder import BinaryDecoder
from container.logical_types import convert_logical_value
from container.schema_types import (
    ArraySchema,
    EnumSchema,
    FixedSchema,
    MapSchema,
    PrimitiveSchema,
    RecordSchema,
    Schema,
    UnionSchema,
)
from core.constants import DEFAULT_MAX_COLLECTION_ITEMS
from core.errors import AvroReadFormatError

_PRIMITIVE_MIN_SIZES = {
    "null": 0,
    "boolean": 1,
    "int": 1,
    "long": 1,
    "float": 4,
    "double": 8,
    "bytes": 1,
    "string": 1,
}

_PRIMITIVE_READERS = {
    "null": BinaryDecoder.read_null,
    "boolean": BinaryDecoder.read_boolean,
    "int": BinaryDecoder.read_int,
    "long": BinaryDecoder.read_long,
    "float": BinaryDecoder.read_float,
    "double": BinaryDecoder.read_double,
    "bytes": BinaryDecoder.read_bytes,
    "string": BinaryDecoder.read_string,
}


class DatumReader:
    """Decode values shaped by one writer schema."""

    def __init__(
        self,
        writer_schema: Schema,
        decode_logical_types: bool = True,
        max_collection_items: int = DEFAULT_MAX_COLLECTION_ITEMS,
    ) -> None:
        self._writer_schema = writer_schema
        self._decode_logical_types = decode_logical_types
        self._max_collection_items = max_collection_items
        self._min_sizes: dict[int, int] = {}

    @property
    def writer_schema(self) -> Schema:
        """Schema used to decode every datum."""
        return self._writer_schema

    def read(self, decoder: BinaryDecoder) -> Any:
        """Decode the next datum from ``decoder``."""
        return self._read_value(self._writer_schema, decoder)

    def _read_value(self, schema: Schema, decoder: BinaryDecoder) -> Any:
        if isinstance(schema, PrimitiveSchema):
            value = _PRIMITIVE_READERS[schema.type_name](decoder)
            return self._convert(schema, value)
        if isinstance(schema, RecordSchema):
            return {
                record_field.name: self._read_value(record_field.schema, decoder)
                for record_field in schema.fields
            }
        if isinstance(schema, UnionSchema):
            return self._read_union(schema, decoder)
        if isinstance(schema, ArraySchema):
            return self._read_array(schema, decoder)
        if isinstance(schema, MapSchema):
            return self._read_map(schema, decoder)
        if isinstance(schema, EnumSchema):
            return _read_enum(schema, decoder)
        if isinstance(schema, FixedSchema):
            return self._convert(schema, decoder.read_fixed(schema.size))
        raise AvroReadFormatError(f"Cannot decode unsupported schema node {schema!r}.")

    def _read_union(self, schema: UnionSchema, decoder: BinaryDecoder) -> Any:
        offset = decoder.tell()
        index = decoder.read_long()
        if not 0 <= index < len(schema.branches):
            raise AvroReadFormatError(
                f"Invalid union branch index {index} at offset {offset}: "
                f"union has {len(schema.branches)} branches."
            )
        return self._read_value(schema.branches[index], decoder)

    def _read_array(self, schema: ArraySchema, decoder: BinaryDecoder) -> list[Any]:
        items: list[Any] = []
        count = self._read_checked_count(schema.items, decoder, 0)
        while count:
            for _ in range(count):
                items.append(self._read_value(schema.items, decoder))
            count = self._read_checked_count(schema.items, decoder, len(items))
        return items

    def _read_map(self, schema: MapSchema, decoder: BinaryDecoder) -> dict[str, Any]:
        entries: dict[str, Any] = {}
        decoded = 0
        count = self._read_checked_count(schema.values, decoder, decoded, key_bytes=1)
        while count:
            for _ in range(count):
                key = decoder.read_string()
                entries[key] = self._read_value(schema.values, decoder)
            decoded += count
            count = self._read_checked_count(schema.values, decoder, decoded, key_bytes=1)
        return entries

    def _read_checked_count(
        self, item_schema: Schema, decoder: BinaryDecoder, decoded: int, key_bytes: int = 0
    ) -> int:
        offset = decoder.tell()
        count = decoder.read_block_count()
        if decoded + count > self._max_collection_items:
            raise AvroReadFormatError(
                f"Collection block in {decoder.source} at offset {offset} declares {count} items, "
                f"above the {self._max_collection_items} item limit. "
                "Raise AVROREAD_MAX_COLLECTION_ITEMS if the file is trusted."
            )
        item_size = key_bytes + self._min_size(item_schema)
        remaining = decoder.remaining()
        if item_size and remaining is not None and count * item_size > remaining:
            raise AvroReadFormatError(
                f"Collection block in {decoder.source} at offset {offset} declares {count} items "
                f"but only {remaining} payload bytes remain. The file may be corrupt."
            )
        return count

    def _min_size(self, schema: Schema) -> int:
        key = id(schema)
        if key not in self._min_sizes:
            self._min_sizes[key] = min_encoded_size(schema)
        return self._min_sizes[key]

    def _convert(self, schema: PrimitiveSchema | FixedSchema, value: Any) -> Any:
        if not self._decode_logical_types:
            return value
        return convert_logical_value(schema, value)


def min_encoded_size(schema: Schema, visiting: frozenset[int] = frozenset()) -> int:
    """Return the fewest bytes any value of ``schema`` can encode to."""
    if isinstance(schema, PrimitiveSchema):
        return _PRIMITIVE_MIN_SIZES[schema.type_name]
    if isinstance(schema, FixedSchema):
        return schema.size
    if isinstance(schema, RecordSchema):
        if id(schema) in visiting:
            return 0
        inner = visiting | {id(schema)}
        return sum(min_encoded_size(field.schema, inner) for field in schema.fields)
    return 1


def _read_enum(schema: EnumSchema, decoder: BinaryDecoder) -> str:
    offset = decoder.tell()
    index = decoder.read_long()
    if not 0 <= index < len(schema.symbols):
        raise AvroReadFormatError(
            f"Invalid enum index {index} for '{schema.fullname}' at offset {offset}: "
            f"enum has {len(schema.symbols)} symbols."
        )
    return schema.symbols[index]
