"""Unit tests for writer-schema parsing."""

from __future__ import annotations

import json

import pytest

from container.schema_parser import parse_schema_json
from container.schema_types import (
    ArraySchema,
    EnumSchema,
    FixedSchema,
    MapSchema,
    PrimitiveSchema,
    RecordSchema,
    UnionSchema,
)
from core.errors import AvroReadSchemaError


def test_parse_primitive_name_and_object() -> None:
    """Primitives may be written as names or as type objects."""
    by_name = parse_schema_json('"long"')
    by_object = parse_schema_json('{"type": "int", "logicalType": "date"}')

    assert by_name == PrimitiveSchema("long") and by_object.logical_type == "date"


def test_parse_record_resolves_namespaced_references() -> None:
    """Relative names should inherit the enclosing namespace."""
    schema = parse_schema_json(
        json.dumps(
            {
                "type": "record",
                "name": "Order",
                "namespace": "shop",
                "fields": [
                    {
                        "name": "status",
                        "type": {"type": "enum", "name": "Status", "symbols": ["NEW", "DONE"]},
                    },
                    {"name": "previous", "type": ["null", "Status"]},
                    {"name": "other", "type": ["null", "shop.Status"]},
                ],
            }
        )
    )

    status = schema.fields[0].schema
    previous = schema.fields[1].schema
    other = schema.fields[2].schema
    assert (
        isinstance(schema, RecordSchema)
        and isinstance(status, EnumSchema)
        and status.fullname == "shop.Status"
        and previous.branches[1] is status
        and other.branches[1] is status
    )


def test_parse_recursive_record() -> None:
    """A record may reference itself through a union."""
    schema = parse_schema_json(
        json.dumps(
            {
                "type": "record",
                "name": "Node",
                "fields": [
                    {"name": "value", "type": "int"},
                    {"name": "next", "type": ["null", "Node"]},
                ],
            }
        )
    )

    assert schema.fields[1].schema.branches[1] is schema


def test_parse_complex_types() -> None:
    """Arrays, maps and fixed types should parse into their models."""
    schema = parse_schema_json(
        json.dumps(
            {
                "type": "record",
                "name": "Bag",
                "fields": [
                    {"name": "tags", "type": {"type": "array", "items": "string"}},
                    {"name": "counts", "type": {"type": "map", "values": "long"}},
                    {"name": "digest", "type": {"type": "fixed", "name": "MD5", "size": 16}},
                ],
            }
        )
    )

    tags, counts, digest = (record_field.schema for record_field in schema.fields)
    assert (
        isinstance(tags, ArraySchema)
        and isinstance(counts, MapSchema)
        and isinstance(digest, FixedSchema)
        and digest.size == 16
        and schema.field_names() == ("tags", "counts", "digest")
    )


def test_parse_union_branches() -> None:
    """A JSON array should parse as a union."""
    schema = parse_schema_json('["null", "string"]')

    assert isinstance(schema, UnionSchema) and len(schema.branches) == 2


@pytest.mark.parametrize(
    "schema_text",
    [
        "{not json",
        '"Missing"',
        "42",
        '{"name": "NoType"}',
        '{"type": "record", "name": "R"}',
        '{"type": "record", "name": "9bad", "fields": []}',
        '{"type": "enum", "name": "E", "symbols": ["A", "A"]}',
        '{"type": "fixed", "name": "F", "size": -1}',
        '["null", "null"]',
        '["null", ["int"]]',
        '{"type": "record", "name": "R", "fields": ['
        '{"name": "a", "type": "int"}, {"name": "a", "type": "int"}]}',
        '["int", {"type": "fixed", "name": "F", "size": 1}, '
        '{"type": "fixed", "name": "F", "size": 2}]',
    ],
)
def test_parse_rejects_invalid_schemas(schema_text: str) -> None:
    """Malformed schemas should raise schema errors."""
    with pytest.raises(AvroReadSchemaError):
        parse_schema_json(schema_text)

    assert True


@pytest.mark.parametrize(
    "schema_text",
    [
        '{"type": "bytes", "logicalType": "decimal", "precision": 4, "scale": "2"}',
        '{"type": "bytes", "logicalType": "decimal", "precision": 4, "scale": -1}',
        '{"type": "bytes", "logicalType": "decimal", "precision": 2, "scale": 3}',
        '{"type": "bytes", "logicalType": "decimal", "scale": 1}',
        '{"type": "bytes", "logicalType": "decimal", "precision": 0}',
        '{"type": "bytes", "logicalType": "decimal", "precision": true}',
        '{"type": "fixed", "name": "Money", "size": 4, '
        '"logicalType": "decimal", "precision": 6, "scale": 2.5}',
    ],
)
def test_parse_rejects_invalid_decimal_attributes(schema_text: str) -> None:
    """Decimal precision and scale should be validated when the schema loads."""
    with pytest.raises(AvroReadSchemaError, match="Invalid decimal"):
        parse_schema_json(schema_text)

    assert True


def test_parse_accepts_decimal_with_default_scale() -> None:
    """A decimal without a scale should parse with the precision attached."""
    schema = parse_schema_json('{"type": "bytes", "logicalType": "decimal", "precision": 9}')

    assert schema.logical_type == "decimal" and schema.properties["precision"] == 9
