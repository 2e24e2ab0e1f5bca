"""Writer-schema JSON parsing.

This module turns the schema text embedded in a container header into
the typed schema model, resolving named types and namespaces.
"""

from __future__ import annotations

import json
import re
from typing import Any

from container.schema_types import (
    PRIMITIVE_TYPES,
    ArraySchema,
    EnumSchema,
    FieldSchema,
    FixedSchema,
    MapSchema,
    PrimitiveSchema,
    RecordSchema,
    Schema,
    UnionSchema,
)
from core.errors import AvroReadSchemaError

_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_NAMED_TYPES = ("record", "error", "enum", "fixed")
_RESERVED_ATTRIBUTES = ("type", "logicalType")


def parse_schema_json(schema_text: str) -> Schema:
    """Parse writer-schema JSON text.

    Args:
        schema_text: JSON document from the ``avro.schema`` metadata entry.

    Returns:
        Parsed schema model.

    Raises:
        AvroReadSchemaError: If the text is not valid JSON or not a valid schema.
    """
    try:
        schema_json = json.loads(schema_text)
    except json.JSONDecodeError as error:
        raise AvroReadSchemaError(
            f"Failed to parse writer schema JSON: {error.msg} at position {error.pos}."
        ) from error
    return SchemaParser().parse(schema_json)


class SchemaParser:
    """Stateful parser holding the named-type registry for one schema."""

    def __init__(self) -> None:
        self._named: dict[str, Schema] = {}

    def parse(self, schema_json: Any, namespace: str | None = None) -> Schema:
        """Parse one JSON schema node.

        Args:
            schema_json: Decoded JSON value (string, object or array).
            namespace: Enclosing namespace for relative names.

        Returns:
            Parsed schema node.
        """
        if isinstance(schema_json, str):
            return self._parse_reference(schema_json, namespace)
        if isinstance(schema_json, list):
            return self._parse_union(schema_json, namespace)
        if isinstance(schema_json, dict):
            return self._parse_object(schema_json, namespace)
        raise AvroReadSchemaError(
            f"Invalid schema node {schema_json!r}: expected a type name, object or array."
        )

    def _parse_reference(self, type_name: str, namespace: str | None) -> Schema:
        if type_name in PRIMITIVE_TYPES:
            return PrimitiveSchema(type_name)
        fullname = _qualify(type_name, namespace)
        for candidate in (fullname, type_name):
            if candidate in self._named:
                return self._named[candidate]
        raise AvroReadSchemaError(
            f"Unknown type name '{type_name}' in writer schema. "
            "Named types must be defined before they are referenced."
        )

    def _parse_union(self, branches_json: list[Any], namespace: str | None) -> UnionSchema:
        branches: list[Schema] = []
        seen_keys: set[str] = set()
        for branch_json in branches_json:
            branch = self.parse(branch_json, namespace)
            if isinstance(branch, UnionSchema):
                raise AvroReadSchemaError("Invalid union in writer schema: unions may not nest.")
            key = _branch_key(branch)
            if key in seen_keys:
                raise AvroReadSchemaError(
                    f"Invalid union in writer schema: duplicate branch '{key}'."
                )
            seen_keys.add(key)
            branches.append(branch)
        return UnionSchema(branches=tuple(branches))

    def _parse_object(self, schema_json: dict[str, Any], namespace: str | None) -> Schema:
        type_value = schema_json.get("type")
        if type_value is None:
            raise AvroReadSchemaError(
                f"Invalid schema object {schema_json!r}: missing 'type' attribute."
            )
        if isinstance(type_value, (dict, list)):
            return self.parse(type_value, namespace)
        if not isinstance(type_value, str):
            raise AvroReadSchemaError(f"Invalid 'type' attribute {type_value!r} in writer schema.")
        if type_value in PRIMITIVE_TYPES:
            if type_value == "bytes":
                _validate_decimal(type_value, schema_json)
            return PrimitiveSchema(
                type_value,
                logical_type=schema_json.get("logicalType"),
                properties=_extra_properties(schema_json),
            )
        if type_value in _NAMED_TYPES:
            return self._parse_named(type_value, schema_json, namespace)
        if type_value == "array":
            return ArraySchema(items=self.parse(_require(schema_json, "items"), namespace))
        if type_value == "map":
            return MapSchema(values=self.parse(_require(schema_json, "values"), namespace))
        return self._parse_reference(type_value, namespace)

    def _parse_named(
        self, type_value: str, schema_json: dict[str, Any], namespace: str | None
    ) -> Schema:
        fullname = _fullname(schema_json, namespace)
        if fullname in self._named:
            raise AvroReadSchemaError(
                f"Duplicate named type '{fullname}' in writer schema."
            )
        inner_namespace = fullname.rpartition(".")[0] or None
        if type_value == "fixed":
            return self._register(fullname, _parse_fixed(fullname, schema_json))
        if type_value == "enum":
            return self._register(fullname, _parse_enum(fullname, schema_json))
        record = RecordSchema(fullname=fullname, type_name="record")
        self._register(fullname, record)
        record.fields = self._parse_fields(fullname, schema_json, inner_namespace)
        return record

    def _parse_fields(
        self, fullname: str, schema_json: dict[str, Any], namespace: str | None
    ) -> list[FieldSchema]:
        fields_json = _require(schema_json, "fields")
        if not isinstance(fields_json, list):
            raise AvroReadSchemaError(f"Invalid fields for record '{fullname}': expected a list.")
        fields: list[FieldSchema] = []
        seen_names: set[str] = set()
        for field_json in fields_json:
            if not isinstance(field_json, dict):
                raise AvroReadSchemaError(
                    f"Invalid field {field_json!r} in record '{fullname}': expected an object."
                )
            name = _validate_name(_require(field_json, "name"))
            if name in seen_names:
                raise AvroReadSchemaError(f"Duplicate field '{name}' in record '{fullname}'.")
            seen_names.add(name)
            fields.append(
                FieldSchema(
                    name=name,
                    schema=self.parse(_require(field_json, "type"), namespace),
                    has_default="default" in field_json,
                    default=field_json.get("default"),
                )
            )
        return fields

    def _register(self, fullname: str, schema: Schema) -> Schema:
        self._named[fullname] = schema
        return schema


def _parse_fixed(fullname: str, schema_json: dict[str, Any]) -> FixedSchema:
    size = _require(schema_json, "size")
    if not _is_int(size) or size < 0:
        raise AvroReadSchemaError(
            f"Invalid size {size!r} for fixed '{fullname}': expected a non-negative integer."
        )
    _validate_decimal(fullname, schema_json)
    return FixedSchema(
        fullname=fullname,
        size=size,
        logical_type=schema_json.get("logicalType"),
        properties=_extra_properties(schema_json),
    )


def _parse_enum(fullname: str, schema_json: dict[str, Any]) -> EnumSchema:
    symbols = _require(schema_json, "symbols")
    if not isinstance(symbols, list) or not all(isinstance(symbol, str) for symbol in symbols):
        raise AvroReadSchemaError(
            f"Invalid symbols for enum '{fullname}': expected a list of strings."
        )
    for symbol in symbols:
        _validate_name(symbol)
    if len(set(symbols)) != len(symbols):
        raise AvroReadSchemaError(f"Duplicate symbol in enum '{fullname}'.")
    return EnumSchema(fullname=fullname, symbols=tuple(symbols), default=schema_json.get("default"))


def _validate_decimal(owner: str, schema_json: dict[str, Any]) -> None:
    if schema_json.get("logicalType") != "decimal":
        return
    precision = schema_json.get("precision")
    scale = schema_json.get("scale", 0)
    if not _is_int(precision) or precision <= 0:
        raise AvroReadSchemaError(
            f"Invalid decimal precision {precision!r} on '{owner}': "
            "expected a positive integer."
        )
    if not _is_int(scale) or not 0 <= scale <= precision:
        raise AvroReadSchemaError(
            f"Invalid decimal scale {scale!r} on '{owner}': "
            f"expected an integer between 0 and the precision {precision}."
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _fullname(schema_json: dict[str, Any], namespace: str | None) -> str:
    name = _require(schema_json, "name")
    if not isinstance(name, str):
        raise AvroReadSchemaError(f"Invalid name {name!r} in writer schema.")
    if "." in name:
        fullname = name
    else:
        own_namespace = schema_json.get("namespace", namespace)
        fullname = _qualify(name, own_namespace)
    for part in fullname.split("."):
        _validate_name(part)
    return fullname


def _qualify(name: str, namespace: str | None) -> str:
    if "." in name or not namespace:
        return name
    return f"{namespace}.{name}"


def _validate_name(name: Any) -> str:
    if not isinstance(name, str) or not _NAME_PATTERN.match(name):
        raise AvroReadSchemaError(
            f"Invalid name {name!r} in writer schema: names must match "
            "[A-Za-z_][A-Za-z0-9_]*."
        )
    return name


def _require(schema_json: dict[str, Any], attribute: str) -> Any:
    if attribute not in schema_json:
        raise AvroReadSchemaError(
            f"Invalid schema object {schema_json!r}: missing required '{attribute}' attribute."
        )
    return schema_json[attribute]


def _extra_properties(schema_json: dict[str, Any]) -> dict[str, Any]:
    return {
        key: value
        for key, value in schema_json.items()
        if key not in _RESERVED_ATTRIBUTES and key not in ("name", "namespace", "size")
    }


def _branch_key(branch: Schema) -> str:
    if isinstance(branch, (RecordSchema, EnumSchema, FixedSchema)):
        return branch.fullname
    return branch.type_name
