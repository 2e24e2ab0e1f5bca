"""Parsed writer-schema model.

Named schemas are mutable so recursive records can reference
themselves before their fields are parsed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

PRIMITIVE_TYPES = ("null", "boolean", "int", "long", "float", "double", "bytes", "string")


@dataclass(frozen=True)
class PrimitiveSchema:
    """Primitive Avro type with an optional logical type annotation."""

    type_name: str
    logical_type: str | None = None
    properties: Mapping[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class FixedSchema:
    """Named fixed-size byte sequence."""

    fullname: str
    size: int
    logical_type: str | None = None
    properties: Mapping[str, Any] = field(default_factory=dict)
    type_name: str = "fixed"


@dataclass(eq=False)
class EnumSchema:
    """Named enumeration of string symbols."""

    fullname: str
    symbols: tuple[str, ...]
    default: str | None = None
    type_name: str = "enum"


@dataclass(frozen=True)
class ArraySchema:
    """Array of items sharing one schema."""

    items: "Schema"
    type_name: str = "array"


@dataclass(frozen=True)
class MapSchema:
    """String-keyed map of values sharing one schema."""

    values: "Schema"
    type_name: str = "map"


@dataclass(frozen=True)
class UnionSchema:
    """Ordered choice between branch schemas."""

    branches: tuple["Schema", ...]
    type_name: str = "union"


@dataclass(eq=False)
class FieldSchema:
    """One record field."""

    name: str
    schema: "Schema" = field(repr=False)
    has_default: bool = False
    default: Any = None


@dataclass(eq=False)
class RecordSchema:
    """Named record; ``fields`` is filled after registration."""

    fullname: str
    fields: list[FieldSchema] = field(default_factory=list, repr=False)
    type_name: str = "record"

    def field_names(self) -> tuple[str, ...]:
        """Return field names in declaration order."""
        return tuple(record_field.name for record_field in self.fields)


Schema = Union[
    PrimitiveSchema,
    FixedSchema,
    EnumSchema,
    ArraySchema,
    MapSchema,
    UnionSchema,
    RecordSchema,
]
