"""Logical type conversions for decoded values.

Unknown logical types, or annotations on an unexpected underlying
type, fall back to the raw underlying value. Values outside the
representable range are format errors.
"""

from __future__ import annotations

import datetime
import decimal
from typing import Any, Callable

from container.schema_types import FixedSchema, PrimitiveSchema
from core.errors import AvroReadFormatError

_EPOCH_DATE = datetime.date(1970, 1, 1)
_EPOCH_DATETIME = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
_MIDNIGHT = datetime.datetime(1970, 1, 1)
_MILLIS_PER_DAY = 86_400_000


def _to_date(value: int, _: Any) -> datetime.date:
    return _EPOCH_DATE + datetime.timedelta(days=value)


def _to_time_millis(value: int, _: Any) -> datetime.time:
    return _time_of_day(value, _MILLIS_PER_DAY, datetime.timedelta(milliseconds=value))


def _to_time_micros(value: int, _: Any) -> datetime.time:
    return _time_of_day(value, _MILLIS_PER_DAY * 1000, datetime.timedelta(microseconds=value))


def _time_of_day(value: int, units_per_day: int, offset: datetime.timedelta) -> datetime.time:
    if not 0 <= value < units_per_day:
        raise ValueError(f"{value} is outside one day of {units_per_day} units")
    return (_MIDNIGHT + offset).time()


def _to_timestamp_millis(value: int, _: Any) -> datetime.datetime:
    return _EPOCH_DATETIME + datetime.timedelta(milliseconds=value)


def _to_timestamp_micros(value: int, _: Any) -> datetime.datetime:
    return _EPOCH_DATETIME + datetime.timedelta(microseconds=value)


def _to_decimal(value: bytes, schema: PrimitiveSchema | FixedSchema) -> decimal.Decimal:
    scale = schema.properties.get("scale", 0)
    unscaled = int.from_bytes(value, byteorder="big", signed=True)
    return decimal.Decimal(unscaled).scaleb(-scale)


_CONVERTERS: dict[tuple[str, str], Callable[[Any, Any], Any]] = {
    ("date", "int"): _to_date,
    ("time-millis", "int"): _to_time_millis,
    ("time-micros", "long"): _to_time_micros,
    ("timestamp-millis", "long"): _to_timestamp_millis,
    ("timestamp-micros", "long"): _to_timestamp_micros,
    ("decimal", "bytes"): _to_decimal,
    ("decimal", "fixed"): _to_decimal,
}


def convert_logical_value(schema: PrimitiveSchema | FixedSchema, value: Any) -> Any:
    """Convert a decoded underlying value according to its logical type.

    Args:
        schema: Annotated primitive or fixed schema.
        value: Raw decoded value.

    Returns:
        Converted value, or ``value`` unchanged when no conversion applies.

    Raises:
        AvroReadFormatError: If the value cannot be represented, such as a
            timestamp beyond the supported datetime range.
    """
    if schema.logical_type is None:
        return value
    converter = _CONVERTERS.get((schema.logical_type, schema.type_name))
    if converter is None:
        return value
    try:
        return converter(value, schema)
    except (OverflowError, ValueError) as error:
        raise AvroReadFormatError(
            f"Cannot convert {value!r} to logical type '{schema.logical_type}': {error}. "
            "Set AVROREAD_LOGICAL_TYPES=false to read raw values."
        ) from error
