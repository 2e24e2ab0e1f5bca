"""Text rendering for decoded records.

This module formats records as one output line each: the Python
mapping repr, tab-separated top-level values, or a JSON object.
"""

from __future__ import annotations

import datetime
import decimal
import json
from typing import Any, Sequence

from core.constants import SUPPORTED_OUTPUT_FORMATS, TSV_NULL_TOKEN
from core.errors import AvroReadConfigError
from core.types import Record

_TSV_ESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"}


def format_record(
    record: Record,
    output_format: str,
    fields: Sequence[str] | None = None,
) -> str:
    """Render one decoded record as a single line.

    Args:
        record: Decoded record or top-level value.
        output_format: One of ``repr``, ``tsv`` or ``json``.
        fields: Optional top-level field selection for record values.

    Returns:
        Rendered line without a trailing newline.

    Raises:
        AvroReadConfigError: If the format or a selected field is unknown.
    """
    selected = select_fields(record, fields) if fields else record
    if output_format == "repr":
        return str(selected)
    if output_format == "tsv":
        return _format_tsv(selected)
    if output_format == "json":
        return json.dumps(selected, default=_json_default, ensure_ascii=False)
    raise AvroReadConfigError(
        f"Unsupported output format '{output_format}'. "
        f"Choose one of {SUPPORTED_OUTPUT_FORMATS}."
    )


def select_fields(record: Record, fields: Sequence[str]) -> dict[str, Any]:
    """Project a record onto the given top-level fields, in order.

    Raises:
        AvroReadConfigError: If the record is not a mapping or lacks a field.
    """
    if not isinstance(record, dict):
        raise AvroReadConfigError(
            "Field selection requires a record writer schema; "
            f"got a top-level {type(record).__name__} value."
        )
    missing = [name for name in fields if name not in record]
    if missing:
        raise AvroReadConfigError(
            f"Unknown field(s) {missing}. Available fields: {list(record)}."
        )
    return {name: record[name] for name in fields}


def _format_tsv(record: Record) -> str:
    values = record.values() if isinstance(record, dict) else (record,)
    return "\t".join(_format_tsv_value(value) for value in values)


def _format_tsv_value(value: Any) -> str:
    if value is None:
        return TSV_NULL_TOKEN
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, bytes)):
        text = json.dumps(value, default=_json_default, ensure_ascii=False)
    elif isinstance(value, (datetime.date, datetime.time)):
        text = value.isoformat()
    else:
        text = str(value)
    return "".join(_TSV_ESCAPES.get(char, char) for char in text)


def _json_default(value: Any) -> Any:
    # Avro's JSON encoding maps bytes to code points 0-255.
    if isinstance(value, bytes):
        return value.decode("latin-1")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, decimal.Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
