"""Core constants used across avroread modules.

This module centralizes container format constants and defaults.
Keeping values here avoids magic literals in decoding logic.
"""

from __future__ import annotations

CONTAINER_MAGIC = b"Obj\x01"
SYNC_MARKER_SIZE = 16
SCHEMA_METADATA_KEY = "avro.schema"
CODEC_METADATA_KEY = "avro.codec"
RESERVED_METADATA_PREFIX = "avro."
NULL_CODEC = "null"
SUPPORTED_CODECS = (NULL_CODEC,)
MAX_VARINT_BYTES = 10
INT_MIN_VALUE = -(2**31)
INT_MAX_VALUE = 2**31 - 1
DEFAULT_MAX_BLOCK_BYTES = 64 * 1024 * 1024
DEFAULT_MAX_COLLECTION_ITEMS = 10_000_000
DEFAULT_OUTPUT_FORMAT = "repr"
SUPPORTED_OUTPUT_FORMATS = ("repr", "tsv", "json")
DEFAULT_LOG_LEVEL = "warning"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
TSV_NULL_TOKEN = "\\N"
