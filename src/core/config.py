"""Runtime configuration model for avroread.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_BLOCK_BYTES,
    DEFAULT_MAX_COLLECTION_ITEMS,
    DEFAULT_OUTPUT_FORMAT,
    SUPPORTED_LOG_LEVELS,
    SUPPORTED_OUTPUT_FORMATS,
)
from core.errors import AvroReadConfigError
from core.types import ReaderOptions

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class AvroReadConfig:
    """Validated runtime configuration.

    Attributes:
        output_format: Default record output format for the CLI.
        max_block_bytes: Upper bound on a single block payload length.
        max_collection_items: Upper bound on items in one array or map value.
        decode_logical_types: Whether logical types become Python values.
        log_level: structlog filtering level name.
    """

    output_format: str
    max_block_bytes: int
    max_collection_items: int
    decode_logical_types: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "AvroReadConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            AvroReadConfigError: If environment values are invalid.
        """
        output_format = os.getenv("AVROREAD_OUTPUT_FORMAT", DEFAULT_OUTPUT_FORMAT)
        max_block_bytes_value = os.getenv("AVROREAD_MAX_BLOCK_BYTES", str(DEFAULT_MAX_BLOCK_BYTES))
        max_items_value = os.getenv(
            "AVROREAD_MAX_COLLECTION_ITEMS", str(DEFAULT_MAX_COLLECTION_ITEMS)
        )
        logical_types_value = os.getenv("AVROREAD_LOGICAL_TYPES", "true")
        log_level = os.getenv("AVROREAD_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        return cls(
            output_format=_parse_choice(
                "AVROREAD_OUTPUT_FORMAT", output_format, SUPPORTED_OUTPUT_FORMATS
            ),
            max_block_bytes=_parse_positive_int(
                "AVROREAD_MAX_BLOCK_BYTES", max_block_bytes_value, "byte count"
            ),
            max_collection_items=_parse_positive_int(
                "AVROREAD_MAX_COLLECTION_ITEMS", max_items_value, "item count"
            ),
            decode_logical_types=_parse_bool("AVROREAD_LOGICAL_TYPES", logical_types_value),
            log_level=_parse_choice("AVROREAD_LOG_LEVEL", log_level, SUPPORTED_LOG_LEVELS),
        )

    def reader_options(self) -> ReaderOptions:
        """Return container reader options derived from this config."""
        return ReaderOptions(
            max_block_bytes=self.max_block_bytes,
            max_collection_items=self.max_collection_items,
            decode_logical_types=self.decode_logical_types,
        )


def _parse_positive_int(variable_name: str, raw_value: str, unit: str) -> int:
    """Parse a positive integer limit from the environment.

    Args:
        variable_name: Environment variable name for error messages.
        raw_value: Raw string from environment.
        unit: Human description of the limit, such as ``byte count``.

    Returns:
        Parsed positive integer.

    Raises:
        AvroReadConfigError: If value is not a positive integer.
    """
    try:
        parsed_value = int(raw_value)
    except ValueError as error:
        raise AvroReadConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a positive {unit}."
        ) from error
    if parsed_value <= 0:
        raise AvroReadConfigError(
            f"Invalid {variable_name} value: "
            f"expected a positive {unit}, got {parsed_value}."
        )
    return parsed_value


def _parse_bool(variable_name: str, raw_value: str) -> bool:
    """Parse a boolean flag such as ``true`` or ``0``."""
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise AvroReadConfigError(
        f"Invalid {variable_name} value: expected one of "
        f"{_TRUE_VALUES + _FALSE_VALUES}, got '{raw_value}'."
    )


def _parse_choice(variable_name: str, raw_value: str, choices: tuple[str, ...]) -> str:
    """Validate an enumerated setting, case-insensitively."""
    normalized = raw_value.strip().lower()
    if normalized not in choices:
        raise AvroReadConfigError(
            f"Invalid {variable_name} value: expected one of {choices}, got '{raw_value}'."
        )
    return normalized
