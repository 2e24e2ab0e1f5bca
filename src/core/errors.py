"""avroread exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each reader stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class AvroReadError(Exception):
    """Base exception for all avroread failures."""


class AvroReadConfigError(AvroReadError):
    """Raised for invalid runtime configuration."""


class AvroReadNotFoundError(AvroReadError):
    """Raised when the input container file does not exist."""


class AvroReadFormatError(AvroReadError):
    """Raised for malformed container framing or undecodable payloads."""


class AvroReadSchemaError(AvroReadError):
    """Raised for a missing or malformed embedded writer schema."""


class AvroReadIOError(AvroReadError):
    """Raised when the underlying stream cannot be read."""
