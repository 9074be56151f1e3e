"""
Bluetelemetry error types

Decode errors are returned as values inside DecodeResult/ParseResult so that a
single corrupt field never aborts the rest of a telemetry line. The remaining
exceptions are raised to the caller.
"""

from typing import Optional


class TelemetryError(Exception):
    """Base class for all bluetelemetry errors."""
    pass


# ============================================================================
# Decode errors (recovered locally, reported for observability)
# ============================================================================

class DecodeError(TelemetryError):
    """A line or value that could not be decoded."""

    def __init__(self, message: str, field_id: Optional[int] = None):
        super().__init__(message)
        self.field_id = field_id


class MalformedLine(DecodeError):
    """Line has no checksum delimiter or is empty after splitting."""
    pass


class UnknownField(DecodeError):
    """Field id is not in the active registry."""
    pass


class UndersizedValue(DecodeError):
    """Hex payload is too short to carry a value."""
    pass


class InvalidHex(DecodeError):
    """Hex payload contains non-hex characters or an odd number of digits."""
    pass


class InvalidatedByFlag(DecodeError):
    """Validity bit of a flagged value is not set; the previous value is kept."""
    pass


# ============================================================================
# Errors surfaced to the caller
# ============================================================================

class ConfigResolutionError(TelemetryError):
    """A field name passed to the config encoder has no matching id."""

    def __init__(self, name: str, position: int):
        super().__init__(f"Unknown field name at position {position}: {name!r}")
        self.name = name
        self.position = position


class RegistryError(TelemetryError):
    """Catalog construction error (duplicate id or name)."""
    pass


class TransportError(TelemetryError):
    """Base exception for transport errors."""
    pass


class TransportConnectionError(TransportError):
    """Connection could not be established or was lost."""
    pass
