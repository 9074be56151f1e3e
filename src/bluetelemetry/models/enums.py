"""
Telemetry Enums - protocol variants and wire data types

Byte widths and signedness are fixed lookup tables taken from the link
firmware; they cannot be derived from the type codes.
"""

from enum import Enum, IntEnum
from typing import Optional


class Protocol(IntEnum):
    """Wire protocol variant spoken by the link hardware."""
    DV4 = 0
    SKYNAVIGATOR = 1

    @classmethod
    def from_name(cls, name: str) -> "Protocol":
        """Parse a protocol name as used on the command line and in settings."""
        key = name.strip().lower()
        if key == "dv4":
            return cls.DV4
        if key in ("skynav", "skynavigator"):
            return cls.SKYNAVIGATOR
        raise ValueError(f"Unknown protocol: {name}")

    @property
    def label(self) -> str:
        return "DV4" if self is Protocol.DV4 else "SkyNavigator"


class DataType(IntEnum):
    """Wire data types, valued by their type code."""
    SIGNED_BYTE = 0x00
    UNSIGNED_BYTE = 0x01
    SIGNED_SHORT = 0x02
    UNSIGNED_SHORT = 0x03
    SIGNED_WORD = 0x04
    UNSIGNED_WORD = 0x05
    FLOAT = 0x06
    SIGNED_12BIT = 0x09          # Virtual, travels as SIGNED_SHORT
    GPS_PACKET_HIGH_RES = 0x0A
    GYRO_PACKET = 0x0B
    GPS_PACKET = 0x0C
    CONTROL_DATA_PACKET = 0x0D
    POWER_SUPPLY_PACKET = 0x10
    CONTROL_ID_PACKET = 0x11
    TEXT_MESSAGE = 0x12
    VM_PACKET = 0x13

    @classmethod
    def from_code(cls, code: int) -> Optional["DataType"]:
        """Return the type for a wire code, or None if the code is unknown."""
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def byte_width(self) -> int:
        return DATA_TYPE_WIDTHS[self]

    @property
    def is_signed(self) -> bool:
        return self in SIGNED_TYPES

    @property
    def wire_type(self) -> "DataType":
        """Type code written into derived ids."""
        if self is DataType.SIGNED_12BIT:
            return DataType.SIGNED_SHORT
        return self


DATA_TYPE_WIDTHS = {
    DataType.SIGNED_BYTE: 1,
    DataType.UNSIGNED_BYTE: 1,
    DataType.SIGNED_SHORT: 2,
    DataType.UNSIGNED_SHORT: 2,
    DataType.SIGNED_WORD: 4,
    DataType.UNSIGNED_WORD: 4,
    DataType.FLOAT: 4,
    DataType.SIGNED_12BIT: 3,
    DataType.GPS_PACKET_HIGH_RES: 14,
    DataType.GYRO_PACKET: 10,
    DataType.GPS_PACKET: 18,
    DataType.CONTROL_DATA_PACKET: 24,
    DataType.POWER_SUPPLY_PACKET: 64,
    DataType.CONTROL_ID_PACKET: 0,   # No fixed width
    DataType.TEXT_MESSAGE: 16,
    DataType.VM_PACKET: 24,
}

SIGNED_TYPES = frozenset({
    DataType.SIGNED_BYTE,
    DataType.SIGNED_SHORT,
    DataType.SIGNED_WORD,
    DataType.SIGNED_12BIT,
})


class CompositeStyle(Enum):
    """How a composite field derives the ids of its children."""
    DV4_INDEXED = "dv4_indexed"
    SKYNAV_REFERENTIAL = "skynav_referential"
    SKYNAV_SOLID = "skynav_solid"
    VIRTUAL = "virtual"
