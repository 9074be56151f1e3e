"""
Telemetry Fields - the closed family of decodable field kinds

Simple fields hold one value: the last raw integer and the converted display
value. Composite fields own an ordered list of child ids and decode one
contiguous block of bytes into their children. Parent links are stored as ids
and resolved through the registry.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Any, List, Optional, Sequence

from ..errors import DecodeError, InvalidatedByFlag, InvalidHex, UndersizedValue
from .enums import CompositeStyle, DataType
from .field_ids import little_to_big_endian, unsigned_to_signed

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"[0-9A-Fa-f]+")

# Raw values are 64-bit on the link; negative values are viewed as unsigned
RAW_MASK = (1 << 64) - 1

TIMESTAMP_FORMAT = "%d.%m.%Y, %H:%M:%S"
TIME_OF_DAY_FORMAT = "%H:%M:%S"
TIMESTAMP_ERROR = "error"


@dataclass
class DecodeResult:
    """Outcome of writing one payload into one field."""
    field_id: int
    value: Any = None
    error: Optional[DecodeError] = None
    children: List["DecodeResult"] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None and all(c.ok for c in self.children)

    def errors(self) -> List[DecodeError]:
        """Flatten own and child errors."""
        found = [self.error] if self.error is not None else []
        for child in self.children:
            found.extend(child.errors())
        return found


def parse_le_hex(payload: str, field_id: Optional[int] = None) -> int:
    """
    Parse a little-endian hex payload into an unsigned integer.

    Raises:
        UndersizedValue: Payload shorter than one byte
        InvalidHex: Non-hex characters or an odd number of digits
    """
    if len(payload) < 2:
        raise UndersizedValue(f"Payload too short: {payload!r}", field_id)
    if not _HEX_RE.fullmatch(payload) or len(payload) % 2:
        raise InvalidHex(f"Malformed hex payload: {payload!r}", field_id)
    return int(little_to_big_endian(payload), 16)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from minus infinity."""
    return int(math.floor(value + 0.5))


@dataclass
class TelemetryField:
    """Attributes shared by every field kind."""
    field_id: int
    name: str
    data_type: DataType
    parent_id: Optional[int] = None

    is_composite = False

    @property
    def byte_width(self) -> int:
        return self.data_type.byte_width

    @property
    def hex_id(self) -> str:
        return f"{self.field_id:X}"


@dataclass
class SimpleField(TelemetryField):
    """A field holding exactly one value."""
    raw: Optional[int] = None
    value: Any = None

    def convert(self, raw: int) -> Any:
        """Turn a (sign-folded) raw value into the display value."""
        return raw

    def set_raw(self, raw: int) -> DecodeResult:
        """
        Store a raw wire value and convert it.

        Signed types are folded before storing. A conversion that rejects the
        value keeps the previous display value and reports the error.
        """
        if self.data_type.is_signed:
            raw = unsigned_to_signed(raw, self.byte_width)
        self.raw = raw
        try:
            self.value = self.convert(raw)
        except DecodeError as e:
            e.field_id = self.field_id
            return DecodeResult(self.field_id, self.value, e)
        return DecodeResult(self.field_id, self.value)

    def set_hex(self, payload: str) -> DecodeResult:
        """Decode a little-endian hex payload (at most byte_width bytes)."""
        width = self.byte_width
        if width > 0:
            payload = payload[:width * 2]
        try:
            raw = parse_le_hex(payload, self.field_id)
        except DecodeError as e:
            return DecodeResult(self.field_id, self.value, e)
        return self.set_raw(raw)

    @property
    def display_text(self) -> str:
        if self.value is None:
            return "--"
        return str(self.value)


@dataclass
class NumberField(SimpleField):
    """Raw integer scaled linearly as k*x + a."""
    limit_min: float = 0
    limit_max: float = 0
    units: str = ""
    factor_k: float = 1.0
    factor_a: int = 0

    def scale(self, raw: int) -> Any:
        # Integral factors keep integer output, fractional ones give floats
        if float(self.factor_k).is_integer():
            return round_half_up(self.factor_k * raw) + self.factor_a
        return self.factor_k * raw + self.factor_a

    def convert(self, raw: int) -> Any:
        return self.scale(raw)

    @property
    def display_text(self) -> str:
        if self.value is None:
            return "--"
        if isinstance(self.value, float):
            text = f"{self.value:.6g}"
        else:
            text = str(self.value)
        return f"{text} {self.units}" if self.units else text


@dataclass
class ValidFlagField(NumberField):
    """
    Number where one bit of the raw value is an "is valid" flag.

    flag_pos indexes the binary representation of the raw value from its most
    significant set bit (no zero padding). The flag bit is removed before
    scaling; an unset flag keeps the previous value.
    """
    flag_pos: int = 0

    def strip_flag(self, raw: int) -> int:
        """
        Remove the flag bit from raw.

        Raises:
            InvalidatedByFlag: If the flag bit is 0 or beyond the value's length
        """
        value = raw & RAW_MASK
        bits = max(value.bit_length(), 1)
        if self.flag_pos >= bits:
            raise InvalidatedByFlag(f"{self.name}: flag bit {self.flag_pos} out of range")
        shift = bits - 1 - self.flag_pos
        if not (value >> shift) & 1:
            raise InvalidatedByFlag(f"{self.name}: value flagged invalid")
        low = value & ((1 << shift) - 1)
        high = value >> (shift + 1)
        return (high << shift) | low

    def convert(self, raw: int) -> Any:
        return self.scale(self.strip_flag(raw))


@dataclass
class BitmaskField(NumberField):
    """Raw integer shown as a zero-padded bit string of the type's width."""

    def __post_init__(self):
        self.limit_min = 0
        self.limit_max = (1 << self.size_bits) - 1

    @property
    def size_bits(self) -> int:
        return self.byte_width * 8

    def convert(self, raw: int) -> str:
        if raw < 0:
            raw &= (1 << self.size_bits) - 1
        return format(raw, f"0{self.size_bits}b")

    def is_set(self, bit: int) -> bool:
        """Check a bit, counted from the least significant end."""
        if self.raw is None:
            return False
        return bool((self.raw >> bit) & 1)

    @property
    def display_text(self) -> str:
        return self.value if self.value is not None else "--"


@dataclass
class TimestampField(SimpleField):
    """Raw whole seconds since the epoch, shown as dd.MM.yyyy, HH:mm:ss."""
    tz: Optional[tzinfo] = field(default=None, repr=False, compare=False)

    def convert(self, raw: int) -> str:
        try:
            return datetime.fromtimestamp(raw, tz=self.tz).strftime(TIMESTAMP_FORMAT)
        except (OverflowError, OSError, ValueError):
            logger.debug(f"Timestamp out of range for {self.name}: {raw}")
            return TIMESTAMP_ERROR


@dataclass
class MsTimestampField(SimpleField):
    """Raw milliseconds since the epoch, shown as HH:mm:ss.SSS."""
    tz: Optional[tzinfo] = field(default=None, repr=False, compare=False)

    def convert(self, raw: int) -> str:
        seconds, millis = divmod(raw, 1000)
        try:
            moment = datetime.fromtimestamp(seconds, tz=self.tz)
        except (OverflowError, OSError, ValueError):
            logger.debug(f"Time of day out of range for {self.name}: {raw}")
            return TIMESTAMP_ERROR
        return f"{moment.strftime(TIME_OF_DAY_FORMAT)}.{millis:03d}"


@dataclass
class CompositeField(TelemetryField):
    """
    Fixed-order aggregate of simple fields decoded from one byte block.

    The registry fills payload_width with the sum of the children's widths
    once all children exist.
    """
    style: CompositeStyle = CompositeStyle.VIRTUAL
    children: List[int] = field(default_factory=list)
    expanded: bool = False
    payload_width: int = 0

    is_composite = True

    @property
    def byte_width(self) -> int:
        return self.payload_width

    @property
    def is_virtual(self) -> bool:
        return self.style is CompositeStyle.VIRTUAL

    def set_values(self, payload: str, children: Sequence[SimpleField]) -> DecodeResult:
        """
        Split payload across children in declaration order.

        Each child consumes byte_width*2 hex digits. A child that fails to
        decode keeps its previous value and does not stop the ones after it.
        """
        result = DecodeResult(self.field_id)
        pos = 0
        for child in children:
            end = pos + child.byte_width * 2
            piece = payload[pos:end]
            pos = end
            if len(piece) < child.byte_width * 2:
                result.children.append(DecodeResult(
                    child.field_id, child.value,
                    UndersizedValue(f"Payload ends before {child.name}", child.field_id)))
                continue
            result.children.append(child.set_hex(piece))
        return result
