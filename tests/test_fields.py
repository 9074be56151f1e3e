"""
Field value decoding tests
"""

from datetime import timezone

import pytest

from bluetelemetry.errors import InvalidatedByFlag, InvalidHex, UndersizedValue
from bluetelemetry.models.enums import CompositeStyle, DataType, Protocol
from bluetelemetry.models.fields import (
    BitmaskField,
    CompositeField,
    MsTimestampField,
    NumberField,
    TimestampField,
    ValidFlagField,
    parse_le_hex,
    round_half_up,
)
from bluetelemetry.models.registry import FieldRegistry


def make_number(data_type=DataType.UNSIGNED_SHORT, k=1.0, a=0, field_id=0x1003):
    return NumberField(field_id=field_id, name="n", data_type=data_type,
                       limit_min=0, limit_max=100, units="V", factor_k=k, factor_a=a)


class TestHelpers:
    """Test hex parsing and rounding helpers."""

    def test_parse_le_hex(self):
        """Little-endian payloads are reassembled."""
        assert parse_le_hex("4E20") == 0x204E
        assert parse_le_hex("1F") == 0x1F
        assert parse_le_hex("efbe") == 0xBEEF

    def test_parse_le_hex_short(self):
        """Less than one byte is undersized."""
        with pytest.raises(UndersizedValue):
            parse_le_hex("F")

    def test_parse_le_hex_malformed(self):
        """Non-hex and odd-length payloads are invalid."""
        with pytest.raises(InvalidHex):
            parse_le_hex("ZZ")
        with pytest.raises(InvalidHex):
            parse_le_hex("123")

    def test_round_half_up(self):
        """Halves round towards plus infinity."""
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4) == 2
        assert round_half_up(-2.5) == -2


class TestNumberField:
    """Test linear scaling."""

    def test_fractional_factor(self):
        """Fractional k gives float output."""
        field = make_number(k=0.001)
        field.set_raw(20000)
        assert field.raw == 20000
        assert field.value == pytest.approx(20.0)
        assert isinstance(field.value, float)

    def test_integral_factor(self):
        """Integral k gives integer output."""
        field = make_number(k=10.0, a=5)
        field.set_raw(3)
        assert field.value == 35
        assert isinstance(field.value, int)

    def test_kelvin_offset(self):
        """Offset is added after scaling."""
        field = make_number(data_type=DataType.SIGNED_SHORT, k=0.1, a=-273)
        field.set_raw(2980)
        assert field.value == pytest.approx(25.0)

    def test_sign_fold_applied(self):
        """Signed types are folded before scaling."""
        field = make_number(data_type=DataType.SIGNED_SHORT)
        result = field.set_hex("0080")
        assert result.ok
        assert field.raw == 0x7FFE

    def test_payload_truncated_to_width(self):
        """Only byte_width bytes of the payload are used."""
        field = make_number(data_type=DataType.UNSIGNED_BYTE, k=0.5, field_id=0xFB01)
        field.set_hex("1F40")
        assert field.raw == 0x1F
        assert field.value == pytest.approx(15.5)

    def test_bad_payload_keeps_value(self):
        """Failed decodes leave the previous value."""
        field = make_number()
        field.set_hex("0A00")
        assert field.value == 10

        result = field.set_hex("F")
        assert isinstance(result.error, UndersizedValue)
        assert field.value == 10

        result = field.set_hex("XYZW")
        assert isinstance(result.error, InvalidHex)
        assert result.error.field_id == field.field_id
        assert field.value == 10

    def test_display_text(self):
        """Value with units, or a dash when empty."""
        field = make_number(k=0.5)
        assert field.display_text == "--"
        field.set_raw(3)
        assert field.display_text == "1.5 V"


class TestValidFlagField:
    """Test the validity flag bit."""

    def make(self, flag_pos):
        return ValidFlagField(field_id=0x2003, name="speed", data_type=DataType.UNSIGNED_SHORT,
                              limit_min=0, limit_max=100, units="kn", flag_pos=flag_pos)

    def test_invalid_keeps_previous_value(self):
        """Unset flag bit keeps the display value."""
        field = self.make(0)
        field.value = 5.0
        result = field.set_raw(0)
        assert isinstance(result.error, InvalidatedByFlag)
        assert field.value == 5.0

    def test_invalid_inner_bit(self):
        """Bit positions count from the most significant set bit."""
        field = self.make(1)
        field.value = 5.0
        field.set_raw(0b101)
        assert field.value == 5.0

    def test_flag_removed_not_masked(self):
        """The flag bit is deleted from the value."""
        field = self.make(1)
        result = field.set_raw(0b110)
        assert result.ok
        assert field.value == 0b10

        field = self.make(0)
        field.set_raw(0b1011)
        assert field.value == 0b011

    def test_flag_beyond_length(self):
        """A flag position past the value's length is invalid."""
        field = self.make(5)
        result = field.set_raw(0b11)
        assert isinstance(result.error, InvalidatedByFlag)
        assert field.value is None


class TestBitmaskField:
    """Test bit string display."""

    def test_padded_bits(self):
        """Width follows the data type."""
        field = BitmaskField(field_id=0xF101, name="status", data_type=DataType.UNSIGNED_BYTE)
        field.set_raw(5)
        assert field.value == "00000101"
        assert field.limit_max == 255
        assert field.is_set(0)
        assert not field.is_set(1)

    def test_word_width(self):
        """Four byte bitmasks show 32 bits."""
        field = BitmaskField(field_id=0xF005, name="word", data_type=DataType.UNSIGNED_WORD)
        field.set_hex("01000080")
        assert field.value == "1" + "0" * 23 + "00000001"
        assert len(field.value) == 32


class TestTimestamps:
    """Test timestamp rendering."""

    def test_seconds(self):
        """Seconds since epoch as date and time."""
        field = TimestampField(field_id=0xE905, name="ts", data_type=DataType.UNSIGNED_WORD,
                               tz=timezone.utc)
        field.set_raw(86400 + 3661)
        assert field.value == "02.01.1970, 01:01:01"

    def test_seconds_out_of_range(self):
        """Unrepresentable values render as error."""
        field = TimestampField(field_id=0xE905, name="ts", data_type=DataType.UNSIGNED_WORD,
                               tz=timezone.utc)
        field.set_raw(10 ** 15)
        assert field.value == "error"

    def test_milliseconds(self):
        """Milliseconds as time of day."""
        field = MsTimestampField(field_id=0xE404, name="t", data_type=DataType.UNSIGNED_WORD,
                                 tz=timezone.utc)
        field.set_raw(3723004)
        assert field.value == "01:02:03.004"


class TestCompositeField:
    """Test composite payload splitting."""

    def make_registry(self):
        registry = FieldRegistry(Protocol.DV4)
        children = [
            make_number(field_id=0xAB13),
            NumberField(field_id=0xAB23, name="b", data_type=DataType.UNSIGNED_SHORT),
            NumberField(field_id=0xAB33, name="c", data_type=DataType.UNSIGNED_SHORT),
        ]
        composite = CompositeField(field_id=0xAB0C, name="group", data_type=DataType.GPS_PACKET,
                                   style=CompositeStyle.DV4_INDEXED)
        registry.add_composite(composite, children)
        return registry, composite

    def test_width_is_sum_of_children(self):
        """Three unsigned shorts make six bytes."""
        _, composite = self.make_registry()
        assert composite.byte_width == 6

    def test_exact_split(self):
        """Children consume their width in declaration order."""
        registry, composite = self.make_registry()
        result = registry.set_raw(composite.field_id, "010002000300")
        assert result.ok
        values = [c.value for c in registry.children_of(composite)]
        assert values == [1, 2, 3]

    def test_short_payload_keeps_tail(self):
        """A truncated payload only updates the leading children."""
        registry, composite = self.make_registry()
        registry.set_raw(composite.field_id, "090009000900")
        result = registry.set_raw(composite.field_id, "0100020003")
        values = [c.value for c in registry.children_of(composite)]
        assert values == [1, 2, 9]
        assert isinstance(result.children[2].error, UndersizedValue)
        assert not result.ok

    def test_bad_child_does_not_block_others(self):
        """A malformed child slice is skipped."""
        registry, composite = self.make_registry()
        registry.set_raw(composite.field_id, "0100ZZZZ0300")
        values = [c.value for c in registry.children_of(composite)]
        assert values == [1, None, 3]
