"""
Field ID arithmetic

A field id carries its own data type: DV4 stores the type code in the lowest
hex nibble, SkyNavigator in the top five bits of the id. Composite fields
derive the ids of their children from their own id; the helpers below do this
with plain integer shifts and masks.
"""

from .enums import DataType, Protocol

# Reserved id of the placeholder field (disabled slot in a config message)
PLACEHOLDER_ID = 0x0000

# Field ids are 64-bit unsigned on the wire
MAX_FIELD_ID = (1 << 64) - 1

# Width of the index suffix appended to SkyNavigator solid child ids
SOLID_INDEX_BITS = 8

# Nibble appended to the start id of a virtual group
VIRTUAL_GROUP_NIBBLE = 0xA


def _hex_digits(value: int) -> int:
    """Number of hex digits needed to write value (at least one)."""
    return max(1, (value.bit_length() + 3) // 4)


def id_to_type(field_id: int, protocol: Protocol) -> DataType:
    """
    Derive the data type encoded in a field id.

    Args:
        field_id: Numeric field id
        protocol: Active protocol variant

    Returns:
        The encoded DataType. Unknown codes fall back to UNSIGNED_WORD and the
        placeholder id maps to SIGNED_BYTE (code 0).
    """
    if field_id == PLACEHOLDER_ID:
        return DataType.SIGNED_BYTE

    if protocol == Protocol.DV4:
        code = field_id & 0xF
    else:
        bits = _hex_digits(field_id) * 4
        if bits < 5:
            return DataType.UNSIGNED_WORD
        code = field_id >> (bits - 5)

    data_type = DataType.from_code(code)
    return data_type if data_type is not None else DataType.UNSIGNED_WORD


def little_to_big_endian(hex_str: str) -> str:
    """
    Reverse the byte order of a hex string.

    Raises:
        ValueError: If the string has an odd number of digits
    """
    if len(hex_str) % 2:
        raise ValueError(f"Odd-length hex string: {hex_str!r}")
    return "".join(hex_str[i:i + 2] for i in range(len(hex_str) - 2, -1, -2))


def unsigned_to_signed(value: int, width: int) -> int:
    """
    Fold an unsigned raw value of the given byte width into the signed range.

    Values above max_positive (0x7F followed by width-1 bytes of 0xFF) are
    reflected as max_positive - (value - max_positive). This is the link
    firmware's convention, not two's complement.
    """
    if width <= 0:
        return value
    max_positive = (1 << (width * 8 - 1)) - 1
    if value > max_positive:
        return max_positive - (value - max_positive)
    return value


def dv4_child_id(parent_id: int, index: int, sub_type: DataType) -> int:
    """
    Build a DV4 child id: parent's top byte, 1-based index, sub-type nibble.

    The index is written with as many hex digits as it needs, so index 16 of
    0xF40E becomes 0xF4102.
    """
    shift = max(0, _hex_digits(parent_id) - 2) * 4
    base = parent_id >> shift
    child = (base << (_hex_digits(index) * 4)) | index
    return (child << 4) | int(sub_type.wire_type)


def _drop_top_bit(value: int) -> tuple:
    """Split value into (remaining bits, their count) without its leading 1."""
    bits = value.bit_length()
    if bits == 0:
        return 0, 0
    return value & ((1 << (bits - 1)) - 1), bits - 1


def skynav_referential_child_id(base_id: int, sub_type: DataType) -> int:
    """Drop the top bit of base_id and put the sub-type code in its place."""
    rest, bits = _drop_top_bit(base_id)
    return (int(sub_type.wire_type) << bits) | rest


def skynav_solid_child_id(parent_id: int, index: int, sub_type: DataType) -> int:
    """
    Build a SkyNavigator child id that can never collide with a real field.

    The parent id loses its top bit, the sub-type code is prepended and an
    8-bit 1-based index is appended.
    """
    rest, bits = _drop_top_bit(parent_id)
    head = (int(sub_type.wire_type) << bits) | rest
    index_bits = max(SOLID_INDEX_BITS, index.bit_length())
    return (head << index_bits) | index


def virtual_group_id(start_id: int) -> int:
    """Synthetic id of a virtual group: start id with an extra 0xA nibble."""
    return (start_id << 4) | VIRTUAL_GROUP_NIBBLE


def format_id(field_id: int) -> str:
    """Uppercase hex as used on the wire."""
    return f"{field_id:X}"
