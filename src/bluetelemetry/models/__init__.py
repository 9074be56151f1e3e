"""
Models Package

Field catalog and value decoding for the DV4 and SkyNavigator protocols.
"""

from .enums import CompositeStyle, DataType, Protocol
from .field_ids import (
    PLACEHOLDER_ID,
    id_to_type,
    little_to_big_endian,
    unsigned_to_signed,
)
from .fields import (
    BitmaskField,
    CompositeField,
    DecodeResult,
    MsTimestampField,
    NumberField,
    SimpleField,
    TelemetryField,
    TimestampField,
    ValidFlagField,
)
from .registry import FieldRegistry
from .field_list import collapse_all, toggle_expanded, visible_field_names

__all__ = [
    'CompositeStyle',
    'DataType',
    'Protocol',
    'PLACEHOLDER_ID',
    'id_to_type',
    'little_to_big_endian',
    'unsigned_to_signed',
    'BitmaskField',
    'CompositeField',
    'DecodeResult',
    'MsTimestampField',
    'NumberField',
    'SimpleField',
    'TelemetryField',
    'TimestampField',
    'ValidFlagField',
    'FieldRegistry',
    'collapse_all',
    'toggle_expanded',
    'visible_field_names',
]
