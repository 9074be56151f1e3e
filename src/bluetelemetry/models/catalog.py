"""
Field Catalog - static field tables for the DV4 and SkyNavigator protocols

Each protocol gets one populate function that fills a FieldRegistry. Helpers
below create the individual field kinds and the composite layouts (indexed
arrays, GPS packets, the power supply block and virtual groups).
"""

from typing import Callable, Dict, List, Optional, Tuple

from .enums import CompositeStyle, DataType, Protocol
from .field_ids import (
    PLACEHOLDER_ID,
    dv4_child_id,
    skynav_referential_child_id,
    skynav_solid_child_id,
    virtual_group_id,
)
from .fields import (
    BitmaskField,
    CompositeField,
    MsTimestampField,
    NumberField,
    SimpleField,
    TimestampField,
    ValidFlagField,
)
from .registry import FieldRegistry

# Name prefixes
RX = "Rx "
TX = "Tx "
GPS = "GPS "
LV = "LinkVario "
MUX = "MUX"
SENSOR = "External sensor "
RX_MAIN = "Rx Main "
RX_SUB1 = "Rx Sub1 "
RX_SUB2 = "Rx Sub2 "
PACKET = " packet"
BOARD = " board"
TXRX = " TxRx"

# Kelvin offset for temperatures sent in 0.1 K or 1 K steps
KELVIN = -273

# GPS coordinates are sent in 1/6000000 degree
COORD_FACTOR = 1.0 / 6000000.0

# Leading marker bit above the 11-bit SkyNavigator address of GPS sub-fields
SKYNAV_ADDRESS_MARKER = 1 << 11


# ============================================================================
# Field factories
# ============================================================================

def number(registry: FieldRegistry, field_id: int, name: str, limit_min, limit_max,
           units: str, k: float = 1.0, a: int = 0,
           data_type: Optional[DataType] = None) -> NumberField:
    """Create a NumberField; the type comes from the id unless given."""
    return NumberField(
        field_id=field_id,
        name=name,
        data_type=data_type if data_type is not None else registry.type_of(field_id),
        limit_min=limit_min,
        limit_max=limit_max,
        units=units,
        factor_k=k,
        factor_a=a,
    )


def valid_flag(registry: FieldRegistry, field_id: int, name: str, flag_pos: int,
               limit_min, limit_max, units: str, k: float = 1.0, a: int = 0,
               data_type: Optional[DataType] = None) -> ValidFlagField:
    return ValidFlagField(
        field_id=field_id,
        name=name,
        data_type=data_type if data_type is not None else registry.type_of(field_id),
        limit_min=limit_min,
        limit_max=limit_max,
        units=units,
        factor_k=k,
        factor_a=a,
        flag_pos=flag_pos,
    )


def bitmask(registry: FieldRegistry, field_id: int, name: str,
            data_type: Optional[DataType] = None) -> BitmaskField:
    return BitmaskField(
        field_id=field_id,
        name=name,
        data_type=data_type if data_type is not None else registry.type_of(field_id),
    )


def timestamp(registry: FieldRegistry, field_id: int, name: str,
              data_type: Optional[DataType] = None) -> TimestampField:
    return TimestampField(
        field_id=field_id,
        name=name,
        data_type=data_type if data_type is not None else registry.type_of(field_id),
        tz=registry.tz,
    )


def ms_timestamp(registry: FieldRegistry, field_id: int, name: str,
                 data_type: Optional[DataType] = None) -> MsTimestampField:
    return MsTimestampField(
        field_id=field_id,
        name=name,
        data_type=data_type if data_type is not None else registry.type_of(field_id),
        tz=registry.tz,
    )


def _composite(registry: FieldRegistry, field_id: int, name: str,
               style: CompositeStyle) -> CompositeField:
    return CompositeField(
        field_id=field_id,
        name=name,
        data_type=registry.type_of(field_id),
        style=style,
    )


# Child layout entry: (sub-type, factory(child_id, data_type) -> field)
ChildSpec = Tuple[DataType, Callable[[int, DataType], SimpleField]]


# ============================================================================
# Composite layouts
# ============================================================================

def dv4_composite(registry: FieldRegistry, field_id: int, name: str,
                  layout: List[ChildSpec]) -> CompositeField:
    """DV4 composite whose children are addressed by parent byte, index and type."""
    children = []
    for index, (sub_type, factory) in enumerate(layout, start=1):
        child_id = dv4_child_id(field_id, index, sub_type)
        children.append(factory(child_id, sub_type.wire_type))
    return registry.add_composite(
        _composite(registry, field_id, name, CompositeStyle.DV4_INDEXED), children)


def dv4_array(registry: FieldRegistry, field_id: int, name: str, element_name: str,
              size: int, sub_type: DataType, first_index: int, limit_min, limit_max,
              units: str, k: float = 1.0, a: int = 0) -> CompositeField:
    """Numbered DV4 array, e.g. Servo 17 .. Servo 32."""
    layout = [
        (sub_type,
         lambda cid, dt, n=first_index + i: number(
             registry, cid, f"{element_name} {n}", limit_min, limit_max, units, k, a, dt))
        for i in range(size)
    ]
    return dv4_composite(registry, field_id, name, layout)


def dv4_gps(registry: FieldRegistry, field_id: int, name: str) -> CompositeField:
    p = name + " "
    layout = [
        (DataType.SIGNED_WORD, lambda cid, dt: number(
            registry, cid, p + "Latitude", -90, 90, "°", COORD_FACTOR, data_type=dt)),
        (DataType.SIGNED_WORD, lambda cid, dt: number(
            registry, cid, p + "Longitude", -180, 180, "°", COORD_FACTOR, data_type=dt)),
        (DataType.UNSIGNED_SHORT, lambda cid, dt: valid_flag(
            registry, cid, p + "Speed", 0, 0, 60, "kn", 0.1, data_type=dt)),
        (DataType.SIGNED_SHORT, lambda cid, dt: number(
            registry, cid, p + "Altitude", -1000, 8000, "m", 0.1, data_type=dt)),
        (DataType.UNSIGNED_SHORT, lambda cid, dt: number(
            registry, cid, p + "Course", 0, 360, "°", 0.01, data_type=dt)),
        (DataType.UNSIGNED_WORD, lambda cid, dt: ms_timestamp(
            registry, cid, p + "UTC", data_type=dt)),
    ]
    return dv4_composite(registry, field_id, name, layout)


def skynav_gps(registry: FieldRegistry, field_id: int, name: str) -> CompositeField:
    """
    SkyNavigator GPS packet.

    Sub-fields are standalone fields at address (bits 4-10 of the packet id,
    then a fixed nibble); their ids carry the sub-type in the top five bits.
    """
    block = ((field_id >> 4) & 0x7F) << 4
    p = name + " "
    layout = [
        (0x1, DataType.SIGNED_WORD, lambda cid, dt: number(
            registry, cid, p + "Latitude", -90, 90, "°", COORD_FACTOR, data_type=dt)),
        (0x2, DataType.SIGNED_WORD, lambda cid, dt: number(
            registry, cid, p + "Longitude", -180, 180, "°", COORD_FACTOR, data_type=dt)),
        (0x3, DataType.UNSIGNED_BYTE, lambda cid, dt: number(
            registry, cid, p + "Speed", 0, 60, "kn", 0.1, data_type=dt)),
        (0x4, DataType.SIGNED_SHORT, lambda cid, dt: number(
            registry, cid, p + "Altitude", -1000, 8000, "m", 0.1, data_type=dt)),
        (0x5, DataType.UNSIGNED_SHORT, lambda cid, dt: number(
            registry, cid, p + "Course", 0, 360, "°", 0.01, data_type=dt)),
        (0x8, DataType.UNSIGNED_WORD, lambda cid, dt: ms_timestamp(
            registry, cid, p + "UTC", data_type=dt)),
        (0x9, DataType.UNSIGNED_BYTE, lambda cid, dt: number(
            registry, cid, p + "Fractional UTC", 0, 996, "ms", 4.0, data_type=dt)),
        (0xA, DataType.SIGNED_SHORT, lambda cid, dt: number(
            registry, cid, p + "Altitude relative", -1000, 8000, "m", 0.1, data_type=dt)),
    ]
    children = []
    for nibble, sub_type, factory in layout:
        base = SKYNAV_ADDRESS_MARKER | block | nibble
        children.append(factory(skynav_referential_child_id(base, sub_type), sub_type.wire_type))
    return registry.add_composite(
        _composite(registry, field_id, name, CompositeStyle.SKYNAV_REFERENTIAL), children)


def skynav_array(registry: FieldRegistry, field_id: int, name: str, element_name: str,
                 size: int, first_index: int, first_id: int, limit_min, limit_max,
                 units: str, k: float = 1.0, a: int = 0) -> CompositeField:
    """SkyNavigator packet referencing consecutive standalone field ids."""
    children = [
        number(registry, first_id + i, f"{element_name} {first_index + i}",
               limit_min, limit_max, units, k, a)
        for i in range(size)
    ]
    return registry.add_composite(
        _composite(registry, field_id, name, CompositeStyle.SKYNAV_REFERENTIAL), children)


def skynav_solid(registry: FieldRegistry, field_id: int, name: str,
                 layout: List[ChildSpec]) -> CompositeField:
    """
    SkyNavigator packet whose sub-fields never travel on their own.

    Children keep their declared type so the packet width adds up (a 12-bit
    slot takes 3 bytes); only the derived id carries the wire type.
    """
    children = []
    for index, (sub_type, factory) in enumerate(layout, start=1):
        child_id = skynav_solid_child_id(field_id, index, sub_type)
        children.append(factory(child_id, sub_type))
    return registry.add_composite(
        _composite(registry, field_id, name, CompositeStyle.SKYNAV_SOLID), children)


def power_supply(registry: FieldRegistry, field_id: int, name: str) -> CompositeField:
    p = name + " "

    def num(label, lo, hi, units, k=1.0):
        return lambda cid, dt: number(registry, cid, p + label, lo, hi, units, k, data_type=dt)

    def bits(label):
        return lambda cid, dt: bitmask(registry, cid, p + label, data_type=dt)

    layout = [
        (DataType.UNSIGNED_WORD, bits("Status")),
        (DataType.UNSIGNED_SHORT, num("Voltage", 0, 20, "V", 0.001)),
        (DataType.UNSIGNED_SHORT, num("Current", -20, 20, "A", 0.001)),
        (DataType.UNSIGNED_SHORT, num("Input voltage", 0, 20, "V", 0.001)),
        (DataType.UNSIGNED_SHORT, num("Input current", -20, 20, "A", 0.001)),
        (DataType.UNSIGNED_SHORT, num("Main voltage", 0, 20, "V", 0.001)),
        (DataType.UNSIGNED_SHORT, num("Reserve voltage", 0, 20, "V", 0.001)),
        (DataType.SIGNED_BYTE, num("Input temperature", -40, 40, "°C")),
        (DataType.SIGNED_12BIT, num("Reserved", 0, 0, "")),
    ]
    for cell in range(1, 5):
        c = f"Cell {cell} "
        layout += [
            (DataType.UNSIGNED_WORD, bits(c + "Status")),
            (DataType.UNSIGNED_SHORT, num(c + "Voltage", 0, 20, "V", 0.001)),
            (DataType.SIGNED_SHORT, num(c + "Current", -20, 20, "A", 0.001)),
            (DataType.UNSIGNED_SHORT, num(c + "Capacity", 0, 20, "mAh")),
            (DataType.SIGNED_BYTE, num(c + "Temperature", -40, 40, "°C")),
        ]
    return skynav_solid(registry, field_id, name, layout)


def virtual_array(registry: FieldRegistry, start_id: int, diff_id: int, name: str,
                  element_name: str, size: int, limit_min, limit_max, units: str,
                  k: float = 1.0, a: int = 0) -> CompositeField:
    """
    Catalog-only group of similar real fields.

    Children are the real ids start_id + diff_id*i; the group itself gets a
    synthetic id that never appears on the wire.
    """
    children = [
        number(registry, start_id + diff_id * i, f"{element_name} {i + 1}",
               limit_min, limit_max, units, k, a)
        for i in range(size)
    ]
    group_id = virtual_group_id(start_id)
    return registry.add_composite(
        _composite(registry, group_id, name, CompositeStyle.VIRTUAL), children)


# ============================================================================
# DV4
# ============================================================================

def populate_dv4(r: FieldRegistry) -> None:
    add = r.add

    # LinkVario
    add(number(r, 0x4003, LV + "Power source voltage", 0, 20, "V", 0.001))
    add(number(r, 0x4013, LV + "Motor voltage", 0, 20, "V", 0.001))
    add(number(r, 0x4103, LV + "Motor current", 0, 20, "A", 0.01))
    add(number(r, 0x4203, LV + "Used capacity", 0, 100000, "mAh"))
    add(number(r, 0x4304, "Barometric height", -1000, 8000, "m", 0.1))
    add(number(r, 0x4402, LV + "Temperature", -40, 125, "°C", 0.1, KELVIN))
    add(number(r, 0x4502, "Vertical speed", -30, 30, "m/s", 0.005))
    add(number(r, 0x4603, "Pitot speed", 0, 30, "m/s", 0.1))

    # MUX / VM boards, one virtual group per quantity
    def mux_group(start_id, label, limit_min, limit_max, units, k=1.0, a=0):
        virtual_array(r, start_id, 0x0010, f"{MUX} {label}{PACKET}", f"{MUX} {label}{BOARD}",
                      16, limit_min, limit_max, units, k, a)

    mux_group(0x5003, "Power source voltage", 0, 20, "V", 0.001)
    mux_group(0x5103, "Motor voltage", 0, 20, "V", 0.001)
    mux_group(0x5203, "Motor current", 0, 20, "A", 0.01)
    mux_group(0x5303, "Used capacity", 0, 100000, "mAh")

    mux_group(0x5403, "A1 Voltage", 0, 20, "V", 0.001)
    mux_group(0x5C03, "A2 Voltage", 0, 20, "V", 0.001)
    mux_group(0x6403, "A3 Voltage", 0, 20, "V", 0.001)
    mux_group(0x6C03, "A4 Voltage", 0, 20, "V", 0.001)
    mux_group(0x7403, "A5 Voltage", 0, 20, "V", 0.001)

    mux_group(0x5502, "A1 Temperature", -40, 125, "°C", 0.1, KELVIN)
    mux_group(0x5D02, "A2 Temperature", -40, 125, "°C", 0.1, KELVIN)
    mux_group(0x6502, "A3 Temperature", -40, 125, "°C", 0.1, KELVIN)
    mux_group(0x6D02, "A4 Temperature", -40, 125, "°C", 0.1, KELVIN)
    mux_group(0x7E02, "PT1000 Temperature", -40, 125, "°C", 0.1, KELVIN)

    mux_group(0x5B03, "A1 Pitot speed", 0, 30, "m/s", 0.1)
    mux_group(0x6305, "A2 RPM", 0, 42000, "", 1.0 / 6.0)
    mux_group(0x6603, "A3 Fuel flow", 0, 3000, "ml/min")
    mux_group(0x6703, "A3 Fuel", 0, 6500, "ml")

    # Tx / Rx internal
    add(number(r, 0xDF04, GPS + "Height", -4000, 4000, "m", 0.1))
    add(number(r, 0xE003, GPS + "Distance ground", 0, 6553, "m", 0.1))
    add(number(r, 0xE103, GPS + "Distance pilot", 1, 6553, "m", 0.1))
    add(ms_timestamp(r, 0xE404, GPS + "Time"))
    add(bitmask(r, 0xE203, TX + "LinkVario status"))
    add(bitmask(r, 0xE303, RX + "LinkVario status"))
    add(number(r, 0xE501, "Sync progress", 0, 100, "%", 0.1))
    add(number(r, 0xE603, TX + "USB voltage", 0, 20, "V", 0.1))
    add(number(r, 0xE703, RX + "USB voltage", 0, 20, "V", 0.1))
    dv4_array(r, 0xE80B, "Gyro packet", "Gyro", 5, DataType.SIGNED_SHORT, 1, -200, 200, "%")
    add(timestamp(r, 0xE905, "Tx Timestamp"))
    add(timestamp(r, 0xEA05, "Rx Timestamp"))
    dv4_gps(r, 0xEB0C, "GPS")
    add(number(r, 0xEC01, "Tx channels used", 0, 255, ""))
    add(number(r, 0xED01, TX + "Pultframes per second", 0, 255, ""))
    add(number(r, 0xEE00, TX + "Temperature", -40, 125, "°C", 0.1, KELVIN))
    add(number(r, 0xEF00, RX + "Temperature", -40, 125, "°C", 0.1, KELVIN))
    add(bitmask(r, 0xF005, TX + "Status word"))
    add(bitmask(r, 0xF101, TX + "Status byte"))
    add(bitmask(r, 0xF205, RX + "Status word"))
    add(bitmask(r, 0xF301, RX + "Status byte"))
    dv4_array(r, 0xF40E, "Servo packet 1-16", "Servo", 16, DataType.SIGNED_12BIT, 1,
              -200, 200, "%", 0.1)
    dv4_array(r, 0xF50E, "Servo packet 17-32", "Servo", 16, DataType.SIGNED_12BIT, 17,
              -200, 200, "%", 0.1)
    dv4_array(r, 0xF60D, "Multi switch channel data", "Multi switch channel", 16,
              DataType.SIGNED_12BIT, 1, -100, 100, "%", 0.05)
    dv4_array(r, 0xF70D, "Channel data", "Channel", 16, DataType.SIGNED_12BIT, 1,
              -100, 100, "%", 0.05)
    add(number(r, 0xF800, TX + "LQI 1", 0, 100, "%"))
    add(number(r, 0xF810, TX + "LQI 2", 0, 100, "%"))
    add(number(r, 0xF900, RX + "LQI 1", 0, 100, "%"))
    add(number(r, 0xF910, RX + "LQI 2", 0, 100, "%"))
    add(number(r, 0xFA01, TX + "RSSI 1", -128, 20, "dBm", 0.5))
    add(number(r, 0xFA11, TX + "RSSI 2", -128, 20, "dBm", 0.5))
    add(number(r, 0xFB01, RX + "RSSI 1", -128, 20, "dBm", 0.5))
    add(number(r, 0xFB11, RX + "RSSI 2", -128, 20, "dBm", 0.5))
    dv4_array(r, 0xFC0F, "Servo bank current packet", "Servo bank", 8,
              DataType.UNSIGNED_SHORT, 1, 0, 40, "A", 0.01)
    add(number(r, 0xFD03, RX + "Current", 0, 20, "A", 0.01))
    add(number(r, 0xFE03, TX + "Voltage", 0, 20, "V", 0.001))
    add(number(r, 0xFF03, RX + "Voltage 1", 0, 20, "V", 0.001))
    add(number(r, 0xFF13, RX + "Voltage 2", 0, 20, "V", 0.001))


# ============================================================================
# SkyNavigator
# ============================================================================

def _skynav_receivers(r: FieldRegistry) -> None:
    """Main receiver, both sub receivers and the transmitter."""
    add = r.add
    for offset, prefix in ((0x00, RX_MAIN), (0x10, RX_SUB1), (0x20, RX_SUB2)):
        add(number(r, 0x0403 + offset, prefix + "RSSI 1", -40, 125, "%"))
        add(number(r, 0x0404 + offset, prefix + "RSSI 2", -40, 125, "%"))
        add(number(r, 0x0408 + offset, prefix + "Temperature", -40, 125, "°C", a=KELVIN))
        add(number(r, 0x0C01 + offset, prefix + "LQI 1", 0, 100, "%"))
        add(number(r, 0x0C02 + offset, prefix + "LQI 2", 0, 100, "%"))
        add(bitmask(r, 0x0C0A + offset, prefix + "Status byte"))
        add(number(r, 0x1C05 + offset, prefix + "Battery voltage 1", 0, 20, "V", 0.001))
        add(number(r, 0x1C06 + offset, prefix + "Battery voltage 2", 0, 20, "V", 0.001))
        add(number(r, 0x1C07 + offset, prefix + "Current total", 0, 20, "A", 0.1))
        add(timestamp(r, 0x2C00 + offset, prefix + "UTC"))
        add(bitmask(r, 0x2C09 + offset, prefix + "Status word"))

    add(number(r, 0x0483, TX + "RSSI 1", -40, 125, "%"))
    add(number(r, 0x0484, TX + "RSSI 2", -40, 125, "%"))
    add(number(r, 0x0485, TX + "Temperature", -40, 125, "°C", a=KELVIN))
    add(number(r, 0x0C81, TX + "LQI 1", 0, 100, "%"))
    add(number(r, 0x0C82, TX + "LQI 2", 0, 100, "%"))

    add(number(r, 0x0C0D, RX + "Sync progress", 0, 100, "%"))
    add(number(r, 0x0C87, TX + "Flight mode", 0, 20, ""))
    add(bitmask(r, 0x0C89, TX + "Sequence control config"))
    add(number(r, 0x0C8F, RX + "General progress", 0, 100, "%"))
    add(bitmask(r, 0x0CCC, TX + "Teacher student Status byte"))

    add(number(r, 0x1450, RX + "Internal gyro 1", -360, 360, "%/s", 0.1))
    add(number(r, 0x1451, RX + "Internal gyro 2", -360, 360, "%/s", 0.1))
    add(number(r, 0x1452, RX + "Internal gyro 3", -360, 360, "%/s", 0.1))
    add(number(r, 0x1453, RX + "External gyro 1", -360, 360, "%/s", 0.1))
    add(number(r, 0x1454, RX + "External gyro 2", -360, 360, "%/s", 0.1))
    add(number(r, 0x1455, RX + "Acceleration 1", -10, 10, "g", 0.01))
    add(number(r, 0x1456, RX + "Acceleration 2", -10, 10, "g", 0.01))
    add(number(r, 0x1457, RX + "Acceleration 3", -10, 10, "g", 0.01))
    add(number(r, 0x1459, RX + "Roll", -180, 180, "°", 0.01))
    add(number(r, 0x145A, RX + "Pitch", -180, 180, "°", 0.01))
    add(number(r, 0x14C7, TX + "Roll", -180, 180, "°", 0.01))
    add(number(r, 0x14C8, TX + "Pitch", -180, 180, "°", 0.01))

    add(number(r, 0x1C58, RX + "G-force", 0, 20, "g", 0.01))
    add(number(r, 0x1C5B, RX + "Compass direction", 0, 360, "°", 0.01))
    add(number(r, 0x1C88, TX + "Number of controls", 0, 2048, ""))
    add(number(r, 0x1C8A, TX + "Number of functions", 0, 2048, ""))
    add(number(r, 0x1C8B, TX + "Battery voltage", 0, 20, "V", 0.01))
    add(number(r, 0x1C8D, TX + "Number of functions [1]", 0, 2048, ""))
    add(number(r, 0x1CC9, TX + "Compass direction", 0, 360, "°", 0.01))
    add(bitmask(r, 0x1CCD, TX + "Startup warning"))

    add(timestamp(r, 0x2C80, TX + "UTC"))
    add(bitmask(r, 0x2C86, TX + "Status word TRX"))
    add(bitmask(r, 0x2C87, TX + "Status word HK"))
    add(bitmask(r, 0x2C8E, TX + "Sequencer control"))


def _skynav_packets(r: FieldRegistry) -> None:
    """GPS, channel arrays and the power supply block."""
    skynav_gps(r, 0x6500, RX + "GPS")
    skynav_gps(r, 0x6510, TX + "GPS")

    for side, base_id, first_id in ((TX, 0x6B08, 0x1080), (RX, 0x6B10, 0x1110)):
        for block in range(4):
            first = block * 16 + 1
            skynav_array(r, base_id + block, f"{side}Servo packet {first}-{first + 15}",
                         side + "Servo", 16, first, first_id + block * 0x10,
                         -200, 200, "%", 0.1)

    for block in range(4):
        first = block * 16 + 1
        skynav_array(r, 0x6B00 + block, f"Control data packet {first}-{first + 15}",
                     "Control data", 16, first, 0x1000 + block * 0x10, -100, 100, "%", 0.05)

    for block in range(6):
        first = block * 16 + 1
        skynav_array(r, 0x6B20 + block, f"Function packet {first}-{first + 15}",
                     "Function", 16, first, 0x1200 + block * 0x10, -100, 100, "%", 0.05)

    for block in range(4):
        first = block * 16 + 1
        skynav_array(r, 0x8B18 + block, f"Control ID packet {first}-{first + 15}",
                     "Control ID", 16, first, 0x1980 + block * 0x10, 0, 65000, "%", 0.05)

    power_supply(r, 0x84B0, "Power supply")


def _skynav_sensors(r: FieldRegistry) -> None:
    """External sensors, LinkVario and MUX boards."""
    add = r.add
    add(number(r, 0x0368, SENSOR + "Angle of attack", -45, 45, "°"))
    add(number(r, 0x1361, SENSOR + "Climb rate", -50, 50, "m/s", 0.005))

    for n in range(1, 5):
        off = (n - 1) * 0x20
        s = f"{SENSOR}{n} "
        add(number(r, 0x2381 + off, s + "Current", 0, 20, "A", 0.1))
        add(number(r, 0x1388 + off, s + "Temperature 1", -40, 125, "°C", a=KELVIN))
        add(number(r, 0x1389 + off, s + "Temperature 2", -40, 125, "°C", a=KELVIN))
        add(number(r, 0x238B + off, s + RX + "Current", 0, 20, "A", 0.1))
        add(number(r, 0x1B80 + off, s + "Voltage", 0, 20, "V", 0.01))
        add(number(r, 0x1B82 + off, s + "Power", 0, 100, "KW", 0.001))
        add(number(r, 0x1B83 + off, s + "Capacity", 0, 100, "Ah", 0.01))
        add(number(r, 0x1B8A + off, s + RX + "Voltage", 0, 20, "V", 0.001))
        add(number(r, 0x1B8C + off, s + RX + "Capacity", 0, 100000, "mAh"))
        add(number(r, 0x1B8D + off, s + "PWM", 0, 100, "°", 0.1))
        add(number(r, 0x1B8F + off, s + "Fuel flow", 0, 3000, "ml/min"))
        add(number(r, 0x1B90 + off, s + "Fuel", 0, 6500, "ml", 10.0))  # cl -> ml
        add(number(r, 0x1B91 + off, s + "Fuel quality", 0, 100, "°", 0.1))
        add(number(r, 0x2B84 + off, s + "RPM 1", 0, 42000, "rpm"))
        add(number(r, 0x2B85 + off, s + "RPM 2", 0, 42000, "rpm"))
        add(number(r, 0x2B86 + off, s + "RPM target 1", 0, 42000, "rpm"))
        add(number(r, 0x2B87 + off, s + "RPM target 2", 0, 42000, "rpm"))

    add(number(r, 0x1585, LV + "Temperature", -40, 125, "°C", 0.1, KELVIN))
    add(number(r, 0x4402, LV + "Vario", -50, 50, "m/s", 0.005))
    add(number(r, 0x1D80, LV + "Power source voltage", 0, 20, "V", 0.001))
    add(number(r, 0x1D81, LV + "Motor voltage", 0, 20, "V", 0.001))
    add(number(r, 0x1D82, LV + "Motor current", 0, 20, "A", 0.1))
    add(number(r, 0x1D83, LV + "Used capacity", 0, 100000, "mAh"))
    add(number(r, 0x1D87, LV + "Airspeed", 0, 100, "km/h", 0.36))
    add(number(r, 0x2584, LV + "Barometric height", -1000, 8000, "m", 0.1))
    add(number(r, 0x2588, LV + "Altitude difference absolute", -1000, 8000, "m", 0.1))
    add(number(r, 0x2589, LV + "Altitude difference relative", -300, 300, "m/s", 0.1))

    for n in range(1, 5):
        off = (n - 1) * 0x40
        m = f"{MUX}{n} "
        add(number(r, 0x1606 + off, m + "Temperature PT1000", -200, 850, "°C", 0.1, KELVIN))
        for i, sub in enumerate((0x11, 0x19, 0x21, 0x29, 0x31), start=1):
            add(number(r, 0x1600 + sub + off, m + f"Temperature A{i}",
                       -200, 850, "°C", 0.1, KELVIN))
        add(bitmask(r, 0x0E04 + off, m + "Digital input"))
        add(bitmask(r, 0x0E05 + off, m + "Digital output"))
        add(number(r, 0x1E00 + off, m + "Power source voltage", 0, 20, "V", 0.001))
        add(number(r, 0x1E01 + off, m + "Motor voltage", 0, 20, "V", 0.001))
        add(number(r, 0x1E02 + off, m + "Motor current", 0, 20, "A", 0.01))
        add(number(r, 0x1E03 + off, m + "Capacity", 0, 100000, "mAh"))
        add(number(r, 0x1E10 + off, m + "A1 Voltage", 0, 20, "V", 0.001))
        add(number(r, 0x1E12 + off, m + "A1 Airspeed", 0, 100, "km/h", 0.36))
        add(number(r, 0x1E18 + off, m + "A2 Voltage", 0, 20, "V", 0.001))
        add(number(r, 0x1E20 + off, m + "A3 Voltage", 0, 20, "V", 0.001))
        add(number(r, 0x1E22 + off, m + "A3 Fuel flow", 0, 3000, "ml/min"))
        add(number(r, 0x1E23 + off, m + "A3 Fuel", 0, 6500, "ml"))
        add(number(r, 0x1E28 + off, m + "A4 Voltage", 0, 20, "V", 0.001))
        add(number(r, 0x1E30 + off, m + "A5 Voltage", 0, 20, "V", 0.001))
        add(number(r, 0x2E1A + off, m + "RPM", 0, 42000, "rpm"))

    add(number(r, 0x1B62, SENSOR + "Airspeed", 0, 100, "km/h", 0.36))
    add(number(r, 0x1B64, SENSOR + "Distance pilot", 0, 3000, "m", 0.1))
    add(number(r, 0x1B65, SENSOR + "Ground distance pilot", 0, 3000, "m", 0.1))
    add(number(r, 0x1B66, SENSOR + "Bearing from pilot", 0, 360, "°", 0.1))
    add(number(r, 0x1B69, SENSOR + "G-force", 0, 20, "g", 0.01))

    add(number(r, 0x2360, SENSOR + "Pressure height", -1000, 8000, "m", 0.1))
    add(number(r, 0x2363, SENSOR + "Height from pilot", -1000, 8000, "m", 0.1))
    add(number(r, 0x236A, SENSOR + "Energy", -3000, 3000, "mW/min"))
    add(timestamp(r, 0x2B67, SENSOR + "RTC UTC"))
    add(number(r, 0x2B6B, SENSOR + "Air pressure", 0, 500000, "Pa"))


def populate_skynav(r: FieldRegistry) -> None:
    add = r.add
    _skynav_packets(r)
    _skynav_receivers(r)
    _skynav_sensors(r)

    virtual_array(r, 0x22E0, 0x0001, "Timer packet", "Timer", 16, 0, 86400, "s", 0.1)
    virtual_array(r, 0x22F0, 0x0001, "Last lap timer packet", "Last lap timer", 16,
                  0, 86400, "s", 0.1)
    virtual_array(r, 0x0A80, 0x0001, "Time within sequencer packet", "Time within sequencer",
                  12, 0, 100, "%")

    add(number(r, 0x2522, GPS + "Altitude" + TXRX, -1000, 8000, "m", 0.1))
    add(number(r, 0x1D23, GPS + "Bearing Rx", 0, 360, "°", 0.01))
    add(number(r, 0x1D24, GPS + "Bearing Rx compass", 0, 360, "°", 0.01))
    add(number(r, 0x2D20, GPS + "Distance ground" + TXRX, 0, 3000, "m", 0.1))
    add(number(r, 0x2D21, GPS + "Distance pilot" + TXRX, 0, 3000, "m", 0.1))


CATALOGS: Dict[Protocol, Callable[[FieldRegistry], None]] = {
    Protocol.DV4: populate_dv4,
    Protocol.SKYNAVIGATOR: populate_skynav,
}


def populate_catalog(registry: FieldRegistry) -> None:
    """Fill a registry with the placeholder and its protocol's catalog."""
    registry.add(number(registry, PLACEHOLDER_ID, "Placeholder", 0, 4, ""))
    CATALOGS[registry.protocol](registry)
