"""
Communication Package

Turns the receiver's text stream into decoded field values and builds the
commands sent back to it.

Modules:
    parser: $PWEAC / $PWEAD line state machine
    config_encoder: $PWEAXX request builder
    session: Lock-guarded registry + parser context
    telemetry_observer: Qt signal based update distribution
    transport: Serial and Bluetooth links, line framing
    device_simulator: Synthetic telemetry source

Example usage:
    from bluetelemetry.communication import TelemetrySession, TransportFactory
    from bluetelemetry.models import Protocol

    session = TelemetrySession(Protocol.DV4)
    transport = TransportFactory.create({"type": "Serial", "port": "/dev/rfcomm0"})
    transport.connect()
    session.request_fields(["Tx Voltage", "Rx RSSI 1"], transport)
"""

from .parser import MessageParser, ParseKind, ParseResult, ParserStats
from .config_encoder import ConfigEncoder
from .telemetry_observer import (
    TelemetryObserver,
    TelemetrySubject,
    get_telemetry_subject,
    reset_telemetry_subject,
)
from .transport import (
    BluetoothTransport,
    LineFramer,
    SerialTransport,
    TelemetryReader,
    Transport,
    TransportFactory,
)
from .session import TelemetrySession
from .device_simulator import DeviceSimulator, checksum

__all__ = [
    'MessageParser',
    'ParseKind',
    'ParseResult',
    'ParserStats',
    'ConfigEncoder',
    'TelemetryObserver',
    'TelemetrySubject',
    'get_telemetry_subject',
    'reset_telemetry_subject',
    'BluetoothTransport',
    'LineFramer',
    'SerialTransport',
    'TelemetryReader',
    'Transport',
    'TransportFactory',
    'TelemetrySession',
    'DeviceSimulator',
    'checksum',
]
