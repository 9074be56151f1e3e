"""
Transport and line framing tests
"""

from typing import List, Optional

import pytest

from bluetelemetry.communication.session import TelemetrySession
from bluetelemetry.communication.transport import (
    BluetoothTransport,
    LineFramer,
    SerialTransport,
    TelemetryReader,
    Transport,
    TransportFactory,
)
from bluetelemetry.errors import TransportConnectionError
from bluetelemetry.models.enums import Protocol


class ScriptedTransport(Transport):
    """Transport returning predefined chunks, then hanging up."""

    def __init__(self, chunks: List[bytes]):
        self.chunks = list(chunks)
        self.connected = True
        self.sent = []

    def connect(self) -> bool:
        self.connected = True
        return True

    def disconnect(self):
        self.connected = False

    def send(self, data: bytes) -> bool:
        self.sent.append(data)
        return True

    def read_chunk(self, timeout: float = 0.5) -> Optional[bytes]:
        if not self.chunks:
            self.connected = False
            return None
        return self.chunks.pop(0)

    def is_connected(self) -> bool:
        return self.connected


@pytest.fixture
def loop_port():
    """Serial transport on pyserial's loopback URL: what is sent is read back."""
    transport = SerialTransport("loop://")
    assert transport.connect()
    yield transport
    transport.disconnect()


class TestLineFramer:
    """Test CR LF framing."""

    def test_split_across_chunks(self):
        """Lines may arrive in pieces."""
        framer = LineFramer()
        assert framer.feed(b"$PWEAC,FE") == []
        assert framer.feed(b"03*39\r\n$PWEAD0,204E*00\r") == ["$PWEAC,FE03*39"]
        assert framer.pending == len(b"$PWEAD0,204E*00\r")
        assert framer.feed(b"\n") == ["$PWEAD0,204E*00"]
        assert framer.pending == 0

    def test_several_lines_in_one_chunk(self):
        """All complete lines are returned in order."""
        framer = LineFramer()
        assert framer.feed(b"a\r\nb\r\n\r\nc") == ["a", "b", ""]

    def test_non_ascii_replaced(self):
        """Undecodable bytes become replacement characters."""
        framer = LineFramer()
        assert framer.feed(b"A\xffB\r\n") == ["A�B"]

    def test_overflow(self):
        """Unterminated garbage past the cap is dropped."""
        framer = LineFramer(max_buffer=16)
        assert framer.feed(b"x" * 20) == []
        assert framer.pending == 0
        assert framer.dropped_bytes == 20
        assert framer.feed(b"ok\r\n") == ["ok"]

    def test_iter_lines(self):
        """Chunks can be streamed through the framer."""
        framer = LineFramer()
        assert list(framer.iter_lines([b"a\r", b"\nb\r\n"])) == ["a", "b"]


class TestTransportFactory:
    """Test transport creation from settings dicts."""

    def test_serial(self):
        """Serial config gives a SerialTransport."""
        transport = TransportFactory.create({"type": "Serial", "port": "/dev/rfcomm0",
                                             "baudrate": 57600})
        assert isinstance(transport, SerialTransport)
        assert transport.port == "/dev/rfcomm0"
        assert transport.baudrate == 57600
        assert transport.describe() == "serial /dev/rfcomm0"
        assert not transport.is_connected()

    def test_bluetooth(self):
        """Bluetooth config gives an RFCOMM transport on channel 1."""
        transport = TransportFactory.create({"type": "Bluetooth",
                                             "address": "00:11:22:33:44:55"})
        assert isinstance(transport, BluetoothTransport)
        assert transport.channel == 1
        assert transport.describe() == "Bluetooth 00:11:22:33:44:55 channel 1"

    def test_unknown(self):
        """Unknown types give None."""
        assert TransportFactory.create({"type": "CAN Bus"}) is None

    def test_unconnected_io(self):
        """IO on a closed transport fails quietly."""
        for transport in (SerialTransport("/dev/null-port"),
                          BluetoothTransport("00:11:22:33:44:55")):
            assert transport.send(b"x") is False
            assert transport.read_chunk(0.01) is None
            transport.disconnect()


class TestSerialTransport:
    """Test the serial transport over a loopback port."""

    def test_missing_device(self):
        """A port that does not exist fails to open."""
        transport = SerialTransport("/dev/no-such-rfcomm")
        assert transport.connect() is False
        assert not transport.is_connected()

    def test_reads_stop_at_line_end(self, loop_port):
        """Each read returns one terminated line."""
        assert loop_port.send(b"$PWEAC,FE03*39\r\n$PWEAD0,204E*00\r\n")
        assert loop_port.read_chunk() == b"$PWEAC,FE03*39\r\n"
        assert loop_port.read_chunk() == b"$PWEAD0,204E*00\r\n"

    def test_read_timeout(self, loop_port):
        """Nothing to read gives None and keeps the port open."""
        assert loop_port.read_chunk(timeout=0.05) is None
        assert loop_port.is_connected()

    def test_partial_line(self, loop_port):
        """A line cut by the timeout is completed by the next read."""
        framer = LineFramer()
        loop_port.send(b"$PWEAD0,20")
        assert framer.feed(loop_port.read_chunk(timeout=0.05)) == []
        loop_port.send(b"4E*00\r\n")
        assert framer.feed(loop_port.read_chunk()) == ["$PWEAD0,204E*00"]

    def test_disconnect(self, loop_port):
        """A closed port refuses IO."""
        loop_port.disconnect()
        assert not loop_port.is_connected()
        assert loop_port.send(b"x") is False


class TestTelemetryReader:
    """Test the reader loop."""

    def test_poll_dispatches_lines(self):
        """Each complete line reaches the callback."""
        lines = []
        transport = ScriptedTransport([b"$PWEAC,FE03*00\r\n$PWEAD0,", b"204E*00\r\n"])
        reader = TelemetryReader(transport, lines.append)
        assert reader.poll() == 1
        assert reader.poll() == 1
        assert lines == ["$PWEAC,FE03*00", "$PWEAD0,204E*00"]

    def test_poll_disconnected(self):
        """Polling a closed transport raises."""
        transport = ScriptedTransport([])
        transport.disconnect()
        reader = TelemetryReader(transport, print)
        with pytest.raises(TransportConnectionError):
            reader.poll()

    def test_run_until_hang_up(self):
        """run() returns once the transport goes away, dropping a partial line."""
        lines = []
        transport = ScriptedTransport([b"a\r\n", b"b\r\nhalf"])
        reader = TelemetryReader(transport, lines.append)
        reader.run()
        assert lines == ["a", "b"]
        assert reader.framer.pending == len(b"half")

    def test_thread_stop(self):
        """A started reader can be stopped."""
        transport = ScriptedTransport([])
        reader = TelemetryReader(transport, print)
        reader.stop()
        reader.start()
        reader.join(timeout=2.0)
        assert not reader.is_alive()
        assert reader.stopped

    def test_serial_into_session(self, loop_port, subject):
        """Lines read from a serial link are decoded by a session."""
        session = TelemetrySession(Protocol.DV4, subject)
        reader = TelemetryReader(loop_port, session.process_line, timeout=0.05)
        loop_port.send(b"$PWEAC,FE03*39\r\n$PWEAD0,204E*00\r\n")
        while reader.poll():
            pass
        assert session.snapshot() == {"Tx Voltage": pytest.approx(20.0)}
