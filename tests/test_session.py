"""
Telemetry session tests
"""

import threading

import pytest

from bluetelemetry.communication.session import TelemetrySession
from bluetelemetry.communication.telemetry_observer import get_telemetry_subject
from bluetelemetry.errors import ConfigResolutionError
from bluetelemetry.models.enums import Protocol
from bluetelemetry.models.field_list import collapse_all


class RecordingTransport:
    """Stand-in transport that records sent data."""

    def __init__(self, ok=True):
        self.ok = ok
        self.sent = []

    def send(self, data: bytes) -> bool:
        self.sent.append(data)
        return self.ok


class CountingSubject:
    """Plain subject stand-in, usable from worker threads."""

    def __init__(self):
        self.data = 0

    def notify_data(self, field_ids):
        self.data += 1

    def notify_config(self, field_ids):
        pass

    def notify_protocol(self, protocol):
        pass


class TestTelemetrySession:
    """Test the session context."""

    def test_process_line(self, subject):
        """Lines are decoded into the session's registry."""
        session = TelemetrySession(Protocol.DV4, subject)
        session.process_line("$PWEAC,FE03,FB01*39")
        session.process_line("$PWEAD0,204E,1F*00")
        assert session.active_field_ids == [0xFE03, 0xFB01]
        assert session.snapshot() == {
            "Tx Voltage": pytest.approx(20.0),
            "Rx RSSI 1": pytest.approx(15.5),
        }

    def test_default_subject(self, qapp):
        """Without a subject the global one is used."""
        session = TelemetrySession(Protocol.DV4)
        assert session.subject is get_telemetry_subject()

    def test_switch_protocol(self, subject):
        """Switching rebuilds everything and notifies."""
        changes = []
        subject.protocol_changed.connect(changes.append)

        session = TelemetrySession(Protocol.DV4, subject)
        old_registry = session.registry
        session.process_line("$PWEAC,FE03*00")
        session.process_line("$PWEAD0,204E*00")

        session.switch_protocol(Protocol.SKYNAVIGATOR)
        assert session.protocol is Protocol.SKYNAVIGATOR
        assert session.registry is not old_registry
        assert session.registry.get_by_id(0xFE03) is None
        assert session.active_field_ids == []
        assert session.snapshot() == {}
        assert changes == [int(Protocol.SKYNAVIGATOR)]

    def test_build_config_command(self, subject):
        """Commands are built from the active catalog."""
        session = TelemetrySession(Protocol.DV4, subject)
        assert session.build_config_command(["Tx Voltage"]) == "$PWEAXX,FE03\r\n"
        with pytest.raises(ConfigResolutionError):
            session.build_config_command(["Rx GPS"])

    def test_request_fields(self, subject):
        """The encoded command is sent as ASCII bytes."""
        session = TelemetrySession(Protocol.DV4, subject)
        transport = RecordingTransport()
        assert session.request_fields(["Tx Voltage", "Rx RSSI 1"], transport)
        assert transport.sent == [b"$PWEAXX,FE03,FB01\r\n"]

    def test_request_fields_send_failure(self, subject):
        """A failed send is reported."""
        session = TelemetrySession(Protocol.DV4, subject)
        assert not session.request_fields(["Tx Voltage"], RecordingTransport(ok=False))

    def test_use_last_config(self, subject):
        """Known active fields are listed and their parents expanded."""
        session = TelemetrySession(Protocol.DV4, subject)
        session.process_line("$PWEAC,FE03,E812,0,1234*00")
        collapse_all(session.registry)

        names = session.use_last_config()
        assert names == ["Tx Voltage", "Gyro 1"]
        assert session.registry.get_by_name("Gyro packet").expanded

    def test_serialized_access(self):
        """Lines from several threads are all processed."""
        session = TelemetrySession(Protocol.DV4, CountingSubject())
        session.process_line("$PWEAC,FE03*00")

        def feed():
            for _ in range(50):
                session.process_line("$PWEAD0,204E*00")

        threads = [threading.Thread(target=feed) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert session.parser.stats.data == 200
