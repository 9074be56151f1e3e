"""
Telemetry observer tests
"""

import logging

from bluetelemetry.communication.telemetry_observer import (
    TelemetryObserver,
    TelemetrySubject,
    get_telemetry_subject,
    reset_telemetry_subject,
)


class RecordingObserver(TelemetryObserver):
    """Observer that keeps everything it receives."""

    def __init__(self, wanted=None):
        self.wanted = wanted
        self.data = []
        self.configs = []
        self.protocols = []

    def on_data_updated(self, field_ids):
        self.data.append(field_ids)

    def on_config_changed(self, field_ids):
        self.configs.append(field_ids)

    def on_protocol_changed(self, protocol):
        self.protocols.append(protocol)

    def get_subscribed_ids(self):
        return self.wanted


class BrokenObserver(TelemetryObserver):
    def on_data_updated(self, field_ids):
        raise RuntimeError("boom")


class TestObservers:
    """Test class based observers."""

    def test_receives_all_by_default(self, subject):
        """No filter means every update."""
        observer = RecordingObserver()
        subject.add_observer(observer)
        subject.notify_data([1, 2, 3])
        assert observer.data == [[1, 2, 3]]

    def test_filtered(self, subject):
        """Only subscribed ids are delivered; empty results are skipped."""
        observer = RecordingObserver(wanted={2})
        subject.add_observer(observer)
        subject.notify_data([1, 2, 3])
        subject.notify_data([4])
        assert observer.data == [[2]]

    def test_config_and_protocol(self, subject):
        """Config and protocol events reach observers."""
        observer = RecordingObserver()
        subject.add_observer(observer)
        subject.notify_config([0xFE03])
        subject.notify_protocol(1)
        assert observer.configs == [[0xFE03]]
        assert observer.protocols == [1]

    def test_add_twice_and_remove(self, subject):
        """Observers are registered once and can be removed."""
        observer = RecordingObserver()
        subject.add_observer(observer)
        subject.add_observer(observer)
        subject.notify_data([1])
        subject.remove_observer(observer)
        subject.notify_data([2])
        assert observer.data == [[1]]

    def test_errors_are_logged(self, subject, caplog):
        """A failing observer does not stop the others."""
        observer = RecordingObserver()
        subject.add_observer(BrokenObserver())
        subject.add_observer(observer)
        with caplog.at_level(logging.ERROR):
            subject.notify_data([7])
        assert observer.data == [[7]]
        assert "boom" in caplog.text


class TestCallbacks:
    """Test callback subscriptions."""

    def test_subscribe_unsubscribe(self, subject):
        """Subscriptions get distinct ids and can be cancelled."""
        received = []
        sub_a = subject.subscribe(received.append)
        sub_b = subject.subscribe(received.append, field_ids={5})
        assert sub_a != sub_b

        subject.notify_data([5, 6])
        assert received == [[5, 6], [5]]

        subject.unsubscribe(sub_a)
        subject.unsubscribe(sub_b)
        subject.notify_data([5])
        assert received == [[5, 6], [5]]

    def test_callback_error_logged(self, subject, caplog):
        """Callback exceptions are logged."""
        def broken(ids):
            raise ValueError("bad callback")

        subject.subscribe(broken)
        with caplog.at_level(logging.ERROR):
            subject.notify_data([1])
        assert "bad callback" in caplog.text


class TestSingleton:
    """Test global subject access."""

    def test_same_instance(self, qapp):
        """get returns one instance until reset."""
        first = get_telemetry_subject()
        assert get_telemetry_subject() is first
        assert isinstance(first, TelemetrySubject)
        reset_telemetry_subject()
        assert get_telemetry_subject() is not first
