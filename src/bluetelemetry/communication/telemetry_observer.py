"""
Telemetry Observer Pattern

Distributes decoded telemetry to observers (instrument views, loggers, the
CLI printer). Observers subscribe to the field ids they display.
"""

from typing import Callable, Dict, List, Optional, Set, Tuple
from PyQt6.QtCore import QObject, pyqtSignal
from abc import ABC, abstractmethod
import logging

logger = logging.getLogger(__name__)


class TelemetryObserver(ABC):
    """
    Abstract base class for telemetry observers.

    Views implement this to receive updates of decoded fields.
    """

    @abstractmethod
    def on_data_updated(self, field_ids: List[int]):
        """
        Called after a data line was decoded.

        Args:
            field_ids: Ids of the fields whose values changed
        """
        pass

    def on_config_changed(self, field_ids: List[int]):
        """Called when the device announces a new active field list."""
        pass

    def on_protocol_changed(self, protocol: int):
        """Called after the registry was rebuilt for another protocol."""
        pass

    def get_subscribed_ids(self) -> Optional[Set[int]]:
        """
        Return the field ids this observer wants to receive.

        Default None receives everything.
        """
        return None


class TelemetrySubject(QObject):
    """
    Subject that distributes telemetry events to observers.

    Uses Qt signals so that updates can be delivered to widgets living on the
    GUI thread.
    """

    data_updated = pyqtSignal(list)       # List[int] field ids
    config_changed = pyqtSignal(list)     # List[int] active field ids
    protocol_changed = pyqtSignal(int)    # Protocol value

    def __init__(self, parent=None):
        super().__init__(parent)
        self._observers: List[TelemetryObserver] = []
        self._callback_observers: Dict[int, Tuple[Callable, Optional[Set[int]]]] = {}
        self._next_sub_id = 1

        self.data_updated.connect(self._distribute_data)
        self.config_changed.connect(self._distribute_config)
        self.protocol_changed.connect(self._distribute_protocol)

    def add_observer(self, observer: TelemetryObserver):
        """Add an observer to receive telemetry updates."""
        if observer not in self._observers:
            self._observers.append(observer)
            logger.debug(f"Added telemetry observer: {observer.__class__.__name__}")

    def remove_observer(self, observer: TelemetryObserver):
        if observer in self._observers:
            self._observers.remove(observer)
            logger.debug(f"Removed telemetry observer: {observer.__class__.__name__}")

    def subscribe(self, callback: Callable[[List[int]], None],
                  field_ids: Optional[Set[int]] = None) -> int:
        """
        Subscribe a callback function to data updates.

        Args:
            callback: Function called with the list of updated field ids
            field_ids: Ids to filter on (default: all)

        Returns:
            Subscription ID for unsubscribing
        """
        sub_id = self._next_sub_id
        self._next_sub_id += 1
        self._callback_observers[sub_id] = (
            callback, set(field_ids) if field_ids is not None else None)
        logger.debug(f"Added callback subscription {sub_id}")
        return sub_id

    def unsubscribe(self, subscription_id: int):
        if subscription_id in self._callback_observers:
            del self._callback_observers[subscription_id]
            logger.debug(f"Removed callback subscription {subscription_id}")

    def notify_data(self, field_ids: List[int]):
        self.data_updated.emit(list(field_ids))

    def notify_config(self, field_ids: List[int]):
        self.config_changed.emit(list(field_ids))

    def notify_protocol(self, protocol: int):
        self.protocol_changed.emit(int(protocol))

    @staticmethod
    def _filter(field_ids: List[int], wanted: Optional[Set[int]]) -> List[int]:
        if wanted is None:
            return field_ids
        return [i for i in field_ids if i in wanted]

    def _call_observers(self, event: str, payload):
        """Invoke one hook on every observer; a failing observer is logged and skipped."""
        for observer in list(self._observers):
            try:
                getattr(observer, event)(payload)
            except Exception as e:
                logger.error(f"{observer.__class__.__name__}.{event} failed: {e}")

    def _distribute_data(self, field_ids: List[int]):
        """Hand updated ids to observers and callbacks, each filtered by its own id set."""
        for observer in list(self._observers):
            try:
                filtered = self._filter(field_ids, observer.get_subscribed_ids())
                if filtered:
                    observer.on_data_updated(filtered)
            except Exception as e:
                logger.error(f"{observer.__class__.__name__}.on_data_updated failed: {e}")

        for sub_id, (callback, wanted) in list(self._callback_observers.items()):
            try:
                filtered = self._filter(field_ids, wanted)
                if filtered:
                    callback(filtered)
            except Exception as e:
                logger.error(f"Error in callback subscription {sub_id}: {e}")

    def _distribute_config(self, field_ids: List[int]):
        self._call_observers("on_config_changed", field_ids)

    def _distribute_protocol(self, protocol: int):
        self._call_observers("on_protocol_changed", protocol)


# Singleton instance for global access
_telemetry_subject: Optional[TelemetrySubject] = None


def get_telemetry_subject() -> TelemetrySubject:
    """Get the global telemetry subject instance."""
    global _telemetry_subject
    if _telemetry_subject is None:
        _telemetry_subject = TelemetrySubject()
    return _telemetry_subject


def reset_telemetry_subject():
    """Reset the global telemetry subject (for testing)."""
    global _telemetry_subject
    _telemetry_subject = None
