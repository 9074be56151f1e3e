"""
Telemetry Session

Owns the registry, parser and encoder of the active protocol. All decoding
and protocol switches go through one re-entrant lock so a transport thread
and the caller issuing commands never touch the registry at the same time.
"""

import logging
import threading
from datetime import tzinfo
from typing import Dict, List, Optional, Sequence

from ..models.enums import Protocol
from ..models.field_ids import PLACEHOLDER_ID
from ..models.registry import FieldRegistry
from .config_encoder import ConfigEncoder
from .parser import MessageParser, ParseResult
from .telemetry_observer import TelemetrySubject, get_telemetry_subject
from .transport import Transport

logger = logging.getLogger(__name__)


class TelemetrySession:
    """
    One decoding context for one protocol selection.

    Usage:
        session = TelemetrySession(Protocol.DV4)
        session.process_line("$PWEAC,FE03,FB01*39")
        session.process_line("$PWEAD0,204E,1F*00")
        print(session.snapshot())
    """

    def __init__(self, protocol: Protocol = Protocol.DV4,
                 subject: Optional[TelemetrySubject] = None,
                 tz: Optional[tzinfo] = None):
        self._lock = threading.RLock()
        self.subject = subject if subject is not None else get_telemetry_subject()
        self.tz = tz
        self._build(protocol)

    def _build(self, protocol: Protocol):
        self.protocol = protocol
        self.registry = FieldRegistry.build(protocol, self.tz)
        self.parser = MessageParser(self.registry, self.subject)
        self.encoder = ConfigEncoder(self.registry)

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def active_field_ids(self) -> List[int]:
        with self._lock:
            return list(self.parser.active_field_ids)

    def process_line(self, line: str) -> ParseResult:
        with self._lock:
            return self.parser.process_message(line)

    def switch_protocol(self, protocol: Protocol):
        """Drop all state and rebuild the catalog for another protocol."""
        with self._lock:
            logger.info(f"Switching protocol {self.protocol.label} -> {protocol.label}")
            self._build(protocol)
        self.subject.notify_protocol(protocol)

    def build_config_command(self, names: Sequence[str]) -> str:
        """
        Raises:
            ConfigResolutionError: If a name is not in the registry
        """
        with self._lock:
            return self.encoder.encode(names)

    def request_fields(self, names: Sequence[str], transport: Transport) -> bool:
        """Ask the device to transmit the given fields, in order."""
        command = self.build_config_command(names)
        sent = transport.send(command.encode("ascii"))
        if sent:
            logger.info(f"Requested {len(names)} fields")
        else:
            logger.warning("Config command could not be sent")
        return sent

    def use_last_config(self) -> List[str]:
        """
        Names of the fields in the current device config.

        Parents of the listed fields are expanded so the names show up in the
        field list.
        """
        with self._lock:
            names = []
            for field_id in self.parser.active_field_ids:
                if field_id == PLACEHOLDER_ID:
                    continue
                field = self.registry.get_by_id(field_id)
                if field is None:
                    continue
                self.registry.expand_parent_of(field_id)
                names.append(field.name)
            return names

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            return self.registry.values()
