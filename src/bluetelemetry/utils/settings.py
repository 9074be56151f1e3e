"""
Application settings persisted through QSettings
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from PyQt6.QtCore import QSettings

from ..communication.transport import DEFAULT_BAUDRATE
from ..models.enums import Protocol

logger = logging.getLogger(__name__)

ORGANIZATION = "Weatronic"
APPLICATION = "BluetoothTelemetry"

KEY_PROTOCOL = "protocol"
KEY_ADDRESS = "lastSuccessfulAddress"
KEY_PORT = "port"
KEY_BAUDRATE = "baudrate"
KEY_LAST_FIELDS = "lastFields"
KEY_TIMEZONE = "timezone"


@dataclass
class AppSettings:
    """User choices that survive a restart."""
    protocol: Protocol = Protocol.DV4
    bluetooth_address: str = ""
    port: str = ""
    baudrate: int = DEFAULT_BAUDRATE
    last_fields: List[str] = field(default_factory=list)
    timezone: str = ""   # empty = local time

    @classmethod
    def load(cls, settings: Optional[QSettings] = None) -> "AppSettings":
        settings = settings if settings is not None else QSettings(ORGANIZATION, APPLICATION)
        try:
            protocol = Protocol(int(settings.value(KEY_PROTOCOL, int(Protocol.DV4))))
        except (TypeError, ValueError):
            logger.warning("Invalid stored protocol, using DV4")
            protocol = Protocol.DV4
        try:
            baudrate = int(settings.value(KEY_BAUDRATE, DEFAULT_BAUDRATE))
        except (TypeError, ValueError):
            baudrate = DEFAULT_BAUDRATE

        fields = settings.value(KEY_LAST_FIELDS, [])
        if isinstance(fields, str):
            fields = [fields] if fields else []

        return cls(
            protocol=protocol,
            bluetooth_address=str(settings.value(KEY_ADDRESS, "") or ""),
            port=str(settings.value(KEY_PORT, "") or ""),
            baudrate=baudrate,
            last_fields=list(fields or []),
            timezone=str(settings.value(KEY_TIMEZONE, "") or ""),
        )

    def save(self, settings: Optional[QSettings] = None):
        settings = settings if settings is not None else QSettings(ORGANIZATION, APPLICATION)
        settings.setValue(KEY_PROTOCOL, int(self.protocol))
        settings.setValue(KEY_ADDRESS, self.bluetooth_address)
        settings.setValue(KEY_PORT, self.port)
        settings.setValue(KEY_BAUDRATE, self.baudrate)
        settings.setValue(KEY_LAST_FIELDS, list(self.last_fields))
        settings.setValue(KEY_TIMEZONE, self.timezone)
        settings.sync()
        logger.debug(f"Settings saved to {settings.fileName()}")
