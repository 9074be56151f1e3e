"""
Telemetry Device Simulator

Produces well formed $PWEAC / $PWEAD0 lines for a random set of fields so the
decoder can be exercised without a receiver. Also answers $PWEAXX requests
the way the link does: by announcing the requested fields as the new config.
"""

import logging
import random
from typing import Iterator, List, Optional, Sequence

from ..models.field_ids import PLACEHOLDER_ID
from ..models.registry import FieldRegistry
from .parser import (
    CHECKSUM_DELIMITER,
    CONFIG_TAG,
    LINE_TERMINATOR,
    REQUEST_TAG,
    TOKEN_SEPARATOR,
    parse_field_id,
    tokenize,
)

logger = logging.getLogger(__name__)

DATA_TAG = "$PWEAD0"
DEFAULT_FIELD_COUNT = 10


def checksum(body: str) -> str:
    """NMEA style checksum: XOR of the characters between '$' and '*'."""
    value = 0
    for ch in body.lstrip("$"):
        value ^= ord(ch)
    return f"{value:02X}"


def frame(body: str) -> str:
    """Append the checksum delimiter and checksum to a message body."""
    return f"{body}{CHECKSUM_DELIMITER}{checksum(body)}"


class DeviceSimulator:
    """
    Simulated link module.

    Usage:
        sim = DeviceSimulator(registry, seed=1)
        for line in sim.lines(5):
            session.process_line(line)
    """

    def __init__(self, registry: FieldRegistry, seed: Optional[int] = None):
        self.registry = registry
        self._random = random.Random(seed)
        self.field_ids: List[int] = []

    def random_config(self, count: int = DEFAULT_FIELD_COUNT) -> List[int]:
        """Pick random simple fields (never the placeholder) as the active set."""
        candidates = self.registry.simple_ids()
        count = min(count, len(candidates))
        self.field_ids = self._random.sample(candidates, count)
        logger.debug(f"Simulated config: {', '.join(f'{i:X}' for i in self.field_ids)}")
        return list(self.field_ids)

    def set_config(self, field_ids: Sequence[int]):
        self.field_ids = list(field_ids)

    def config_line(self) -> str:
        if not self.field_ids:
            self.random_config()
        body = CONFIG_TAG + "".join(f"{TOKEN_SEPARATOR}{i:X}" for i in self.field_ids)
        return frame(body)

    def _random_payload(self, field_id: int) -> str:
        field = self.registry.get_by_id(field_id)
        width = field.byte_width if field is not None else 1
        return "".join(self._random.choice("0123456789ABCDEF") for _ in range(width * 2))

    def data_line(self) -> str:
        if not self.field_ids:
            self.random_config()
        body = DATA_TAG + "".join(
            f"{TOKEN_SEPARATOR}{self._random_payload(i)}" for i in self.field_ids)
        return frame(body)

    def lines(self, count: int) -> Iterator[str]:
        """The config line followed by count data lines."""
        yield self.config_line()
        for _ in range(count):
            yield self.data_line()

    def handle_command(self, command: str) -> Optional[str]:
        """
        Answer a $PWEAXX request with the matching config line.

        Returns:
            The new config line, or None for anything that is not a request
        """
        tokens = tokenize(command.strip())
        if not tokens or tokens[0] != REQUEST_TAG:
            logger.debug(f"Simulator ignoring command {command!r}")
            return None
        ids = [parse_field_id(t) for t in tokens[1:]]
        self.set_config([i for i in ids if i != PLACEHOLDER_ID])
        return self.config_line()

    def stream(self, count: int) -> bytes:
        """Raw CR LF framed bytes as a transport would deliver them."""
        return "".join(line + LINE_TERMINATOR for line in self.lines(count)).encode("ascii")
