"""
Config command encoder

Builds the $PWEAXX request that tells the link which fields to transmit:
    $PWEAXX,FE03,FB01\r\n
"""

import logging
from typing import Iterable, List, Sequence

from ..errors import ConfigResolutionError
from ..models.registry import FieldRegistry
from .parser import LINE_TERMINATOR, REQUEST_TAG, TOKEN_SEPARATOR

logger = logging.getLogger(__name__)


class ConfigEncoder:
    """Turns ordered field names (or ids) into an outbound config command."""

    def __init__(self, registry: FieldRegistry):
        self.registry = registry

    def resolve(self, names: Sequence[str]) -> List[int]:
        """
        Map names to ids, keeping order.

        Raises:
            ConfigResolutionError: For the first name that is not in the registry
        """
        ids = []
        for position, name in enumerate(names):
            field_id = self.registry.id_for_name(name)
            if field_id is None:
                raise ConfigResolutionError(name, position)
            ids.append(field_id)
        return ids

    def encode(self, names: Sequence[str]) -> str:
        return self.encode_ids(self.resolve(names))

    @staticmethod
    def encode_ids(field_ids: Iterable[int]) -> str:
        body = "".join(f"{TOKEN_SEPARATOR}{field_id:X}" for field_id in field_ids)
        command = REQUEST_TAG + body + LINE_TERMINATOR
        logger.debug(f"Config command: {command.strip()}")
        return command
