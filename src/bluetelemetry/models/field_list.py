"""
Field list - flattened, sorted view of the registry for field selection

Top-level fields are always listed; children appear only while their parent
composite is expanded.
"""

import logging
from typing import List

from ..errors import UnknownField
from ..utils.name_sort import sorted_names
from .field_ids import PLACEHOLDER_ID
from .registry import FieldRegistry

logger = logging.getLogger(__name__)


def visible_field_names(registry: FieldRegistry) -> List[str]:
    """Names a user can currently pick from, in number-aware order."""
    names = []
    for field in registry:
        if field.field_id == PLACEHOLDER_ID:
            continue
        parent = registry.parent_of(field)
        if parent is None or parent.expanded:
            names.append(field.name)
    return sorted_names(names)


def toggle_expanded(registry: FieldRegistry, name: str) -> bool:
    """
    Flip the expanded flag of a composite.

    Returns:
        The new flag value

    Raises:
        UnknownField: If the name is unknown or not a composite
    """
    field = registry.get_by_name(name)
    if field is None or not field.is_composite:
        raise UnknownField(f"No composite field named {name!r}")
    field.expanded = not field.expanded
    logger.debug(f"{name} {'expanded' if field.expanded else 'collapsed'}")
    return field.expanded


def collapse_all(registry: FieldRegistry) -> None:
    for composite in registry.composites():
        composite.expanded = False
