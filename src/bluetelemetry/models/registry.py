"""
Field Registry - the catalog of every known field for one protocol

The registry owns all fields in one table keyed by id. Composite fields refer
to their children by id and children refer back to their parent by id, so
there are no reference cycles between field objects.
"""

import logging
from datetime import tzinfo
from typing import Dict, Iterator, List, Optional

from ..errors import RegistryError, UnknownField, UndersizedValue
from .enums import DataType, Protocol
from .field_ids import PLACEHOLDER_ID, id_to_type
from .fields import CompositeField, DecodeResult, SimpleField, TelemetryField

logger = logging.getLogger(__name__)


class FieldRegistry:
    """
    Catalog of fields for one protocol, keyed by numeric id.

    Usage:
        registry = FieldRegistry.build(Protocol.DV4)
        field = registry.get_by_name("Tx Voltage")
        registry.set_raw(field.field_id, "204E")
        print(field.value)
    """

    def __init__(self, protocol: Protocol, tz: Optional[tzinfo] = None):
        self.protocol = protocol
        self.tz = tz
        self._fields: Dict[int, TelemetryField] = {}
        self._name_to_id: Dict[str, int] = {}

    @classmethod
    def build(cls, protocol: Protocol, tz: Optional[tzinfo] = None) -> "FieldRegistry":
        """
        Build the full catalog for a protocol.

        Args:
            protocol: Protocol whose catalog to build
            tz: Time zone for timestamp fields (None = local time)

        Raises:
            RegistryError: On duplicate ids or names in the catalog tables
        """
        from .catalog import populate_catalog

        registry = cls(protocol, tz)
        populate_catalog(registry)
        logger.info(f"Built {protocol.label} registry with {len(registry)} fields")
        return registry

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def type_of(self, field_id: int) -> DataType:
        """Data type encoded in an id under this registry's protocol."""
        return id_to_type(field_id, self.protocol)

    def add(self, field: TelemetryField) -> TelemetryField:
        """
        Register a field.

        Raises:
            RegistryError: If the id or the name is already taken
        """
        if field.field_id in self._fields:
            existing = self._fields[field.field_id]
            raise RegistryError(
                f"Duplicate field id 0x{field.field_id:X}: {field.name!r} vs {existing.name!r}")
        if field.name in self._name_to_id:
            raise RegistryError(f"Duplicate field name {field.name!r}")
        self._fields[field.field_id] = field
        self._name_to_id[field.name] = field.field_id
        return field

    def add_composite(self, composite: CompositeField,
                      children: List[SimpleField]) -> CompositeField:
        """
        Register a composite with its children.

        Children are registered first; parent links are filled in afterwards
        and only where a child has no parent yet.
        """
        for child in children:
            self.add(child)
            composite.children.append(child.field_id)
        self.add(composite)

        for child_id in composite.children:
            child = self._fields[child_id]
            if child.parent_id is None:
                child.parent_id = composite.field_id
        composite.payload_width = sum(self._fields[c].byte_width for c in composite.children)
        return composite

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_by_id(self, field_id: int) -> Optional[TelemetryField]:
        """Return the field with this id, or None."""
        return self._fields.get(field_id)

    def get_by_name(self, name: str) -> Optional[TelemetryField]:
        """Return the field with this name, or None."""
        field_id = self._name_to_id.get(name)
        if field_id is None:
            return None
        return self._fields.get(field_id)

    def id_for_name(self, name: str) -> Optional[int]:
        return self._name_to_id.get(name)

    def children_of(self, composite: CompositeField) -> List[SimpleField]:
        """Resolve a composite's child ids in declaration order."""
        return [self._fields[c] for c in composite.children if c in self._fields]

    def parent_of(self, field: TelemetryField) -> Optional[CompositeField]:
        if field.parent_id is None:
            return None
        return self._fields.get(field.parent_id)

    def composites(self) -> List[CompositeField]:
        return [f for f in self._fields.values() if f.is_composite]

    def names(self) -> List[str]:
        return list(self._name_to_id)

    def ids(self) -> List[int]:
        return list(self._fields)

    def simple_ids(self) -> List[int]:
        """Ids of all simple fields except the placeholder."""
        return [
            f.field_id for f in self._fields.values()
            if not f.is_composite and f.field_id != PLACEHOLDER_ID
        ]

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, field_id: int) -> bool:
        return field_id in self._fields

    def __iter__(self) -> Iterator[TelemetryField]:
        return iter(list(self._fields.values()))

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def set_raw(self, field_id: int, payload: str) -> DecodeResult:
        """
        Write a little-endian hex payload into a field.

        Unknown ids, payloads under one byte and malformed hex leave every
        value untouched; the returned result carries the reason.
        """
        field = self._fields.get(field_id)
        if field is None:
            return DecodeResult(field_id, None,
                                UnknownField(f"Unknown field id 0x{field_id:X}", field_id))
        if len(payload) < 2:
            value = None if field.is_composite else field.value
            return DecodeResult(field_id, value,
                                UndersizedValue(f"Payload too short: {payload!r}", field_id))
        if field.is_composite:
            return field.set_values(payload, self.children_of(field))
        return field.set_hex(payload)

    def expand_parent_of(self, field_id: int) -> Optional[CompositeField]:
        """Mark the parent composite of a field as expanded."""
        field = self._fields.get(field_id)
        if field is None:
            return None
        parent = self.parent_of(field)
        if parent is not None:
            parent.expanded = True
        return parent

    def clear_values(self) -> None:
        """Forget all decoded values (catalog stays)."""
        for field in self._fields.values():
            if not field.is_composite:
                field.raw = None
                field.value = None

    def values(self) -> Dict[str, object]:
        """Map of name to display value for every field that has one."""
        return {
            f.name: f.value for f in self._fields.values()
            if not f.is_composite and f.value is not None
        }

    def describe(self, field_id: int) -> str:
        field = self._fields.get(field_id)
        if field is None:
            return f"0x{field_id:X} (unknown)"
        kind = "composite" if field.is_composite else type(field).__name__
        return f"0x{field_id:X} {field.name} [{kind}, {field.data_type.name}]"
