"""Record property resolution for DazzleWalk.

When the walker enters a record (a dataclass or namedtuple instance) it
asks a PropertyResolver which fields to visit, in what order, and how many
slots the record reports as its size. Resolvers are pluggable through
WalkConfig.property_resolver.

Resolution is a per-type decision: the walker caches the first result for
each record type in a PropertyCache and never recomputes it.
"""

import dataclasses
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..errors import PropertyOrderError
from .kinds import record_fields


@dataclass(frozen=True)
class Property:
    """One record field as seen by the walker.

    Attributes:
        index: Declaration index of the field on the record, or None when
            the field has no storage slot (the walker skips it)
        name: Display name passed to callbacks
        order: Explicit final position, or None when unset
    """
    index: Optional[int]
    name: str
    order: Optional[int] = None


class PropertyResolver(ABC):
    """Strategy deciding which fields of a record are visited."""

    @abstractmethod
    def properties(self, record: Any) -> Tuple[int, List[Property]]:
        """Resolve the visitable fields of a record.

        Args:
            record: The record instance first encountered for its type

        Returns:
            Tuple of (size, properties) where size is the slot count the
            record reports to its container binding
        """
        pass


class DefaultPropertyResolver(PropertyResolver):
    """Visit every public field in declaration order.

    Fields whose name starts with an underscore are private and skipped.
    The size is the number of visited fields.
    """

    def properties(self, record: Any) -> Tuple[int, List[Property]]:
        props = [
            Property(index=i, name=name)
            for i, name in enumerate(record_fields(type(record)))
            if not name.startswith("_")
        ]
        return len(props), props


class MetadataPropertyResolver(PropertyResolver):
    """Order and filter dataclass fields using field metadata.

    Example:
        @dataclass
        class Header:
            version: int = field(default=1, metadata={"order": 0})
            flags: int = field(default=0, metadata={"order": 3})
            cache: dict = field(default_factory=dict, metadata={"ignore": True})
            length: int = 0

    Fields with an explicit order sort by it, the others by their
    declaration index; ties keep declaration order. Unset orders are then
    renumbered to their final position. An explicit order lower than the
    final position it lands on is an error, as is a negative or
    non-integer order. The reported size is the last final order plus one,
    so explicit gaps are counted as slots.

    Namedtuples carry no metadata and resolve to all public fields in
    declaration order.
    """

    def __init__(self, order_key: str = "order", ignore_key: str = "ignore",
                 name_key: str = "name"):
        self.order_key = order_key
        self.ignore_key = ignore_key
        self.name_key = name_key

    def properties(self, record: Any) -> Tuple[int, List[Property]]:
        record_type = type(record)
        props = []
        for index, name, metadata in self._declared_fields(record_type):
            if name.startswith("_") or metadata.get(self.ignore_key):
                continue
            order = metadata.get(self.order_key)
            if order is not None and (isinstance(order, bool) or not isinstance(order, int) or order < 0):
                raise PropertyOrderError(
                    f"illegal {self.order_key} ({order!r}) for field {name} "
                    f"of type {record_type.__qualname__}",
                    record_type=record_type,
                    field_name=name,
                )
            props.append(Property(index=index, name=metadata.get(self.name_key, name), order=order))

        # sorted() is stable, declaration index breaks remaining ties
        props = sorted(props, key=lambda p: (p.index if p.order is None else p.order, p.index))

        final = []
        for position, prop in enumerate(props):
            if prop.order is None:
                prop = Property(index=prop.index, name=prop.name, order=position)
            elif prop.order < position:
                raise PropertyOrderError(
                    f"illegal {self.order_key} ({prop.order}) for field {prop.name} "
                    f"of type {record_type.__qualname__}, should >= {position}",
                    record_type=record_type,
                    field_name=prop.name,
                )
            final.append(prop)

        size = final[-1].order + 1 if final else 0
        return size, final

    @staticmethod
    def _declared_fields(record_type: type):
        if dataclasses.is_dataclass(record_type):
            for index, f in enumerate(dataclasses.fields(record_type)):
                yield index, f.name, f.metadata
        else:
            for index, name in enumerate(record_fields(record_type)):
                yield index, name, {}


class PropertyCache:
    """Thread-safe per-type cache of resolved properties.

    Each record type is resolved at most once, even when several threads
    share the same Walker. A resolver that raises leaves nothing cached.
    """

    def __init__(self, resolver: PropertyResolver):
        self.resolver = resolver
        self._entries: Dict[type, Tuple[int, Tuple[Property, ...]]] = {}
        self._lock = threading.Lock()

    def lookup(self, record: Any) -> Tuple[int, Tuple[Property, ...]]:
        """Return (size, properties) for the record's type, resolving on first use."""
        record_type = type(record)
        entry = self._entries.get(record_type)
        if entry is not None:
            return entry
        with self._lock:
            entry = self._entries.get(record_type)
            if entry is None:
                size, props = self.resolver.properties(record)
                entry = (size, tuple(props))
                self._entries[record_type] = entry
        return entry

    def __len__(self) -> int:
        return len(self._entries)
