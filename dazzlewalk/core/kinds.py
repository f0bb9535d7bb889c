"""Structural kinds for DazzleWalk.

Every value met during a walk is classified into exactly one Kind. Kinds
are what kind bindings and container bindings target, and they decide how
the walker enumerates a container's children.

Python has no pointers, so references are modelled explicitly with Ref.
A Ref whose target is None, or a bare None found inside a container, is a
nil reference.
"""

import dataclasses
from collections.abc import Mapping, Sequence, Set
from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar


T = TypeVar("T")


class Kind(Enum):
    """Closed set of structural kinds a value can have."""
    BOOL = "bool"
    INT = "int"              # Python int and fixed-width signed integers
    UINT = "uint"            # Fixed-width unsigned integers
    FLOAT = "float"
    COMPLEX = "complex"
    STR = "str"
    BYTES = "bytes"
    ARRAY = "array"          # tuple
    SEQUENCE = "sequence"    # list and other sequences
    SET = "set"
    MAP = "map"              # dict and other mappings
    RECORD = "record"        # dataclass or namedtuple instance
    POINTER = "pointer"      # Ref or bare None
    OBJECT = "object"        # anything else

    @property
    def is_container(self) -> bool:
        """True if values of this kind have children the walker can enter."""
        return self in _CONTAINERS


_CONTAINERS = frozenset({
    Kind.ARRAY,
    Kind.SEQUENCE,
    Kind.SET,
    Kind.MAP,
    Kind.RECORD,
    Kind.POINTER,
})

# ctypes single-character type codes
_CTYPES_SIGNED = frozenset("bhilq")
_CTYPES_UNSIGNED = frozenset("BHILQ")
_CTYPES_FLOAT = frozenset("fdg")

# numpy-style dtype.kind codes for zero-dimensional scalars
_DTYPE_KINDS = {
    "b": Kind.BOOL,
    "i": Kind.INT,
    "u": Kind.UINT,
    "f": Kind.FLOAT,
    "c": Kind.COMPLEX,
}


class Ref(Generic[T]):
    """Explicit reference to a value, possibly nil.

    The walker treats a Ref as a single-child container. With reference
    auto-unwrap enabled, a non-nil Ref is transparently replaced by its
    target.
    """

    __slots__ = ("target",)

    def __init__(self, target: Optional[T] = None):
        self.target = target

    @property
    def is_nil(self) -> bool:
        return self.target is None

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self.target == other.target

    def __hash__(self) -> int:
        return hash((Ref, self.target))

    def __repr__(self) -> str:
        return f"Ref({self.target!r})"


def kind_of(value: Any) -> Kind:
    """Classify a value into its Kind.

    Args:
        value: Any Python value

    Returns:
        The Kind of the value
    """
    if value is None or isinstance(value, Ref):
        return Kind.POINTER
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, int):
        return Kind.INT
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, complex):
        return Kind.COMPLEX
    if isinstance(value, str):
        return Kind.STR
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Kind.BYTES

    fixed = _fixed_width_kind(value)
    if fixed is not None:
        return fixed

    if is_record(value):
        return Kind.RECORD
    if isinstance(value, tuple):
        return Kind.ARRAY
    if isinstance(value, Mapping):
        return Kind.MAP
    if isinstance(value, Set):
        return Kind.SET
    if isinstance(value, Sequence):
        return Kind.SEQUENCE
    return Kind.OBJECT


def _fixed_width_kind(value: Any) -> Optional[Kind]:
    """Recognise ctypes and numpy-style fixed-width scalars without importing either."""
    code = getattr(type(value), "_type_", None)
    if isinstance(code, str) and len(code) == 1 and hasattr(value, "value"):
        if code in _CTYPES_SIGNED:
            return Kind.INT
        if code in _CTYPES_UNSIGNED:
            return Kind.UINT
        if code in _CTYPES_FLOAT:
            return Kind.FLOAT
        if code == "?":
            return Kind.BOOL

    dtype = getattr(value, "dtype", None)
    if dtype is not None and getattr(value, "ndim", None) == 0:
        return _DTYPE_KINDS.get(getattr(dtype, "kind", None))
    return None


def is_record(value: Any) -> bool:
    """True for dataclass instances and namedtuple instances."""
    if isinstance(value, type):
        return False
    if dataclasses.is_dataclass(value):
        return True
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def is_nil(value: Any) -> bool:
    """True for a bare None or a Ref without a target."""
    return value is None or (isinstance(value, Ref) and value.target is None)


def deref(value: Any) -> Any:
    """Return the target of a reference (None for a nil reference)."""
    if isinstance(value, Ref):
        return value.target
    if value is None:
        return None
    raise TypeError(f"{type(value).__qualname__} is not a reference")


def record_fields(record_type: type) -> List[str]:
    """Return the field names of a record type in declaration order.

    Args:
        record_type: A dataclass or namedtuple class

    Returns:
        Field names, including private ones
    """
    if dataclasses.is_dataclass(record_type):
        return [f.name for f in dataclasses.fields(record_type)]
    fields = getattr(record_type, "_fields", None)
    if fields is None:
        raise TypeError(f"{record_type.__qualname__} is not a record type")
    return list(fields)


def record_field_value(record: Any, index: int) -> Any:
    """Read the field at a declaration index from a record instance."""
    if isinstance(record, tuple):
        return record[index]
    name = record_fields(type(record))[index]
    return getattr(record, name)
