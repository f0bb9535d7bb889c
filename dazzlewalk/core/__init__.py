"""Core engine for DazzleWalk.

This package contains the binding registry, the per-node dispatcher and
the walker, plus the small data types they share.
"""

from .kinds import Kind, Ref, kind_of, is_nil, deref, is_record, record_fields
from .context import TraversalContext
from .properties import (
    Property,
    PropertyResolver,
    DefaultPropertyResolver,
    MetadataPropertyResolver,
    PropertyCache,
)
from .bindings import (
    Binding,
    BindingCategory,
    BindingTable,
    build_binding_table,
    for_type,
    for_instance,
    for_kind,
    for_container,
    for_nil_pointer,
    for_signed_int,
    for_unsigned_int,
    for_all_kinds,
)
from .frame import VisitFrame
from .dispatch import Dispatcher, Outcome
from .walker import Walker

__all__ = [
    "Kind",
    "Ref",
    "kind_of",
    "is_nil",
    "deref",
    "is_record",
    "record_fields",
    "TraversalContext",
    "Property",
    "PropertyResolver",
    "DefaultPropertyResolver",
    "MetadataPropertyResolver",
    "PropertyCache",
    "Binding",
    "BindingCategory",
    "BindingTable",
    "build_binding_table",
    "for_type",
    "for_instance",
    "for_kind",
    "for_container",
    "for_nil_pointer",
    "for_signed_int",
    "for_unsigned_int",
    "for_all_kinds",
    "VisitFrame",
    "Dispatcher",
    "Outcome",
    "Walker",
]
