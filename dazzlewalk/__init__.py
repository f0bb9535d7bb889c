"""DazzleWalk - Binding-driven depth-first value traversal.

DazzleWalk walks arbitrary nested Python values (dataclasses, namedtuples,
tuples, lists, sets, dicts and references) and calls back into an adapter
at every node. The adapter declares what it handles with decorators; the
engine resolves, per node, the single binding that applies and lets it
decide whether to descend.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from dazzlewalk import Kind, for_kind, for_container, walk

    class Counter:
        @for_kind(Kind.INT)
        def on_int(self, ctx, depth, offset, name, value):
            total, _ = ctx.get_local("total")
            ctx.set_local("total", (total or 0) + value)
            return False

        @for_container(Kind.SEQUENCE)
        def on_list(self, ctx, depth, offset, size, is_start, name, value):
            return True

    ctx = walk(Counter(), [1, 2, 3])
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .errors import (
    WalkError,
    ConstructionError,
    InvalidAdapterError,
    DuplicateBindingError,
    NoBindingError,
    ConfigurationError,
    PropertyOrderError,
    TraversalError,
    BindingMissingError,
    BindingReturnError,
    CallbackError,
    InvariantViolation,
)
from .core import (
    Kind,
    Ref,
    kind_of,
    TraversalContext,
    Property,
    PropertyResolver,
    DefaultPropertyResolver,
    MetadataPropertyResolver,
    Binding,
    BindingCategory,
    BindingTable,
    for_type,
    for_instance,
    for_kind,
    for_container,
    for_nil_pointer,
    for_signed_int,
    for_unsigned_int,
    for_all_kinds,
    VisitFrame,
    Walker,
)
from .config import WalkConfig
from .api import build, traverse, walk

__all__ = [
    "__version__",
    # Errors
    "WalkError",
    "ConstructionError",
    "InvalidAdapterError",
    "DuplicateBindingError",
    "NoBindingError",
    "ConfigurationError",
    "PropertyOrderError",
    "TraversalError",
    "BindingMissingError",
    "BindingReturnError",
    "CallbackError",
    "InvariantViolation",
    # Core
    "Kind",
    "Ref",
    "kind_of",
    "TraversalContext",
    "Property",
    "PropertyResolver",
    "DefaultPropertyResolver",
    "MetadataPropertyResolver",
    "Binding",
    "BindingCategory",
    "BindingTable",
    "for_type",
    "for_instance",
    "for_kind",
    "for_container",
    "for_nil_pointer",
    "for_signed_int",
    "for_unsigned_int",
    "for_all_kinds",
    "VisitFrame",
    "Walker",
    # Config
    "WalkConfig",
    # API
    "build",
    "traverse",
    "walk",
]
