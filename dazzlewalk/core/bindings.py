"""Binding registry for DazzleWalk.

An adapter is any object whose class declares callbacks with the binding
decorators in this module. When a Walker is built, build_binding_table()
inspects the adapter once and classifies every decorated callback into a
BindingCategory, producing an immutable BindingTable the dispatcher reads
for the rest of the Walker's lifetime.

Callback shapes (positional, after self):

    exact type / instance / kind   (ctx, depth, offset, name, value) -> bool
    container                      (ctx, depth, offset, size, is_start, name, value) -> bool
    shortcuts                      (ctx, depth, offset, name, value) -> None

The bool returned by container bindings is the descend decision; other
ordered bindings return a bool too, but only containers open frames. Errors are
raised, never returned.
"""

import inspect
import itertools
import logging
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog

from ..errors import DuplicateBindingError, InvalidAdapterError, NoBindingError
from .kinds import Kind, is_nil

logger = structlog.wrap_logger(logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger)

BINDING_MARKER = "__dazzlewalk_binding__"

# Declaration order across all decorated callbacks, used as the sort tiebreak
_declaration_counter = itertools.count()


class BindingCategory(Enum):
    """The eight ways an adapter callback can be bound.

    Each member carries (label, position, arity, container, priority):
    position is "ordered" for bindings living in the main ordered list, or
    "prefix"/"suffix" for shortcuts tried before/after it; arity is the
    number of positional callback parameters; priority orders shortcuts
    sharing a position.
    """
    EXACT_TYPE = ("exact_type", "ordered", 5, False, 0)
    INSTANCE = ("instance", "ordered", 5, False, 0)
    KIND = ("kind", "ordered", 5, False, 0)
    CONTAINER = ("container", "ordered", 7, True, 0)
    NIL_POINTER = ("nil_pointer", "prefix", 5, False, 1)
    SIGNED_INT = ("signed_int", "suffix", 5, False, 2)
    UNSIGNED_INT = ("unsigned_int", "suffix", 5, False, 3)
    ALL_KINDS = ("all_kinds", "suffix", 5, False, 4)

    def __init__(self, label: str, position: str, arity: int, container: bool, priority: int):
        self.label = label
        self.position = position
        self.arity = arity
        self.is_container = container
        self.priority = priority

    @property
    def is_prefix(self) -> bool:
        return self.position == "prefix"

    @property
    def is_suffix(self) -> bool:
        return self.position == "suffix"

    @property
    def is_shortcut(self) -> bool:
        return self.position != "ordered"

    @property
    def family(self) -> str:
        """Categories sharing a family may not bind the same target twice."""
        if self in (BindingCategory.EXACT_TYPE, BindingCategory.INSTANCE):
            return "type"
        if self in (BindingCategory.KIND, BindingCategory.CONTAINER):
            return "kind"
        return self.label

    def accepts(self, value: Any, kind: Kind) -> bool:
        """Shortcut predicate: does this catch-all apply to the value?"""
        if self is BindingCategory.NIL_POINTER:
            return kind is Kind.POINTER and is_nil(value)
        if self is BindingCategory.SIGNED_INT:
            return kind is Kind.INT
        if self is BindingCategory.UNSIGNED_INT:
            return kind is Kind.UINT
        if self is BindingCategory.ALL_KINDS:
            return True
        raise ValueError(f"{self.name} is not a shortcut category")

    def __repr__(self) -> str:
        return f"BindingCategory.{self.name}"


@dataclass(frozen=True)
class BindingSpec:
    """What a binding decorator records on the decorated function."""
    category: BindingCategory
    target: Any = None
    order: int = 0
    sequence: int = 0
    infer_target: bool = False


@dataclass(frozen=True)
class Binding:
    """A resolved association between a category, a target and a callback."""
    category: BindingCategory
    target: Any
    callback: Callable = field(compare=False)
    order: int = 0
    sequence: int = 0
    name: str = ""

    def matches(self, value: Any, kind: Kind) -> bool:
        """Check whether this ordered binding applies to a value of the given kind."""
        category = self.category
        if category is BindingCategory.EXACT_TYPE:
            return type(value) is self.target
        if category is BindingCategory.INSTANCE:
            return isinstance(value, self.target)
        return kind is self.target

    def __str__(self) -> str:
        target = self.target
        if isinstance(target, type):
            target = target.__qualname__
        elif isinstance(target, Kind):
            target = target.name.lower()
        return f"{self.name}<{self.category.label}:{target} order={self.order}>"


@dataclass(frozen=True)
class BindingTable:
    """Immutable dispatch table built once per adapter.

    Attributes:
        ordered: Non-shortcut bindings sorted by (order, declaration)
        shortcuts: Bound shortcut categories mapped to their binding
        prefixes: Shortcut categories tried before the ordered list
        suffixes: Shortcut categories tried after the ordered list
        types: Target type -> binding for the type family
        kinds: Target kind -> binding for the kind family
    """
    ordered: Tuple[Binding, ...]
    shortcuts: Dict[BindingCategory, Binding]
    prefixes: Tuple[BindingCategory, ...]
    suffixes: Tuple[BindingCategory, ...]
    types: Dict[type, Binding]
    kinds: Dict[Kind, Binding]

    def __len__(self) -> int:
        return len(self.ordered) + len(self.shortcuts)


# Decorators ---------------------------------------------------------------

def _mark(spec_factory: Callable[[Callable], BindingSpec]) -> Callable[[Callable], Callable]:
    def decorator(func: Callable) -> Callable:
        setattr(func, BINDING_MARKER, spec_factory(func))
        return func
    return decorator


def for_type(target: Any = None, *, order: int = 0):
    """Bind a callback to values whose type is exactly `target`.

    Without a target the type is read from the annotation of the
    callback's last parameter:

        @for_type
        def on_int(self, ctx, depth, offset, name, value: int) -> bool:
            ...
    """
    if inspect.isfunction(target):
        return for_type()(target)
    if target is not None and not isinstance(target, type):
        raise TypeError(f"for_type expects a class, got {target!r}")
    return _mark(lambda func: BindingSpec(
        BindingCategory.EXACT_TYPE, target, order, next(_declaration_counter),
        infer_target=target is None,
    ))


def for_instance(target: type, *, order: int = 0):
    """Bind a callback to instances of `target` or any of its subclasses."""
    if not isinstance(target, type):
        raise TypeError(f"for_instance expects a class, got {target!r}")
    return _mark(lambda func: BindingSpec(
        BindingCategory.INSTANCE, target, order, next(_declaration_counter)))


def for_kind(kind: Kind, *, order: int = 0):
    """Bind a callback to every value of a non-container kind."""
    if not isinstance(kind, Kind):
        raise TypeError(f"for_kind expects a Kind, got {kind!r}")
    if kind.is_container:
        raise TypeError(f"{kind.name} is a container kind, use for_container")
    return _mark(lambda func: BindingSpec(
        BindingCategory.KIND, kind, order, next(_declaration_counter)))


def for_container(kind: Kind, *, order: int = 0):
    """Bind a start/end callback to every value of a container kind."""
    if not isinstance(kind, Kind):
        raise TypeError(f"for_container expects a Kind, got {kind!r}")
    if not kind.is_container:
        raise TypeError(f"{kind.name} is not a container kind, use for_kind")
    return _mark(lambda func: BindingSpec(
        BindingCategory.CONTAINER, kind, order, next(_declaration_counter)))


def _shortcut(category: BindingCategory):
    def decorator(func: Optional[Callable] = None):
        marker = _mark(lambda f: BindingSpec(category, None, 0, next(_declaration_counter)))
        if func is None:
            return marker
        return marker(func)
    decorator.__name__ = f"for_{category.label}"
    decorator.__doc__ = f"Bind a callback as the {category.label} shortcut."
    return decorator


for_nil_pointer = _shortcut(BindingCategory.NIL_POINTER)
for_signed_int = _shortcut(BindingCategory.SIGNED_INT)
for_unsigned_int = _shortcut(BindingCategory.UNSIGNED_INT)
for_all_kinds = _shortcut(BindingCategory.ALL_KINDS)


# Registry -----------------------------------------------------------------

def _accepts_arity(callback: Callable, arity: int) -> bool:
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        return False
    try:
        signature.bind(*range(arity))
    except TypeError:
        return False
    return True


def _infer_target(function: Callable) -> Optional[type]:
    """Read the annotated type of the last positional parameter."""
    try:
        params = [
            p for p in inspect.signature(function).parameters.values()
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        ]
        hints = typing.get_type_hints(function)
    except (NameError, TypeError, ValueError):
        return None
    if not params:
        return None
    hint = hints.get(params[-1].name)
    return hint if isinstance(hint, type) else None


def _iter_marked(adapter: Any):
    cls = type(adapter)
    for attr_name in dir(cls):
        if attr_name.startswith("__"):
            continue
        function = getattr(cls, attr_name, None)
        spec = getattr(function, BINDING_MARKER, None)
        if isinstance(spec, BindingSpec):
            yield attr_name, function, spec


def build_binding_table(adapter: Any) -> BindingTable:
    """Classify an adapter's decorated callbacks into a BindingTable.

    Callbacks whose signature does not fit their category, and exact-type
    callbacks whose target cannot be inferred, are skipped silently so
    that adapters can carry unrelated helpers.

    Args:
        adapter: Object whose class declares binding callbacks

    Returns:
        The adapter's BindingTable

    Raises:
        InvalidAdapterError: If adapter is None
        DuplicateBindingError: If a target is bound twice in one family
        NoBindingError: If no usable binding was found
    """
    if adapter is None:
        raise InvalidAdapterError("adapter must not be None")

    ordered: List[Binding] = []
    shortcuts: Dict[BindingCategory, Binding] = {}
    types: Dict[type, Binding] = {}
    kinds: Dict[Kind, Binding] = {}
    adapter_name = type(adapter).__qualname__

    for attr_name, function, spec in _iter_marked(adapter):
        category = spec.category
        callback = getattr(adapter, attr_name)
        if not _accepts_arity(callback, category.arity):
            logger.debug("binding_skipped", adapter=adapter_name, method=attr_name,
                         category=category.label, reason="signature")
            continue

        target = spec.target
        if spec.infer_target:
            target = _infer_target(function)
            if target is None:
                logger.debug("binding_skipped", adapter=adapter_name, method=attr_name,
                             category=category.label, reason="no target type")
                continue

        binding = Binding(category, target, callback, spec.order, spec.sequence, attr_name)
        family = category.family
        if family == "type":
            if target in types:
                raise DuplicateBindingError(attr_name, target, types[target].name)
            types[target] = binding
            ordered.append(binding)
        elif family == "kind":
            if target in kinds:
                raise DuplicateBindingError(attr_name, target, kinds[target].name)
            kinds[target] = binding
            ordered.append(binding)
        else:
            if category in shortcuts:
                raise DuplicateBindingError(attr_name, category, shortcuts[category].name)
            shortcuts[category] = binding
        logger.debug("binding_registered", adapter=adapter_name, binding=str(binding))

    if not ordered and not shortcuts:
        raise NoBindingError(f"no available binding function found on {adapter_name}")

    ordered.sort(key=lambda b: (b.order, b.sequence))
    prefixes = tuple(sorted((c for c in shortcuts if c.is_prefix), key=lambda c: c.priority))
    suffixes = tuple(sorted((c for c in shortcuts if c.is_suffix), key=lambda c: c.priority))

    return BindingTable(
        ordered=tuple(ordered),
        shortcuts=shortcuts,
        prefixes=prefixes,
        suffixes=suffixes,
        types=types,
        kinds=kinds,
    )
