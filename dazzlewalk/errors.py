"""Exception hierarchy for DazzleWalk.

Errors fall into two families. Construction errors are raised while a
Walker is being built and mean the adapter or configuration cannot be used
at all. Traversal errors abort an in-progress walk; there is no partial
continuation.

InvariantViolation is kept outside both families. It signals a defect in
the engine itself, not a condition a caller is expected to handle.
"""

from typing import Any, Optional


class WalkError(Exception):
    """Base class for all reportable DazzleWalk errors."""
    pass


class ConstructionError(WalkError):
    """Raised when a Walker cannot be built from an adapter."""
    pass


class InvalidAdapterError(ConstructionError):
    """Raised when the adapter is missing (None)."""
    pass


class DuplicateBindingError(ConstructionError):
    """Raised when two bindings claim the same target in the same family."""

    def __init__(self, name: str, target: Any, existing: str):
        self.name = name
        self.target = target
        self.existing = existing
        super().__init__(
            f"duplicated binding function {name} found for {_describe_target(target)} "
            f"(already bound by {existing})"
        )


class NoBindingError(ConstructionError):
    """Raised when an adapter exposes no usable binding at all."""
    pass


class ConfigurationError(ConstructionError):
    """Raised when a WalkConfig fails validation."""
    pass


class PropertyOrderError(ConstructionError):
    """Raised when a record's explicit field ordering is inconsistent.

    Ordering is computed lazily the first time a record type is met, so
    this error can surface during a traversal even though it describes a
    problem with the type definition.
    """

    def __init__(self, message: str, record_type: Optional[type] = None,
                 field_name: Optional[str] = None):
        self.record_type = record_type
        self.field_name = field_name
        super().__init__(message)


class TraversalError(WalkError):
    """Base class for errors that abort a traversal."""
    pass


class BindingMissingError(TraversalError):
    """Raised when no binding resolves for a node and missing bindings are not ignored."""

    def __init__(self, value_type: type, kind: Any):
        self.value_type = value_type
        self.kind = kind
        super().__init__(
            f"type:{value_type.__qualname__} kind:{kind.name.lower()} binding is missing"
        )


class BindingReturnError(TraversalError):
    """Raised when a callback returns something other than its declared shape."""

    def __init__(self, name: str, expected: str, result: Any):
        self.name = name
        self.result = result
        super().__init__(
            f"binding {name} must return {expected}, got {type(result).__name__}"
        )


class CallbackError(TraversalError):
    """Convenience error for adapters that want to abort a traversal.

    The engine propagates any exception raised by a callback unchanged;
    adapters are free to raise this one or their own.
    """
    pass


class InvariantViolation(RuntimeError):
    """Raised when the walker's internal state is inconsistent.

    This is a programming defect. It deliberately does not derive from
    WalkError so that handlers written for user errors do not catch it.
    """
    pass


def _describe_target(target: Any) -> str:
    if isinstance(target, type):
        return f"Type:{target.__qualname__}"
    name = getattr(target, "name", None)
    if name is not None:
        return f"{type(target).__name__}:{name.lower()}"
    return str(target)
