"""High-level API for DazzleWalk.

Simple functions for the common cases. Use Walker directly when the same
adapter walks many values, since building the binding table is the
expensive part.
"""

from typing import Any, Optional

from .config import WalkConfig
from .core.context import TraversalContext
from .core.walker import Walker


def build(adapter: Any, config: Optional[WalkConfig] = None) -> Walker:
    """Build a reusable walker for an adapter.

    Args:
        adapter: Object declaring binding callbacks
        config: Optional configuration

    Returns:
        Walker ready for any number of traversals

    Raises:
        ConstructionError: If the adapter or configuration is unusable
    """
    return Walker(adapter, config)


def traverse(walker: Walker, ctx: Optional[TraversalContext], root: Any) -> None:
    """Walk a value with a previously built walker.

    Args:
        walker: Walker returned by build()
        ctx: Context for the callbacks (a fresh one when None)
        root: Value to walk; None is a no-op
    """
    walker.traverse(ctx, root)


def walk(adapter: Any,
         root: Any,
         ctx: Optional[TraversalContext] = None,
         ignore_missing_binding: bool = False,
         auto_unwrap_pointer: bool = False,
         emit_container_end: bool = False,
         property_resolver: Any = None) -> TraversalContext:
    """One-shot traversal: build a walker, walk a value, return the context.

    Example:
        ctx = walk(CollectingAdapter(), payload, ignore_missing_binding=True)
        items, _ = ctx.get_local("items")

    Args:
        adapter: Object declaring binding callbacks
        root: Value to walk
        ctx: Context to use (a fresh one when None)
        ignore_missing_binding: Skip nodes nothing binds to
        auto_unwrap_pointer: Transparently unwrap non-nil references
        emit_container_end: Notify container bindings after their children
        property_resolver: Custom record field resolver

    Returns:
        The context the callbacks received
    """
    config = WalkConfig(
        ignore_missing_binding=ignore_missing_binding,
        auto_unwrap_pointer=auto_unwrap_pointer,
        emit_container_end=emit_container_end,
        property_resolver=property_resolver,
    )
    if ctx is None:
        ctx = TraversalContext()
    Walker(adapter, config).traverse(ctx, root)
    return ctx
