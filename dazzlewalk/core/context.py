"""Traversal context for DazzleWalk.

The context is passed unchanged to every callback of a traversal. Adapters
use it to carry private state such as output buffers or accumulators; the
engine never reads from it.
"""

from typing import Any, Dict, Hashable, Tuple


class TraversalContext:
    """Adapter-owned key/value store threaded through a traversal.

    Writes are last-write-wins per key. There is deliberately no removal
    or iteration: the context is a side channel, not a data structure.

    Example:
        ctx = TraversalContext(prefix="> ")
        ctx.set_local("buffer", io.StringIO())
        walker.traverse(ctx, value)
        buffer, found = ctx.get_local("buffer")
    """

    def __init__(self, **initial: Any):
        """Create a context, optionally seeded with keyword values."""
        self._locals: Dict[Hashable, Any] = dict(initial)

    def get_local(self, key: Hashable) -> Tuple[Any, bool]:
        """Look up a value.

        Args:
            key: Key previously stored with set_local

        Returns:
            Tuple of (value, found); value is None when not found
        """
        if key in self._locals:
            return self._locals[key], True
        return None, False

    def set_local(self, key: Hashable, value: Any) -> None:
        """Store a value, replacing any previous value for the key."""
        self._locals[key] = value

    def __repr__(self) -> str:
        return f"TraversalContext(keys={len(self._locals)})"
