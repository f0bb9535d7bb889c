"""Depth-first value walker for DazzleWalk.

The Walker is the engine users hold on to. It is built once per adapter,
is read-only afterwards, and can run any number of traversals, including
concurrent ones from independent threads as long as the adapter's
callbacks tolerate that.
"""

import logging
from typing import Any, List, Optional, TYPE_CHECKING

import structlog

from ..errors import ConfigurationError, InvariantViolation, WalkError
from .bindings import BindingTable, build_binding_table
from .context import TraversalContext
from .dispatch import Dispatcher
from .frame import VisitFrame
from .kinds import Kind, deref, record_field_value
from .properties import PropertyCache

if TYPE_CHECKING:
    from ..config import WalkConfig

logger = structlog.wrap_logger(logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger)


class Walker:
    """Walks nested values and invokes an adapter's bindings at each node.

    Example:
        class Printer:
            @for_kind(Kind.INT)
            def on_int(self, ctx, depth, offset, name, value):
                print("  " * depth, name, value)
                return False

            @for_container(Kind.RECORD)
            def on_record(self, ctx, depth, offset, size, is_start, name, value):
                return True

        walker = Walker(Printer(), WalkConfig.lenient())
        walker.traverse(TraversalContext(), point)
    """

    def __init__(self, adapter: Any, config: Optional['WalkConfig'] = None):
        """Build a walker for an adapter.

        Args:
            adapter: Object declaring binding callbacks
            config: Optional WalkConfig (defaults apply when omitted)

        Raises:
            ConstructionError: If the adapter or configuration is unusable
        """
        from ..config import WalkConfig

        config = WalkConfig() if config is None else config.clone()
        config_errors = config.validate()
        if config_errors:
            raise ConfigurationError(f"Invalid configuration: {'; '.join(config_errors)}")

        self._adapter = adapter
        self._config = config
        self._table = build_binding_table(adapter)
        self._properties = PropertyCache(config.resolver())
        self._dispatcher = Dispatcher(
            self._table,
            self._properties,
            ignore_missing_binding=config.ignore_missing_binding,
            auto_unwrap_pointer=config.auto_unwrap_pointer,
        )
        logger.debug(
            "walker_built",
            adapter=type(adapter).__qualname__,
            bindings=len(self._table.ordered),
            shortcuts=[c.label for c in self._table.shortcuts],
        )

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def config(self) -> 'WalkConfig':
        """A copy of the configuration in use."""
        return self._config.clone()

    @property
    def bindings(self) -> BindingTable:
        return self._table

    @property
    def property_cache(self) -> PropertyCache:
        return self._properties

    def traverse(self, ctx: Optional[TraversalContext], root: Any) -> None:
        """Walk a value depth-first.

        A None root is untyped and is a successful no-op.

        Args:
            ctx: Context handed to every callback (a fresh one when None)
            root: The value to walk

        Raises:
            TraversalError: If a node has no binding or a callback misbehaves
            Exception: Whatever a callback raises, unchanged
        """
        if root is None:
            return
        if ctx is None:
            ctx = TraversalContext()
        frames: List[VisitFrame] = []
        try:
            self._walk(ctx, frames, root)
        except WalkError as e:
            logger.debug("traversal_failed", adapter=type(self._adapter).__qualname__,
                         error=str(e), depth=len(frames))
            raise

    def _walk(self, ctx: Any, frames: List[VisitFrame], value: Any) -> None:
        parent = frames[-1] if frames else None
        while True:
            outcome = self._dispatcher.dispatch(ctx, parent, value)
            if not outcome.reenter:
                break
            # Re-entry: same node, same parent, new value
            value = outcome.value
        if not outcome.descend:
            return

        frame = outcome.frame
        frames.append(frame)
        try:
            self._walk_children(ctx, frames, frame)
        finally:
            frames.pop()
        if self._config.emit_container_end:
            self._dispatcher.finish(ctx, frame)

    def _walk_children(self, ctx: Any, frames: List[VisitFrame], frame: VisitFrame) -> None:
        value = frame.value
        kind = frame.kind

        if kind is Kind.ARRAY or kind is Kind.SEQUENCE:
            for i in range(frame.size):
                frame.enter_child(i)
                self._walk(ctx, frames, value[i])

        elif kind is Kind.SET:
            items = list(value)
            if len(items) != frame.size:
                raise InvariantViolation(f"{frame!r} but set has {len(items)} items")
            for i, item in enumerate(items):
                frame.enter_child(i)
                self._walk(ctx, frames, item)

        elif kind is Kind.MAP:
            if len(value) * 2 != frame.size:
                raise InvariantViolation(f"{frame!r} but mapping has {len(value)} keys")
            # Keys sit at even offsets, their values right after
            for i, (key, item) in enumerate(list(value.items())):
                frame.enter_child(i * 2)
                self._walk(ctx, frames, key)
                frame.enter_child(i * 2 + 1)
                self._walk(ctx, frames, item)

        elif kind is Kind.RECORD:
            offset = 0
            for prop in frame.properties:
                if prop.index is None:
                    continue
                frame.enter_child(offset, prop.name)
                self._walk(ctx, frames, record_field_value(value, prop.index))
                offset += 1

        elif kind is Kind.POINTER:
            if frame.size > 0:
                frame.enter_child(0)
                self._walk(ctx, frames, deref(value))

        else:
            raise InvariantViolation(f"cannot enumerate children of {frame!r}")

    def describe(self) -> str:
        """Summarise the binding table, mostly for debugging."""
        table = self._table
        return (
            f"Walker{{adapter:{type(self._adapter).__qualname__} "
            f"Prefixes:{[c.label for c in table.prefixes]} "
            f"Suffixes:{[c.label for c in table.suffixes]} "
            f"Types:{len(table.types)} Kinds:{len(table.kinds)} "
            f"Items:{[str(b) for b in table.ordered]}}}"
        )

    def __repr__(self) -> str:
        return self.describe()
