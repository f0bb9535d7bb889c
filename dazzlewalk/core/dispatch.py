"""Per-node binding resolution for DazzleWalk.

For every node the Dispatcher picks at most one binding and invokes it,
trying in order:

1. prefix shortcuts
2. the ordered exact-type/instance/kind/container bindings
3. reference auto-unwrap (re-entry with the target as the same node)
4. suffix shortcuts
5. the missing-binding policy

The outcome tells the walker whether to descend into a freshly opened
VisitFrame, to re-enter with a substituted value, or to finish the node.
"""

from dataclasses import dataclass
from typing import Any, Optional

from ..errors import BindingMissingError, BindingReturnError, InvariantViolation
from .bindings import Binding, BindingTable
from .frame import VisitFrame, child_position
from .kinds import Kind, deref, is_nil, kind_of
from .properties import PropertyCache


@dataclass(frozen=True)
class Outcome:
    """Result of dispatching one node.

    Attributes:
        frame: Frame to descend into, or None to finish the node
        reenter: True if the node must be dispatched again as `value`
        value: Replacement value for re-entry
    """
    frame: Optional[VisitFrame] = None
    reenter: bool = False
    value: Any = None

    @property
    def descend(self) -> bool:
        return self.frame is not None


FINISHED = Outcome()


class Dispatcher:
    """Resolves and invokes the binding for each visited node."""

    def __init__(self, table: BindingTable, properties: PropertyCache,
                 ignore_missing_binding: bool = False,
                 auto_unwrap_pointer: bool = False):
        self.table = table
        self.properties = properties
        self.ignore_missing_binding = ignore_missing_binding
        self.auto_unwrap_pointer = auto_unwrap_pointer

    def dispatch(self, ctx: Any, parent: Optional[VisitFrame], value: Any) -> Outcome:
        """Resolve and invoke the binding for one node.

        Args:
            ctx: Traversal context handed to callbacks
            parent: Frame of the enclosing container, None at the root
            value: The node value

        Returns:
            Outcome describing what the walker does next

        Raises:
            BindingMissingError: If nothing resolves and missing bindings are not ignored
            BindingReturnError: If a callback returns a malformed result
        """
        table = self.table
        kind = kind_of(value)
        depth, offset, name = child_position(parent)

        for category in table.prefixes:
            if category.accepts(value, kind):
                return self._call_shortcut(table.shortcuts[category], ctx, depth, offset, name, value)

        for binding in table.ordered:
            if not binding.matches(value, kind):
                continue
            if binding.category.is_container:
                frame = self.open_frame(binding, value, kind, depth, offset, name)
                descend = _expect_bool(binding, binding.callback(
                    ctx, depth, offset, frame.size, True, name, value))
                return Outcome(frame=frame) if descend else FINISHED

            # Only container bindings open frames; a True here finishes the node
            _expect_bool(binding, binding.callback(ctx, depth, offset, name, value))
            return FINISHED

        if self.auto_unwrap_pointer and kind is Kind.POINTER:
            if is_nil(value):
                return FINISHED
            return Outcome(reenter=True, value=deref(value))

        for category in table.suffixes:
            if category.accepts(value, kind):
                return self._call_shortcut(table.shortcuts[category], ctx, depth, offset, name, value)

        if self.ignore_missing_binding:
            return FINISHED
        raise BindingMissingError(type(value), kind)

    def open_frame(self, binding: Binding, value: Any, kind: Kind,
                   depth: int, offset: int, name: str) -> VisitFrame:
        """Build the frame for a container about to be entered."""
        properties = ()
        if kind is Kind.ARRAY or kind is Kind.SEQUENCE or kind is Kind.SET:
            size = len(value)
        elif kind is Kind.MAP:
            size = len(value) * 2
        elif kind is Kind.RECORD:
            size, properties = self.properties.lookup(value)
        elif kind is Kind.POINTER:
            size = 0 if is_nil(value) else 1
        else:
            raise InvariantViolation(f"{kind.name} is not a container kind")
        return VisitFrame(
            depth=depth,
            value=value,
            kind=kind,
            size=size,
            binding=binding,
            name=name,
            parent_offset=offset,
            properties=properties,
        )

    def finish(self, ctx: Any, frame: VisitFrame) -> None:
        """Send the end notification for a container whose children are done.

        Raises:
            InvariantViolation: If the frame was not opened by a container binding
        """
        binding = frame.binding
        if not binding.category.is_container:
            raise InvariantViolation(f"{frame!r} was opened by non-container binding {binding}")
        _expect_bool(binding, binding.callback(
            ctx, frame.depth, frame.parent_offset, frame.size, False, frame.name, frame.value))

    @staticmethod
    def _call_shortcut(binding: Binding, ctx: Any, depth: int, offset: int,
                       name: str, value: Any) -> Outcome:
        result = binding.callback(ctx, depth, offset, name, value)
        if result is not None:
            raise BindingReturnError(binding.name, "None", result)
        return FINISHED


def _expect_bool(binding: Binding, result: Any) -> bool:
    if not isinstance(result, bool):
        raise BindingReturnError(binding.name, "bool", result)
    return result


__all__ = ["Dispatcher", "Outcome", "FINISHED"]
