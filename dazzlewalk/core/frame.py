"""Per-container bookkeeping for DazzleWalk."""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from .kinds import Kind
from .properties import Property


@dataclass
class VisitFrame:
    """State of one container while its children are being visited.

    A frame is opened when a binding decides to descend into a container
    and is discarded once the container's children are done. Children are
    resolved with the frame as their parent: they get depth + 1, the
    running offset and, inside records, the current property name.

    Attributes:
        depth: Depth of the container node itself
        value: The container value
        kind: Kind of the container value
        size: Total child count reported to callbacks
        binding: Binding that opened the container
        name: Display name of the container within its own parent
        parent_offset: Offset of the container within its own parent
        properties: Resolved properties (records only)
        offset: Offset of the child currently being visited, -1 before the first
        child_name: Display name of the child currently being visited
    """
    depth: int
    value: Any
    kind: Kind
    size: int
    binding: Any
    name: str = ""
    parent_offset: int = 0
    properties: Tuple[Property, ...] = field(default_factory=tuple)
    offset: int = -1
    child_name: str = ""

    def enter_child(self, offset: int, name: str = "") -> None:
        """Point the frame at the next child before it is visited."""
        self.offset = offset
        self.child_name = name

    def __repr__(self) -> str:
        return (f"VisitFrame(depth={self.depth}, kind={self.kind.name.lower()}, "
                f"size={self.size}, offset={self.offset})")


def child_position(parent: Optional[VisitFrame]) -> Tuple[int, int, str]:
    """Return (depth, offset, name) for a node visited under `parent`.

    The root has no parent and sits at depth 0, offset 0, with no name.
    """
    if parent is None:
        return 0, 0, ""
    return parent.depth + 1, parent.offset, parent.child_name
