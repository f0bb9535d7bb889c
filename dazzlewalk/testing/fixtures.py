"""Test fixtures for DazzleWalk consumers.

RecordingAdapter binds every kind and records each callback it receives,
which makes it easy to assert on visit order, depths, offsets and sizes
without writing a bespoke adapter for every test.
"""

from typing import Any, Callable, List, NamedTuple, Optional

from ..core.bindings import for_container, for_kind
from ..core.kinds import Kind


class Visit(NamedTuple):
    """One recorded callback invocation."""
    binding: str
    depth: int
    offset: int
    name: str
    value: Any
    size: Optional[int] = None
    is_start: Optional[bool] = None


class RecordingAdapter:
    """Adapter that binds every kind and records all callbacks.

    Example:
        adapter = RecordingAdapter()
        Walker(adapter, WalkConfig.with_container_end()).traverse(None, [1, [2]])
        assert [v.depth for v in adapter.visits] == [0, 1, 1, 2, 1, 0]

    Args:
        descend: Decision returned by container starts; either a bool or
            a predicate called with the visited value
    """

    def __init__(self, descend: Any = True):
        self.visits: List[Visit] = []
        self._descend = descend

    # Leaves ------------------------------------------------------------

    def _leaf(self, binding: str, depth: int, offset: int, name: str, value: Any) -> bool:
        self.visits.append(Visit(binding, depth, offset, name, value))
        return False

    @for_kind(Kind.BOOL)
    def on_bool(self, ctx, depth, offset, name, value):
        return self._leaf("bool", depth, offset, name, value)

    @for_kind(Kind.INT)
    def on_int(self, ctx, depth, offset, name, value):
        return self._leaf("int", depth, offset, name, value)

    @for_kind(Kind.UINT)
    def on_uint(self, ctx, depth, offset, name, value):
        return self._leaf("uint", depth, offset, name, value)

    @for_kind(Kind.FLOAT)
    def on_float(self, ctx, depth, offset, name, value):
        return self._leaf("float", depth, offset, name, value)

    @for_kind(Kind.COMPLEX)
    def on_complex(self, ctx, depth, offset, name, value):
        return self._leaf("complex", depth, offset, name, value)

    @for_kind(Kind.STR)
    def on_str(self, ctx, depth, offset, name, value):
        return self._leaf("str", depth, offset, name, value)

    @for_kind(Kind.BYTES)
    def on_bytes(self, ctx, depth, offset, name, value):
        return self._leaf("bytes", depth, offset, name, value)

    @for_kind(Kind.OBJECT)
    def on_object(self, ctx, depth, offset, name, value):
        return self._leaf("object", depth, offset, name, value)

    # Containers --------------------------------------------------------

    def _container(self, binding: str, depth: int, offset: int, size: int,
                   is_start: bool, name: str, value: Any) -> bool:
        self.visits.append(Visit(binding, depth, offset, name, value, size, is_start))
        if not is_start:
            return False
        if isinstance(self._descend, bool):
            return self._descend
        return bool(self._descend(value))

    @for_container(Kind.ARRAY)
    def on_array(self, ctx, depth, offset, size, is_start, name, value):
        return self._container("array", depth, offset, size, is_start, name, value)

    @for_container(Kind.SEQUENCE)
    def on_sequence(self, ctx, depth, offset, size, is_start, name, value):
        return self._container("sequence", depth, offset, size, is_start, name, value)

    @for_container(Kind.SET)
    def on_set(self, ctx, depth, offset, size, is_start, name, value):
        return self._container("set", depth, offset, size, is_start, name, value)

    @for_container(Kind.MAP)
    def on_map(self, ctx, depth, offset, size, is_start, name, value):
        return self._container("map", depth, offset, size, is_start, name, value)

    @for_container(Kind.RECORD)
    def on_record(self, ctx, depth, offset, size, is_start, name, value):
        return self._container("record", depth, offset, size, is_start, name, value)

    @for_container(Kind.POINTER)
    def on_pointer(self, ctx, depth, offset, size, is_start, name, value):
        return self._container("pointer", depth, offset, size, is_start, name, value)

    # Queries -----------------------------------------------------------

    def by_binding(self, binding: str) -> List[Visit]:
        """Return the recorded visits for one binding label."""
        return [v for v in self.visits if v.binding == binding]

    def starts(self) -> List[Visit]:
        return [v for v in self.visits if v.is_start is True]

    def ends(self) -> List[Visit]:
        return [v for v in self.visits if v.is_start is False]

    def where(self, predicate: Callable[[Visit], bool]) -> List[Visit]:
        return [v for v in self.visits if predicate(v)]

    def reset(self) -> None:
        self.visits.clear()
