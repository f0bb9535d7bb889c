"""Behavioral guarantees every traversal must keep.

Each test pins one externally observable property of the engine, using
small adapters so the property is checked in isolation.
"""

from dataclasses import dataclass, field

import pytest

from dazzlewalk import (
    ConstructionError,
    Kind,
    MetadataPropertyResolver,
    Ref,
    TraversalContext,
    Walker,
    WalkConfig,
    for_all_kinds,
    for_container,
    for_kind,
    for_type,
)
from dazzlewalk.testing import RecordingAdapter


@dataclass
class Sample:
    label: str = "x"


class OnlySample:
    def __init__(self):
        self.seen = []

    @for_type(Sample)
    def on_sample(self, ctx, depth, offset, name, value):
        self.seen.append((depth, offset, value))
        return False


class TestSingleExactType:
    """One exact-type binding with missing bindings ignored."""

    @pytest.mark.parametrize("value", [Sample(), Sample("y"), Sample("")])
    def test_invoked_once_at_root(self, value):
        """Test the binding fires once at depth 0, offset 0."""
        adapter = OnlySample()
        Walker(adapter, WalkConfig(ignore_missing_binding=True)).traverse(None, value)
        assert adapter.seen == [(0, 0, value)]


class TestPointerUnwrap:
    """Unwrapping a reference does not count as a level."""

    @pytest.mark.parametrize("layers", [1, 2, 3])
    def test_same_binding_same_depth(self, layers):
        """Test a reference chain reaches the pointee's binding at depth 0."""
        target = Sample("deep")
        value = target
        for _ in range(layers):
            value = Ref(value)

        direct, wrapped = OnlySample(), OnlySample()
        config = WalkConfig(auto_unwrap_pointer=True)
        Walker(direct, config).traverse(None, target)
        Walker(wrapped, config).traverse(None, value)
        assert wrapped.seen == direct.seen == [(0, 0, target)]

    def test_nested_unwrap_keeps_parent_position(self):
        """Test a reference inside a list unwraps at the list child's position."""
        class Adapter(OnlySample):
            @for_container(Kind.SEQUENCE)
            def seq(self, ctx, depth, offset, size, is_start, name, value):
                return True

        adapter = Adapter()
        target = Sample()
        config = WalkConfig(auto_unwrap_pointer=True, ignore_missing_binding=True)
        Walker(adapter, config).traverse(None, [1.0, Ref(target)])
        assert adapter.seen == [(1, 1, target)]


class TestSequenceChildren:
    """A descended sequence of N visits N children in order."""

    @pytest.mark.parametrize("n", [0, 1, 5, 32])
    def test_offsets_in_order(self, n):
        """Test offsets run 0..N-1."""
        adapter = RecordingAdapter()
        Walker(adapter).traverse(None, list(range(n)))
        children = adapter.by_binding("int")
        assert [v.offset for v in children] == list(range(n))
        assert [v.value for v in children] == list(range(n))
        assert all(v.depth == 1 for v in children)


class TestMapChildren:
    """A descended map of M entries visits 2M children."""

    @pytest.mark.parametrize("m", [0, 1, 4])
    def test_key_then_value(self, m):
        """Test keys at even offsets, each followed by its value."""
        adapter = RecordingAdapter()
        mapping = {f"k{i}": i for i in range(m)}
        Walker(adapter).traverse(None, mapping)
        children = adapter.visits[1:]
        assert len(children) == 2 * m
        for key_visit, value_visit in zip(children[::2], children[1::2]):
            assert key_visit.offset % 2 == 0
            assert value_visit.offset == key_visit.offset + 1
            assert mapping[key_visit.value] == value_visit.value


class TestDuplicateBinding:
    """Two callbacks for one (family, target) pair cannot coexist."""

    def test_two_int_bindings(self):
        """Test construction fails."""
        class Twice:
            @for_type(int)
            def first(self, ctx, depth, offset, name, value):
                return False

            @for_type(int)
            def second(self, ctx, depth, offset, name, value):
                return False

        with pytest.raises(ConstructionError):
            Walker(Twice())

    def test_two_kind_bindings(self):
        """Test construction fails for a repeated kind too."""
        class Twice:
            @for_kind(Kind.STR)
            def first(self, ctx, depth, offset, name, value):
                return False

            @for_kind(Kind.STR, order=3)
            def second(self, ctx, depth, offset, name, value):
                return False

        with pytest.raises(ConstructionError):
            Walker(Twice())


class TestContainerEndPairing:
    """Every descended container gets exactly one end notification."""

    @pytest.mark.parametrize("value", [
        [],
        [1, [2, [3]]],
        {"a": (1, 2), "b": {3}},
        Ref([Ref(None)]),
        [Sample(), {"k": Sample()}],
    ])
    def test_one_end_per_start(self, value):
        """Test starts and ends pair up with matching positions and sizes."""
        adapter = RecordingAdapter()
        Walker(adapter, WalkConfig(emit_container_end=True)).traverse(None, value)
        starts = [(v.binding, v.depth, v.offset, v.size) for v in adapter.starts()]
        ends = [(v.binding, v.depth, v.offset, v.size) for v in adapter.ends()]
        assert sorted(starts) == sorted(ends)
        assert len(starts) == len(ends)

    def test_end_follows_children(self):
        """Test an end comes after every visit of its subtree."""
        adapter = RecordingAdapter()
        Walker(adapter, WalkConfig(emit_container_end=True)).traverse(None, [[1], 2])
        assert [(v.binding, v.is_start) for v in adapter.visits] == [
            ("sequence", True),
            ("sequence", True),
            ("int", None),
            ("sequence", False),
            ("int", None),
            ("sequence", False),
        ]


@dataclass
class FourOrdered:
    a: int = field(default=0, metadata={"order": 0})
    b: int = field(default=0, metadata={"order": 1})
    unassigned: int = 0
    c: int = field(default=0, metadata={"order": 3})
    d: int = field(default=0, metadata={"order": 4})


class TestExplicitOrdering:
    """Explicit field orders with one unassigned field."""

    def test_unassigned_keeps_declaration_slot(self):
        """Test visit order and slot count."""
        adapter = RecordingAdapter()
        config = WalkConfig(property_resolver=MetadataPropertyResolver())
        Walker(adapter, config).traverse(None, FourOrdered(1, 2, 3, 4, 5))
        assert adapter.visits[0].size == 5
        assert [v.name for v in adapter.visits[1:]] == ["a", "b", "unassigned", "c", "d"]
        assert [v.value for v in adapter.visits[1:]] == [1, 2, 3, 4, 5]


class Anything:
    def __init__(self):
        self.calls = []

    @for_all_kinds
    def any_value(self, ctx, depth, offset, name, value):
        self.calls.append((depth, offset, name, value))


class TestAllKindsOnNil:
    """A lone all-kinds shortcut handles a nil reference."""

    def test_nil_root(self):
        """Test the suffix shortcut fires once for a nil reference root."""
        adapter = Anything()
        nil = Ref()
        Walker(adapter, WalkConfig()).traverse(TraversalContext(), nil)
        assert adapter.calls == [(0, 0, "", nil)]

    def test_nil_field(self):
        """Test a None field reaches the shortcut once the record descends."""
        @dataclass
        class Holder:
            ref: object = None

        class Descending(Anything):
            @for_container(Kind.RECORD)
            def record(self, ctx, depth, offset, size, is_start, name, value):
                return True

        adapter = Descending()
        Walker(adapter, WalkConfig()).traverse(TraversalContext(), Holder())
        assert adapter.calls == [(1, 0, "ref", None)]
