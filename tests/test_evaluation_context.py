"""Tests for formulakit.evaluation.context."""

from __future__ import annotations

import threading

import pytest

from formulakit.evaluation import EvaluationCancelled, EvaluationConfig, EvaluationContext
from formulakit.scalar import ErrorKind, Scalar
from formulakit.terms import Constant, Differentiability, FunctionNode, Variable


class CancellingLeaf:
    """Leaf that requests cancellation of the pass when evaluated."""

    def __init__(self):
        self.calls = 0

    def value(self, context, out):
        self.calls += 1
        context.cancel()
        return out.set_real(1.0)

    def derivative(self, variable, context, out):
        self.calls += 1
        context.cancel()
        return out.set_real(0.0)

    def differentiability(self, variable):
        return Differentiability.INDEPENDENT


class DepthRecorder:
    """Leaf recording the context depth at which it runs."""

    def __init__(self):
        self.depths = []

    def value(self, context, out):
        self.depths.append(context.depth)
        return out.set_real(2.0)

    def derivative(self, variable, context, out):
        return out.set_real(0.0)

    def differentiability(self, variable):
        return Differentiability.INDEPENDENT


def test_cancelled_before_start_raises_at_root(fn):
    """Tests that a pre-cancelled context raises before any child runs."""
    leaf = CancellingLeaf()
    context = EvaluationContext()
    context.cancel()
    out = Scalar(7.0)
    with pytest.raises(EvaluationCancelled):
        fn("sqrt", leaf).value(context, out)
    assert leaf.calls == 0
    assert out.as_number() == 7.0


def test_cancel_deep_in_tree_unwinds(fn):
    """Tests that a cancel deep in the tree propagates as an exception."""
    leaf = CancellingLeaf()
    tree = fn("abs", fn("power", fn("sqrt", leaf), 2))
    out = Scalar(7.0)
    with pytest.raises(EvaluationCancelled):
        tree.value(EvaluationContext(), out)
    assert out.as_number() == 7.0


def test_cancel_in_last_sibling_is_not_swallowed(fn):
    """Tests that a cancel during the final child still raises."""
    with pytest.raises(EvaluationCancelled):
        fn("if", 1, 2, CancellingLeaf()).value(EvaluationContext(), Scalar())


def test_cancel_stops_remaining_siblings(fn):
    """Tests that children after the cancelling one are not evaluated."""
    later = CancellingLeaf()
    with pytest.raises(EvaluationCancelled):
        fn("power", CancellingLeaf(), later).value(EvaluationContext(), Scalar())
    assert later.calls == 0


def test_cancel_during_derivative(fn):
    """Tests that derivative passes are cancellable as well."""
    tree = fn("power", Variable("x"), fn("sqrt", CancellingLeaf()))
    context = EvaluationContext({"x": 2.0})
    out = Scalar(7.0)
    with pytest.raises(EvaluationCancelled):
        tree.derivative("x", context, out)
    assert out.as_number() == 7.0
    assert context.depth == 0


def test_cancel_from_another_thread_via_shared_event():
    """Tests that a shared event set elsewhere is seen by the context."""
    event = threading.Event()
    context = EvaluationContext(cancel_event=event)
    assert not context.cancelled
    threading.Thread(target=event.set).start()
    event.wait(timeout=5)
    assert context.cancelled
    with pytest.raises(EvaluationCancelled):
        Constant(1.0).value(context, Scalar())


def test_frames_are_reused_across_siblings():
    """Tests that frames at the same depth are the same scalars."""
    context = EvaluationContext()
    with context.frame(2) as first:
        pass
    with context.frame(2) as second:
        pass
    assert first is second
    with context.frame(1):
        with context.frame(1) as nested:
            assert nested is not first
            assert context.depth == 2
    assert context.depth == 0


def test_siblings_run_at_the_same_depth(fn):
    """Tests that all children of a node borrow frames one level deeper."""
    recorder = DepthRecorder()
    fn("if", recorder, fn("sqrt", recorder), recorder).value(EvaluationContext(), Scalar())
    assert recorder.depths == [1, 2, 1]


def test_frame_depth_restored_after_exception():
    """Tests that the depth is restored even if the block raises."""
    context = EvaluationContext()
    with pytest.raises(RuntimeError):
        with context.frame(1):
            with context.frame(1):
                raise RuntimeError("boom")
    assert context.depth == 0


def test_arena_grows_on_demand():
    """Tests that frames are created past the pre-allocated depth and width."""
    context = EvaluationContext(config=EvaluationConfig(preallocated_depth=1, frame_width=1))
    assert context.arena_depth == 1
    with context.frame(4) as wide:
        assert len(wide) >= 4
        with context.frame(2) as deeper:
            assert len(deeper) >= 2
    assert context.arena_depth == 2


def test_deep_tree_exceeds_preallocated_depth(fn):
    """Tests that a tree deeper than the arena evaluates correctly."""
    context = EvaluationContext({"x": 2.0}, config=EvaluationConfig(preallocated_depth=2))
    tree = Variable("x")
    for _ in range(10):
        tree = fn("abs", tree)
    out = Scalar()
    assert tree.value(context, out) is ErrorKind.OK
    assert out.as_number() == 2.0
    assert context.arena_depth >= 10
    assert context.depth == 0


def test_nested_frames_do_not_clobber_parent_arguments(fn):
    """Tests that a parent's child values survive the evaluation of later siblings."""
    # each power child uses deeper frames while the parent's first argument is held
    tree = fn("power", fn("power", 2, 3), fn("power", fn("sqrt", 4), fn("abs", -1)))
    out = Scalar()
    tree.value(EvaluationContext(), out)
    assert out.as_number() == 64.0


def test_lookup_and_bind():
    """Tests variable lookup for bound and unbound names."""
    context = EvaluationContext({"x": 3})
    out = Scalar()
    assert context.lookup("x", out) is ErrorKind.OK
    assert out.as_number() == 3.0
    assert context.lookup("y", out) is ErrorKind.TERM_NOT_READY
    context.bind("y", 1 + 1j)
    assert context.lookup("y", out) is ErrorKind.OK
    assert out.as_number() == 1 + 1j


def test_bindings_are_copied():
    """Tests that later changes to the caller's mapping do not leak in."""
    bindings = {"x": 1.0}
    context = EvaluationContext(bindings)
    bindings["x"] = 5.0
    out = Scalar()
    context.lookup("x", out)
    assert out.as_number() == 1.0


def test_incomplete_node_does_not_touch_arena():
    """Tests that a not-ready node returns without borrowing a frame."""
    context = EvaluationContext()
    out = Scalar()
    assert FunctionNode("sqrt", [None]).value(context, out) is ErrorKind.TERM_NOT_READY
    assert context.depth == 0
