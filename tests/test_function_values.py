"""Tests for the value rules of the function catalog."""

from __future__ import annotations

import logging
import math

import pytest
from numpy.testing import assert_allclose

from formulakit.scalar import ErrorKind
from formulakit.terms import Constant, FunctionNode, Variable


def test_power(fn, evaluate):
    """Tests integer powers and the complex principal root of a negative base."""
    assert evaluate(fn("power", 2, 3)).as_number() == 8.0

    root = evaluate(fn("power", -8, 1 / 3))
    assert root.is_complex()
    assert_allclose(root.as_number(), 1 + 1j * math.sqrt(3.0), rtol=1e-12)


def test_sqrt(fn, evaluate):
    """Tests sqrt of positive and negative input."""
    assert evaluate(fn("sqrt", 16)).as_number() == 4.0
    out = evaluate(fn("sqrt", -4))
    assert out.is_complex()
    assert out.real == 0.0
    assert out.imaginary == 2.0


def test_nthrt(fn, evaluate):
    """Tests the root with degree first and radicand second."""
    assert_allclose(evaluate(fn("nthrt", 3, 8)).real, 2.0)
    assert_allclose(evaluate(fn("nthrt", 2, 81)).real, 9.0)


def test_nthrt_truncates_degree(fn, evaluate):
    """Tests that a fractional degree is truncated toward zero."""
    assert_allclose(evaluate(fn("nthrt", 3.9, 8)).real, 2.0)


def test_nthrt_zero_degree_is_not_a_number(fn, evaluate):
    """Tests that a zero degree has no root."""
    assert evaluate(fn("nthrt", 0.5, 8)).error is ErrorKind.NOT_A_NUMBER


def test_abs_and_conjugate(fn, evaluate):
    """Tests magnitude and conjugate of real and complex input."""
    assert evaluate(fn("abs", -2.5)).as_number() == 2.5
    assert evaluate(fn("abs", 3 + 4j)).as_number() == 5.0
    assert evaluate(fn("conjugate", 3 + 4j)).as_number() == 3 - 4j
    real = evaluate(fn("conjugate", 3))
    assert real.as_number() == 3.0
    assert not real.is_complex()


def test_re_and_im(fn, evaluate):
    """Tests real and imaginary parts, with 0 for the imaginary part of a real."""
    assert evaluate(fn("re", 3 + 4j)).as_number() == 3.0
    assert evaluate(fn("im", 3 + 4j)).as_number() == 4.0
    assert evaluate(fn("im", 3)).as_number() == 0.0
    assert not evaluate(fn("re", 3 + 4j)).is_complex()


@pytest.mark.parametrize("condition, expected", [(1, 10.0), (-1, 20.0), (0, 20.0), (1e-300, 10.0)])
def test_if_selects_branch_on_positive_condition(fn, evaluate, condition, expected):
    """Tests that if picks the then-branch only for a strictly positive condition."""
    assert evaluate(fn("if", condition, 10, 20)).as_number() == expected


def test_if_returns_complex_branch_unchanged(fn, evaluate):
    """Tests that a selected complex branch is copied verbatim."""
    assert evaluate(fn("if", 1, 2 + 1j, 0)).as_number() == 2 + 1j


def test_if_rejects_complex_condition(fn, evaluate):
    """Tests that a complex condition yields PASSED_COMPLEX."""
    assert evaluate(fn("if", 1 + 1j, 10, 20)).error is ErrorKind.PASSED_COMPLEX


@pytest.mark.parametrize("x, expected", [(0, 1.0), (1, 1.0), (5, 120.0), (5.7, 120.0), (10, 3628800.0)])
def test_factorial(fn, evaluate, x, expected):
    """Tests factorial of non-negative input, truncating fractional arguments."""
    assert evaluate(fn("factorial", x)).as_number() == expected


def test_factorial_domain_errors(fn, evaluate):
    """Tests the error states of factorial."""
    assert evaluate(fn("factorial", -1)).error is ErrorKind.NOT_A_NUMBER
    assert evaluate(fn("factorial", 2 + 1j)).error is ErrorKind.PASSED_COMPLEX
    assert evaluate(fn("factorial", math.inf)).error is ErrorKind.NOT_A_NUMBER


@pytest.mark.parametrize("x", [171, 1e19, 1e20, 1e300])
def test_factorial_overflow_is_inf_and_logged(fn, evaluate, caplog, x):
    """Tests that factorial past the float range is inf with a warning."""
    with caplog.at_level(logging.WARNING, logger="formulakit"):
        out = evaluate(fn("factorial", x))
    assert out.is_valid()
    assert out.real == math.inf
    assert any("overflows" in r.getMessage() for r in caplog.records)


def test_variables_are_read_from_context(fn, evaluate):
    """Tests that variables take their values from the bindings."""
    tree = fn("power", Variable("x"), Variable("y"))
    assert evaluate(tree, x=2.0, y=5.0).as_number() == 32.0
    assert evaluate(tree, x=2.0).error is ErrorKind.TERM_NOT_READY


def test_nested_tree(fn, evaluate):
    """Tests a tree mixing several functions."""
    tree = fn("abs", fn("if", Variable("x"), fn("sqrt", Variable("x")), fn("im", fn("sqrt", -16))))
    assert evaluate(tree, x=9.0).as_number() == 3.0
    assert evaluate(tree, x=-9.0).as_number() == 4.0


@pytest.mark.parametrize(
    "node",
    [
        FunctionNode("power", [Constant(2.0)]),
        FunctionNode("power", [Constant(2.0), None]),
        FunctionNode("sqrt", []),
        FunctionNode("if", [Constant(1.0), Constant(2.0), Constant(3.0), Constant(4.0)]),
    ],
)
def test_incomplete_node_is_term_not_ready(evaluate, node):
    """Tests that a child count different from the arity yields TERM_NOT_READY."""
    assert evaluate(node).error is ErrorKind.TERM_NOT_READY


def test_term_not_ready_reaches_root_regardless_of_siblings(fn, evaluate):
    """Tests that TERM_NOT_READY deep in a tree propagates unchanged to the root."""
    incomplete = FunctionNode("sqrt", [None])
    # the else-branch is never selected, yet its error still reaches the root
    tree = fn("power", 2, fn("if", 1, 5, fn("abs", incomplete)))
    assert evaluate(tree).error is ErrorKind.TERM_NOT_READY


def test_first_child_error_wins(fn, evaluate):
    """Tests that the first errored child determines the result."""
    tree = fn("power", fn("factorial", -1), FunctionNode("sqrt", [None]))
    assert evaluate(tree).error is ErrorKind.NOT_A_NUMBER
    tree = fn("power", FunctionNode("sqrt", [None]), fn("factorial", -1))
    assert evaluate(tree).error is ErrorKind.TERM_NOT_READY


def test_children_after_an_error_are_not_evaluated(fn, evaluate):
    """Tests that evaluation stops at the first errored child."""
    calls = []

    class RecordingLeaf:
        def value(self, context, out):
            calls.append("value")
            return out.set_real(1.0)

        def derivative(self, variable, context, out):
            return out.set_real(0.0)

        def differentiability(self, variable):
            raise AssertionError("not used")

    assert evaluate(fn("power", fn("factorial", -1), RecordingLeaf())).error is ErrorKind.NOT_A_NUMBER
    assert calls == []
    assert evaluate(fn("power", RecordingLeaf(), 2)).as_number() == 1.0
    assert calls == ["value"]
