"""Pytest configuration with shared builders for formula trees."""

from __future__ import annotations

from typing import Any

import pytest

import formulakit.evaluation.config as config_module
from formulakit.evaluation import EvaluationContext
from formulakit.scalar import Scalar
from formulakit.terms import Constant, FunctionNode

__all__ = ["as_term"]


def as_term(x: Any) -> Any:
    """Wraps plain numbers into constants; terms and ``None`` pass through."""
    if x is None or hasattr(x, "value"):
        return x
    return Constant(x)


@pytest.fixture(autouse=True)
def _builtin_default_config(monkeypatch):
    """Start every test from the built-in evaluation config."""
    monkeypatch.setattr(config_module, "_DEFAULT_CONFIG", None, raising=True)


@pytest.fixture
def fn():
    """Return a builder ``fn(name, *children)`` for function nodes.

    Numbers given as children are wrapped into :class:`Constant` leaves.
    """
    def _build(name: str, *children: Any) -> FunctionNode:
        return FunctionNode(name, [as_term(c) for c in children])
    return _build


@pytest.fixture
def evaluate():
    """Return ``evaluate(term, **variables) -> Scalar`` running a fresh pass."""
    def _evaluate(term, **variables) -> Scalar:
        out = Scalar()
        term.value(EvaluationContext(variables), out)
        return out
    return _evaluate


@pytest.fixture
def differentiate():
    """Return ``differentiate(term, var, **variables) -> Scalar`` running a fresh pass."""
    def _differentiate(term, var: str, **variables) -> Scalar:
        out = Scalar()
        term.derivative(var, EvaluationContext(variables), out)
        return out
    return _differentiate
