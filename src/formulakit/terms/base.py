"""Term contract and leaf terms.

Every node of a formula tree, whatever its kind, implements the same three
operations:

* ``value(context, out)`` writes the value of the term into ``out``,
* ``derivative(variable, context, out)`` writes its derivative with respect
  to ``variable`` into ``out``,
* ``differentiability(variable)`` reports whether that derivative is defined.

The first two return the :class:`ErrorKind` stored in ``out`` and raise
:class:`formulakit.evaluation.context.EvaluationCancelled` when the pass is
cancelled.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from formulakit.evaluation.context import EvaluationContext
from formulakit.scalar import ErrorKind, Scalar
from formulakit.terms.differentiability import Differentiability
from formulakit.utils.types import Number

__all__ = ["Constant", "Term", "TermErrorCode", "Variable"]


@runtime_checkable
class Term(Protocol):
    """Protocol each formula term must satisfy.

    It serves only as a structural type check and carries no runtime
    behavior; function nodes, leaves and any term supplied by a tree editor
    are interchangeable as long as they provide these methods.
    """

    def value(self, context: EvaluationContext, out: Scalar) -> ErrorKind:
        """Evaluate the term into ``out``."""
        ...

    def derivative(self, variable: str, context: EvaluationContext, out: Scalar) -> ErrorKind:
        """Evaluate the derivative with respect to ``variable`` into ``out``."""
        ...

    def differentiability(self, variable: str) -> Differentiability:
        """Report whether the derivative with respect to ``variable`` is defined."""
        ...


class TermErrorCode(Enum):
    """Diagnostic status a node exposes for display next to it."""

    NO_ERROR = "no_error"
    NOT_DIFFERENTIABLE = "not_differentiable"


class Constant:
    """Leaf holding a fixed real or complex number."""

    def __init__(self, number: Number):
        self.number = number

    def __repr__(self) -> str:
        return f"Constant({self.number!r})"

    def value(self, context: EvaluationContext, out: Scalar) -> ErrorKind:
        context.raise_if_cancelled()
        return out.set_value(self.number)

    def derivative(self, variable: str, context: EvaluationContext, out: Scalar) -> ErrorKind:
        context.raise_if_cancelled()
        return out.set_real(0.0)

    def differentiability(self, variable: str) -> Differentiability:
        return Differentiability.INDEPENDENT


class Variable:
    """Leaf reading its value from the variable bindings of the context."""

    def __init__(self, name: str):
        if not name:
            raise ValueError("variable name must be a non-empty string.")
        self.name = name

    def __repr__(self) -> str:
        return f"Variable({self.name!r})"

    def value(self, context: EvaluationContext, out: Scalar) -> ErrorKind:
        context.raise_if_cancelled()
        return context.lookup(self.name, out)

    def derivative(self, variable: str, context: EvaluationContext, out: Scalar) -> ErrorKind:
        context.raise_if_cancelled()
        return out.set_real(1.0 if variable == self.name else 0.0)

    def differentiability(self, variable: str) -> Differentiability:
        if variable == self.name:
            return Differentiability.ANALYTICAL
        return Differentiability.INDEPENDENT
