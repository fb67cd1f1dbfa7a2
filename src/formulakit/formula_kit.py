"""Provides the FormulaKit class.

A light front end over a formula tree that exposes the three term operations
with caller-owned results:

>>> from formulakit import FormulaKit
>>> from formulakit.terms import Constant, FunctionNode, Variable
>>>
>>> # sqrt(x)
>>> kit = FormulaKit(FunctionNode("sqrt", [Variable("x")]))
>>> kit.value({"x": 4.0}).real
2.0
>>> kit.derivative("x", {"x": 4.0}).real
0.25
>>> kit.differentiability("x")
<Differentiability.ANALYTICAL: 2>

Numeric failures are reported through the error state of the returned
scalar, never raised. A cancelled pass raises
:class:`~formulakit.evaluation.context.EvaluationCancelled`.
"""

from __future__ import annotations

from formulakit.evaluation.config import EvaluationConfig
from formulakit.evaluation.context import EvaluationContext
from formulakit.scalar import Scalar
from formulakit.terms.base import Term
from formulakit.terms.differentiability import Differentiability
from formulakit.utils.types import VariableBindings

__all__ = ["FormulaKit"]


class FormulaKit:
    """Provides value, derivative and differentiability of a formula tree.

    Attributes:
        term: Root of the formula tree.
        config: Arena sizing for the contexts this kit creates.
    """

    def __init__(self, term: Term, *, config: EvaluationConfig | None = None):
        """Initialise with the root term.

        Args:
            term: Root of the formula tree; any object implementing
                :class:`~formulakit.terms.base.Term`.
            config: Arena sizing for contexts created by this kit. The active
                configuration is used if omitted.
        """
        if not isinstance(term, Term):
            raise TypeError(f"term must implement the Term protocol, got {type(term).__name__}.")
        self.term = term
        self.config = config

    def _context(
        self,
        variables: VariableBindings | None,
        context: EvaluationContext | None,
    ) -> EvaluationContext:
        if context is None:
            return EvaluationContext(variables, config=self.config)
        if variables:
            for name, number in variables.items():
                context.bind(name, number)
        return context

    def value(
        self,
        variables: VariableBindings | None = None,
        *,
        context: EvaluationContext | None = None,
    ) -> Scalar:
        """Returns the value of the tree.

        Args:
            variables: Variable bindings of the pass.
            context: Context to run in, e.g. one shared with a canceller.
                A fresh context is created if omitted.

        Returns:
            A new scalar holding the value or its error state.
        """
        out = Scalar()
        self.term.value(self._context(variables, context), out)
        return out

    def derivative(
        self,
        variable: str,
        variables: VariableBindings | None = None,
        *,
        context: EvaluationContext | None = None,
    ) -> Scalar:
        """Returns the derivative of the tree with respect to ``variable``."""
        out = Scalar()
        self.term.derivative(variable, self._context(variables, context), out)
        return out

    def differentiability(self, variable: str) -> Differentiability:
        """Returns the differentiability status of the tree for ``variable``."""
        return self.term.differentiability(variable)
