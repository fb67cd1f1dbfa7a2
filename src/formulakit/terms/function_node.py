"""Provides :class:`FunctionNode`, the tree node applying a catalog function.

A node owns an ordered list of children and implements the term contract of
:mod:`formulakit.terms.base` by recursion:

1. Check the cancellation signal of the context.
2. Report ``TERM_NOT_READY`` if the node does not hold exactly ``arity``
   children.
3. Evaluate the children into a scratch frame borrowed from the context and
   return the first child error unchanged.
4. Apply the function's value or derivative rule.

Example:
    >>> from formulakit.evaluation import EvaluationContext
    >>> from formulakit.scalar import Scalar
    >>> from formulakit.terms import Constant, FunctionNode
    >>> node = FunctionNode("power", [Constant(2.0), Constant(3.0)])
    >>> out = Scalar()
    >>> node.value(EvaluationContext(), out)
    <ErrorKind.OK: 'ok'>
    >>> out.real
    8.0
"""

from __future__ import annotations

from typing import Sequence

from formulakit.evaluation.context import EvaluationContext
from formulakit.logger import formulakit_logger
from formulakit.scalar import ErrorKind, Scalar
from formulakit.terms.base import Term, TermErrorCode
from formulakit.terms.differentiability import Differentiability
from formulakit.terms.functions import (
    FunctionType,
    function_arity,
    function_rule,
    resolve_function,
)

__all__ = ["FunctionNode"]

# Scratch scalars used by the derivative rules.
_DERIVATIVE_TEMPS = 2


class FunctionNode:
    """Formula tree node applying one catalog function to its children.

    Attributes:
        function: The catalog function of this node.
        children: Child terms in the function's argument order. ``None``
            marks a child the tree editor has not filled yet.
        error_code: Diagnostic status set by the last differentiability
            check, for display next to the node.
        error_variable: Variable that made the node not differentiable, or
            ``None``.
    """

    def __init__(
        self,
        function: FunctionType | str,
        children: Sequence[Term | None] = (),
    ):
        """Initializes the node.

        Args:
            function: Catalog function or its name.
            children: Child terms; may be incomplete while the tree is edited.
        """
        self.function = resolve_function(function)
        self.children: list[Term | None] = list(children)
        self.error_code = TermErrorCode.NO_ERROR
        self.error_variable: str | None = None

    def __repr__(self) -> str:
        args = ", ".join(repr(c) for c in self.children)
        return f"FunctionNode({self.function.value!r}, [{args}])"

    @property
    def arity(self) -> int:
        return function_arity(self.function)

    def is_ready(self) -> bool:
        """Whether the node holds exactly ``arity`` children."""
        return len(self.children) == self.arity and all(c is not None for c in self.children)

    def set_error_code(self, code: TermErrorCode, variable: str | None = None) -> None:
        self.error_code = code
        self.error_variable = variable

    def _mark_not_differentiable(self, variable: str) -> None:
        formulakit_logger.debug(
            "%s is not differentiable with respect to '%s'.", self.function.value, variable
        )
        self.set_error_code(TermErrorCode.NOT_DIFFERENTIABLE, variable)

    def _evaluate_children(self, context: EvaluationContext, args: list[Scalar]) -> ErrorKind | None:
        """Evaluates the children into ``args``, stopping at the first error."""
        for child, arg in zip(self.children, args):
            child.value(context, arg)
            context.raise_if_cancelled()
            if not arg.is_valid():
                return arg.error
        return None

    def value(self, context: EvaluationContext, out: Scalar) -> ErrorKind:
        context.raise_if_cancelled()
        if not self.is_ready():
            return out.invalidate(ErrorKind.TERM_NOT_READY)
        rule = function_rule(self.function)
        with context.frame(rule.arity) as args:
            error = self._evaluate_children(context, args)
            if error is not None:
                return out.invalidate(error)
            return rule.value(out, args)

    def derivative(self, variable: str, context: EvaluationContext, out: Scalar) -> ErrorKind:
        """Evaluates the derivative with respect to ``variable`` into ``out``.

        Children that the rule treats as constants must be independent of
        the variable; otherwise the node is marked as not differentiable and
        the result is ``NOT_A_NUMBER``. Functions without a smooth rule
        (``if``, ``factorial``, ``conjugate``) have the derivative zero once
        that holds; the taken ``if`` branch is never differentiated.
        """
        context.raise_if_cancelled()
        if not self.is_ready():
            return out.invalidate(ErrorKind.TERM_NOT_READY)
        rule = function_rule(self.function)
        with context.frame(rule.arity) as args:
            error = self._evaluate_children(context, args)
            if error is not None:
                return out.invalidate(error)

            for index in rule.constant:
                if self.children[index].differentiability(variable) is not Differentiability.INDEPENDENT:
                    self._mark_not_differentiable(variable)
                    return out.invalidate(ErrorKind.NOT_A_NUMBER)
            self.set_error_code(TermErrorCode.NO_ERROR)
            if rule.derivative is None:
                return out.set_real(0.0)

            with context.frame(rule.arity) as ders, context.frame(_DERIVATIVE_TEMPS) as tmp:
                for index in rule.differentiated:
                    self.children[index].derivative(variable, context, ders[index])
                context.raise_if_cancelled()
                return rule.derivative(out, args, ders, tmp)

    def differentiability(self, variable: str) -> Differentiability:
        """Reports whether the derivative with respect to ``variable`` is defined.

        Also records the outcome in :attr:`error_code` and
        :attr:`error_variable`. An incomplete node is never differentiable.
        """
        if not self.is_ready():
            status = Differentiability.NONE
        else:
            rule = function_rule(self.function)
            status = rule.differentiability([c.differentiability(variable) for c in self.children])
        if status is Differentiability.NONE:
            self._mark_not_differentiable(variable)
        else:
            self.set_error_code(TermErrorCode.NO_ERROR)
        return status
