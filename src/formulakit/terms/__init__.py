"""Formula tree terms: the function catalog, function nodes and leaves."""

from formulakit.terms.base import Constant, Term, TermErrorCode, Variable
from formulakit.terms.differentiability import (
    Differentiability,
    reduce_differentiability,
)
from formulakit.terms.function_node import FunctionNode
from formulakit.terms.functions import (
    FunctionRule,
    FunctionType,
    available_functions,
    function_arity,
    function_rule,
    resolve_function,
)

__all__ = [
    "Constant",
    "Differentiability",
    "FunctionNode",
    "FunctionRule",
    "FunctionType",
    "Term",
    "TermErrorCode",
    "Variable",
    "available_functions",
    "function_arity",
    "function_rule",
    "reduce_differentiability",
    "resolve_function",
]
