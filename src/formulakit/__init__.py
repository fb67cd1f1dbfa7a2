"""Provides the formula evaluation and differentiation core."""

from importlib.metadata import PackageNotFoundError, version

from formulakit.evaluation import (
    CalculationResult,
    CalculationRunner,
    EvaluationCancelled,
    EvaluationConfig,
    EvaluationContext,
    FormulaKitError,
)
from formulakit.formula_kit import FormulaKit
from formulakit.scalar import ErrorKind, Scalar
from formulakit.terms import (
    Constant,
    Differentiability,
    FunctionNode,
    FunctionType,
    Variable,
    available_functions,
)

try:
    __version__ = version("formulakit")
except PackageNotFoundError:
    pass

FormulaKit.__module__ = "formulakit"

__all__ = [
    "CalculationResult",
    "CalculationRunner",
    "Constant",
    "Differentiability",
    "ErrorKind",
    "EvaluationCancelled",
    "EvaluationConfig",
    "EvaluationContext",
    "FormulaKit",
    "FormulaKitError",
    "FunctionNode",
    "FunctionType",
    "Scalar",
    "Variable",
    "available_functions",
]
