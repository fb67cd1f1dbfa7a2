"""Evaluation context, configuration and the background runner."""

from formulakit.evaluation.config import (
    EvaluationConfig,
    get_config,
    set_default_config,
    use_config,
)
from formulakit.evaluation.context import (
    EvaluationCancelled,
    EvaluationContext,
    FormulaKitError,
)
from formulakit.evaluation.runner import CalculationResult, CalculationRunner

__all__ = [
    "CalculationResult",
    "CalculationRunner",
    "EvaluationCancelled",
    "EvaluationConfig",
    "EvaluationContext",
    "FormulaKitError",
    "get_config",
    "set_default_config",
    "use_config",
]
