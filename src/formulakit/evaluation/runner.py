"""Background calculation runner.

Evaluation passes are re-triggered on every edit of a formula. The runner
executes them on one dedicated worker thread so the caller never blocks, and
supersedes the in-flight pass whenever a new one is submitted: the previous
context is cancelled, its nodes unwind with
:class:`~formulakit.evaluation.context.EvaluationCancelled` at the next node
boundary, and its future resolves to a cancelled :class:`CalculationResult`.

Example:
    >>> from formulakit.evaluation import CalculationRunner
    >>> from formulakit.terms import Constant, FunctionNode
    >>> with CalculationRunner() as runner:
    ...     result = runner.submit(FunctionNode("sqrt", [Constant(9.0)])).result()
    >>> result.value.real
    3.0
"""

from __future__ import annotations

import contextvars
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING

from formulakit.evaluation.config import EvaluationConfig
from formulakit.evaluation.context import EvaluationCancelled, EvaluationContext
from formulakit.logger import formulakit_logger
from formulakit.scalar import Scalar
from formulakit.utils.types import VariableBindings

if TYPE_CHECKING:
    from formulakit.terms.base import Term

__all__ = ["CalculationResult", "CalculationRunner"]


@dataclass(frozen=True)
class CalculationResult:
    """Outcome of one pass.

    Attributes:
        value: The computed scalar (possibly carrying an error state), or
            ``None`` if the pass was cancelled.
        variable: Differentiation variable, or ``None`` for a plain value.
        cancelled: Whether the pass was cancelled before it finished.
    """

    value: Scalar | None
    variable: str | None = None
    cancelled: bool = False


class CalculationRunner:
    """Runs evaluation passes on a single worker thread, newest pass wins."""

    def __init__(self, *, config: EvaluationConfig | None = None):
        """Initializes the runner.

        Args:
            config: Arena sizing for the contexts created by :meth:`submit`.
        """
        self.config = config
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="formulakit")
        self._lock = threading.Lock()
        self._current: EvaluationContext | None = None

    def __enter__(self) -> CalculationRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)

    def cancel(self) -> None:
        """Cancels the in-flight pass, if any."""
        with self._lock:
            if self._current is not None:
                self._current.cancel()
                self._current = None

    def submit(
        self,
        term: Term,
        *,
        variable: str | None = None,
        variables: VariableBindings | None = None,
    ) -> Future[CalculationResult]:
        """Queues a pass over ``term`` and cancels the previous one.

        Args:
            term: Root of the formula tree. The caller must not edit the tree
                until the returned future is done.
            variable: Differentiate with respect to this variable instead of
                evaluating the plain value.
            variables: Variable bindings of the pass.

        Returns:
            Future resolving to the :class:`CalculationResult`.
        """
        context = EvaluationContext(variables, config=self.config)
        with self._lock:
            if self._current is not None:
                formulakit_logger.debug("Superseding in-flight calculation.")
                self._current.cancel()
            self._current = context
        # Run the pass in a copy of the caller's context so config overrides apply.
        ctx = contextvars.copy_context()
        return self._executor.submit(ctx.run, self._run, term, context, variable)

    def _run(
        self,
        term: Term,
        context: EvaluationContext,
        variable: str | None,
    ) -> CalculationResult:
        out = Scalar()
        try:
            if variable is None:
                term.value(context, out)
            else:
                term.derivative(variable, context, out)
        except EvaluationCancelled:
            formulakit_logger.debug("Calculation cancelled.")
            return CalculationResult(None, variable, cancelled=True)
        finally:
            with self._lock:
                if self._current is context:
                    self._current = None
        return CalculationResult(out, variable)

    def shutdown(self, wait: bool = True) -> None:
        """Cancels the in-flight pass and stops the worker thread."""
        self.cancel()
        self._executor.shutdown(wait=wait)
