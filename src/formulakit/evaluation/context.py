"""Evaluation context shared by all nodes of one recursive pass.

A context carries three things:

* the cooperative cancellation signal, checked by every node before it
  descends into its children,
* the variable bindings read by :class:`formulakit.terms.base.Variable`
  leaves,
* the scratch arena: one list of :class:`Scalar` per recursion depth, lent to
  the node currently running at that depth through :meth:`frame`.

A context belongs to exactly one pass at a time. It may be cancelled from any
thread; everything else must be used from the thread running the pass.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from formulakit.evaluation.config import EvaluationConfig, get_config
from formulakit.scalar import ErrorKind, Scalar
from formulakit.utils.types import Number, VariableBindings

__all__ = [
    "EvaluationCancelled",
    "EvaluationContext",
    "FormulaKitError",
]


class FormulaKitError(Exception):
    """Base class for exceptions raised by formulakit."""


class EvaluationCancelled(FormulaKitError):
    """Raised when the cancellation signal of a pass has been set.

    This is a control signal, not a numeric error: a cancelled pass produces
    no scalar at all.
    """


class EvaluationContext:
    """Cancellation signal, variable bindings and scratch arena of one pass."""

    def __init__(
        self,
        variables: VariableBindings | None = None,
        *,
        cancel_event: threading.Event | None = None,
        config: EvaluationConfig | None = None,
    ):
        """Initializes the context.

        Args:
            variables: Values of the named variables, real or complex.
            cancel_event: Event shared with whoever may cancel the pass. A new
                event is created if omitted.
            config: Arena sizing; the active configuration is used if omitted.
        """
        self.config = config if config is not None else get_config()
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self._variables: dict[str, Number] = dict(variables or {})
        self._arena: list[list[Scalar]] = [
            [Scalar() for _ in range(self.config.frame_width)]
            for _ in range(self.config.preallocated_depth)
        ]
        self._depth = 0

    # cancellation

    def cancel(self) -> None:
        """Requests cancellation of the pass using this context."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raises :class:`EvaluationCancelled` if cancellation was requested."""
        if self._cancel_event.is_set():
            raise EvaluationCancelled("evaluation pass was cancelled")

    # variables

    def bind(self, name: str, value: Number) -> None:
        self._variables[name] = value

    def lookup(self, name: str, out: Scalar) -> ErrorKind:
        """Writes the value bound to ``name`` into ``out``.

        An unbound name yields ``TERM_NOT_READY``.
        """
        try:
            value = self._variables[name]
        except KeyError:
            return out.invalidate(ErrorKind.TERM_NOT_READY)
        return out.set_value(value)

    # scratch arena

    @property
    def depth(self) -> int:
        """Number of frames currently lent out."""
        return self._depth

    @property
    def arena_depth(self) -> int:
        """Number of recursion levels the arena holds frames for."""
        return len(self._arena)

    @contextmanager
    def frame(self, size: int) -> Iterator[list[Scalar]]:
        """Lends the scratch frame of the next recursion level.

        The yielded list holds at least ``size`` scalars and is reused by
        every later call at the same depth, so its content is only valid
        inside the ``with`` block.

        Args:
            size: Number of scalars needed.

        Yields:
            The frame's scalars.
        """
        depth = self._depth
        if depth == len(self._arena):
            self._arena.append([])
        slots = self._arena[depth]
        while len(slots) < size:
            slots.append(Scalar())
        self._depth = depth + 1
        try:
            yield slots
        finally:
            self._depth = depth
