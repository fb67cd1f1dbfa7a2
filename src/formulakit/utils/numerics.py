"""Numerical utilities."""

from __future__ import annotations

import math

import numpy as np
from scipy.special import factorial

from formulakit.logger import formulakit_logger

__all__ = [
    "MAX_FLOAT_FACTORIAL",
    "factorial_double",
    "is_integer_valued",
    "truncate_to_int",
    "unit_sign",
]

# Largest n with a finite float64 n!.
MAX_FLOAT_FACTORIAL = 170


def factorial_double(x: float) -> float:
    """Computes ``n!`` as a float, where ``n`` is ``x`` truncated toward zero.

    Arguments past :data:`MAX_FLOAT_FACTORIAL` overflow the float range and
    evaluate to ``inf``.

    Args:
        x: Argument; its fractional part is dropped.

    Returns:
        The factorial of the truncated argument as a float.

    Raises:
        ValueError: If ``x`` is not finite or truncates to a negative integer.
    """
    if not math.isfinite(x):
        raise ValueError(f"factorial is not defined for non-finite argument {x}")
    n = int(x)
    if n < 0:
        raise ValueError(f"factorial is not defined for negative argument {n}")
    if n > MAX_FLOAT_FACTORIAL:
        formulakit_logger.warning(
            "factorial argument %d exceeds %d; the result overflows to inf.",
            n,
            MAX_FLOAT_FACTORIAL,
        )
        # n may exceed the integer range numpy accepts
        return math.inf
    return float(factorial(n, exact=False))


def is_integer_valued(x: float) -> bool:
    """Checks whether a finite float holds an integer value."""
    return bool(np.isfinite(x)) and float(x).is_integer()


def truncate_to_int(x: float) -> int:
    """Truncates a float toward zero.

    Non-finite input has no integer counterpart and maps to ``0``.

    Args:
        x: Input value.

    Returns:
        ``x`` with its fractional part dropped.
    """
    if not math.isfinite(x):
        return 0
    return int(x)


def unit_sign(x: float) -> float:
    """Returns ``-1.0`` for negative input and ``+1.0`` otherwise, including zero."""
    return -1.0 if x < 0 else 1.0
