"""Utility functions for FormulaKit package."""

from .numerics import (
    factorial_double,
    is_integer_valued,
    truncate_to_int,
    unit_sign,
)

__all__ = [
    "factorial_double",
    "is_integer_valued",
    "truncate_to_int",
    "unit_sign",
]
