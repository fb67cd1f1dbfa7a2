"""Catalog of the supported functions.

Each :class:`FunctionType` maps to one :class:`FunctionRule` holding its
arity, value rule, derivative rule and differentiability refinement. The
table is checked for completeness at import time, so a function cannot be
added without all of its rules.

Child order is fixed per function:

* ``power``: base, exponent
* ``nthrt``: degree, radicand
* ``if``: condition, then-branch, else-branch

Rules receive only valid child values; error propagation from the children is
done by :class:`formulakit.terms.function_node.FunctionNode` before a rule is
applied.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from formulakit.scalar import ErrorKind, Scalar
from formulakit.terms.differentiability import (
    Differentiability,
    reduce_differentiability,
)
from formulakit.utils.numerics import factorial_double, unit_sign

__all__ = [
    "FunctionRule",
    "FunctionType",
    "available_functions",
    "function_arity",
    "function_rule",
    "resolve_function",
]

ValueRule = Callable[[Scalar, Sequence[Scalar]], ErrorKind]
DerivativeRule = Callable[[Scalar, Sequence[Scalar], Sequence[Scalar], Sequence[Scalar]], ErrorKind]
DifferentiabilityRule = Callable[[Sequence[Differentiability]], Differentiability]


class FunctionType(Enum):
    """Supported functions, identified by their lower-case name."""

    POWER = "power"
    SQRT = "sqrt"
    NTHRT = "nthrt"
    FACTORIAL = "factorial"
    ABS = "abs"
    CONJUGATE = "conjugate"
    RE = "re"
    IM = "im"
    IF = "if"

    @property
    def arity(self) -> int:
        return _RULES[self].arity


@dataclass(frozen=True)
class FunctionRule:
    """Value and derivative rules of one function.

    Attributes:
        arity: Fixed number of children.
        value: Writes the function value for the child values into ``out``.
        derivative: Writes the derivative into ``out`` given the child values,
            the child derivatives listed in ``differentiated`` and two scratch
            scalars. ``None`` marks a function whose derivative is zero once
            all ``constant`` children are independent of the variable.
        differentiability: Refines the child statuses into the node status.
        differentiated: Indices of the children whose derivatives the rule reads.
        constant: Indices of the children that must be independent of the
            variable for the derivative to exist.
    """

    arity: int
    value: ValueRule
    derivative: DerivativeRule | None
    differentiability: DifferentiabilityRule
    differentiated: tuple[int, ...] = ()
    constant: tuple[int, ...] = ()


# --- value rules -------------------------------------------------------------

def _power_value(out: Scalar, args: Sequence[Scalar]) -> ErrorKind:
    return out.pow(args[0], args[1])


def _sqrt_value(out: Scalar, args: Sequence[Scalar]) -> ErrorKind:
    return out.sqrt(args[0])


def _nthrt_value(out: Scalar, args: Sequence[Scalar]) -> ErrorKind:
    return out.nth_root(args[1], args[0].get_integer())


def _abs_value(out: Scalar, args: Sequence[Scalar]) -> ErrorKind:
    return out.abs(args[0])


def _conjugate_value(out: Scalar, args: Sequence[Scalar]) -> ErrorKind:
    return out.conj(args[0])


def _re_value(out: Scalar, args: Sequence[Scalar]) -> ErrorKind:
    return out.real_of(args[0])


def _im_value(out: Scalar, args: Sequence[Scalar]) -> ErrorKind:
    return out.imaginary_of(args[0])


def _if_value(out: Scalar, args: Sequence[Scalar]) -> ErrorKind:
    condition = args[0]
    if condition.is_complex():
        return out.invalidate(ErrorKind.PASSED_COMPLEX)
    return out.assign(args[1] if condition.real > 0 else args[2])


def _factorial_value(out: Scalar, args: Sequence[Scalar]) -> ErrorKind:
    a0 = args[0]
    if a0.is_complex():
        return out.invalidate(ErrorKind.PASSED_COMPLEX)
    try:
        result = factorial_double(a0.real)
    except ValueError:
        return out.invalidate(ErrorKind.NOT_A_NUMBER)
    return out.set_real(result)


# --- derivative rules --------------------------------------------------------

def _power_derivative(
    out: Scalar, args: Sequence[Scalar], ders: Sequence[Scalar], tmp: Sequence[Scalar]
) -> ErrorKind:
    a0, a1 = args[0], args[1]
    d0, d1 = ders[0], ders[1]
    d0_zero, d1_zero = d0.is_zero(), d1.is_zero()
    if d0_zero and d1_zero:
        return out.set_real(0.0)
    if d1_zero:
        # f^a: a * f^(a - 1) * f'
        t = tmp[0]
        t.set_real(1.0)
        t.subtract(a1, t)
        t.pow(a0, t)
        out.multiply(a1, t)
        return out.multiply(out, d0)
    if d0_zero:
        # a^g: a^g * log(a) * g'
        t = tmp[0]
        t.log(a0)
        out.pow(a0, a1)
        out.multiply(out, t)
        return out.multiply(out, d1)
    # f^g: f^g * (f' * g / f + g' * log(f))
    t0, t1 = tmp[0], tmp[1]
    t0.multiply(d0, a1)
    t0.divide(t0, a0)
    t1.log(a0)
    t1.multiply(d1, t1)
    t0.add(t0, t1)
    out.pow(a0, a1)
    return out.multiply(out, t0)


def _sqrt_derivative(
    out: Scalar, args: Sequence[Scalar], ders: Sequence[Scalar], tmp: Sequence[Scalar]
) -> ErrorKind:
    two = tmp[0]
    two.set_real(2.0)
    out.sqrt(args[0])
    out.multiply(out, two)
    return out.divide(ders[0], out)


def _nthrt_derivative(
    out: Scalar, args: Sequence[Scalar], ders: Sequence[Scalar], tmp: Sequence[Scalar]
) -> ErrorKind:
    # (a1^(1/n))' = a1' / (n * nthrt(a1^(n - 1), n))
    n = args[0].get_integer()
    root, degree = tmp[0], tmp[1]
    root.set_real(n - 1)
    root.pow(args[1], root)
    root.nth_root(root, n)
    degree.set_real(n)
    root.multiply(root, degree)
    return out.divide(ders[1], root)


def _abs_derivative(
    out: Scalar, args: Sequence[Scalar], ders: Sequence[Scalar], tmp: Sequence[Scalar]
) -> ErrorKind:
    a0 = args[0]
    if a0.is_complex():
        return out.invalidate(ErrorKind.PASSED_COMPLEX)
    sign = tmp[0]
    sign.set_real(unit_sign(a0.real))
    return out.multiply(sign, ders[0])


def _re_derivative(
    out: Scalar, args: Sequence[Scalar], ders: Sequence[Scalar], tmp: Sequence[Scalar]
) -> ErrorKind:
    return out.real_of(ders[0])


def _im_derivative(
    out: Scalar, args: Sequence[Scalar], ders: Sequence[Scalar], tmp: Sequence[Scalar]
) -> ErrorKind:
    return out.imaginary_of(ders[0])


# --- differentiability refinements -------------------------------------------

def _analytic(statuses: Sequence[Differentiability]) -> Differentiability:
    return reduce_differentiability(statuses)


def _constant_degree(statuses: Sequence[Differentiability]) -> Differentiability:
    # the derivative formula treats the root degree as a constant
    if statuses[0] is not Differentiability.INDEPENDENT:
        return Differentiability.NONE
    return reduce_differentiability(statuses)


def _independent_only(statuses: Sequence[Differentiability]) -> Differentiability:
    if reduce_differentiability(statuses) is Differentiability.INDEPENDENT:
        return Differentiability.INDEPENDENT
    return Differentiability.NONE


_RULES: dict[FunctionType, FunctionRule] = {
    FunctionType.POWER: FunctionRule(
        2, _power_value, _power_derivative, _analytic, differentiated=(0, 1)
    ),
    FunctionType.SQRT: FunctionRule(
        1, _sqrt_value, _sqrt_derivative, _analytic, differentiated=(0,)
    ),
    FunctionType.NTHRT: FunctionRule(
        2, _nthrt_value, _nthrt_derivative, _constant_degree, differentiated=(1,), constant=(0,)
    ),
    FunctionType.FACTORIAL: FunctionRule(
        1, _factorial_value, None, _independent_only, constant=(0,)
    ),
    FunctionType.ABS: FunctionRule(
        1, _abs_value, _abs_derivative, _analytic, differentiated=(0,)
    ),
    FunctionType.CONJUGATE: FunctionRule(
        1, _conjugate_value, None, _independent_only, constant=(0,)
    ),
    FunctionType.RE: FunctionRule(
        1, _re_value, _re_derivative, _analytic, differentiated=(0,)
    ),
    FunctionType.IM: FunctionRule(
        1, _im_value, _im_derivative, _analytic, differentiated=(0,)
    ),
    FunctionType.IF: FunctionRule(
        3, _if_value, None, _independent_only, constant=(0, 1, 2)
    ),
}

_missing = [f.name for f in FunctionType if f not in _RULES]
if _missing:
    raise RuntimeError(f"function catalog is missing rules for {', '.join(_missing)}.")

# Accepted spellings besides the canonical lower-case names.
_ALIASES: dict[FunctionType, tuple[str, ...]] = {
    FunctionType.POWER: ("pow",),
    FunctionType.NTHRT: ("nthroot", "nth_root", "root"),
    FunctionType.CONJUGATE: ("conj",),
}


def _norm(s: str) -> str:
    """Normalize a function name for matching (case/spacing/punct insensitive)."""
    return re.sub(r"[^a-z0-9]+", "", s.lower())


def _name_map() -> dict[str, FunctionType]:
    names: dict[str, FunctionType] = {}
    for f in FunctionType:
        names[_norm(f.value)] = f
        for alias in _ALIASES.get(f, ()):
            names[_norm(alias)] = f
    return names


_NAMES = _name_map()


def resolve_function(function: FunctionType | str) -> FunctionType:
    """Resolves a function given as enum member, name or alias.

    Args:
        function: Catalog member or its name (e.g. ``"sqrt"``, ``"nth-root"``).

    Returns:
        The matching :class:`FunctionType`.

    Raises:
        ValueError: If the name is not in the catalog.
        TypeError: If ``function`` is neither a member nor a string.
    """
    if isinstance(function, FunctionType):
        return function
    if not isinstance(function, str):
        raise TypeError(f"function must be a FunctionType or str, got {type(function).__name__}.")
    try:
        return _NAMES[_norm(function)]
    except KeyError:
        opts = ", ".join(available_functions())
        raise ValueError(f"Unknown function '{function}'. Choose one of {{{opts}}}.") from None


def function_rule(function: FunctionType) -> FunctionRule:
    return _RULES[function]


def function_arity(function: FunctionType | str) -> int:
    """Returns the fixed number of children of a function."""
    return _RULES[resolve_function(function)].arity


def available_functions() -> list[str]:
    """List canonical function names in catalog order.

    Returns:
        List of function names.
    """
    return [f.value for f in FunctionType]
