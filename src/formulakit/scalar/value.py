"""Provides the :class:`Scalar` value type.

A scalar is a real or complex number together with an explicit error state.
All operations follow the accumulator convention: they write the result into
the receiving instance and return its :class:`ErrorKind`, so that recursive
evaluation can reuse pre-allocated scratch values instead of creating a new
object on every step.

Errors are absorbing: an operation with an errored operand stores the error of
the first errored operand and does not compute anything.

Examples:
    >>> from formulakit.scalar import Scalar
    >>> base, exponent, out = Scalar(-8.0), Scalar(1.0 / 3.0), Scalar()
    >>> out.pow(base, exponent)
    <ErrorKind.OK: 'ok'>
    >>> out.is_complex()
    True
"""

from __future__ import annotations

import math

import numpy as np

from formulakit.scalar.errors import ErrorKind
from formulakit.utils.numerics import is_integer_valued, truncate_to_int
from formulakit.utils.types import Number

__all__ = ["Scalar"]


def _as_float(x: float) -> float:
    """Converts to float; integers past the float range become signed ``inf``."""
    try:
        return float(x)
    except OverflowError:
        return math.inf if x > 0 else -math.inf


def _absorb(*operands: Scalar) -> ErrorKind | None:
    """Returns the error of the first errored operand, if any."""
    for operand in operands:
        if operand._error.is_error:
            return operand._error
    return None


class Scalar:
    """Real-or-complex number with an explicit error state.

    Attributes are private; read them through :attr:`real`,
    :attr:`imaginary`, :attr:`error` and the predicate methods. An errored
    scalar reports ``nan`` for both numeric parts.
    """

    __slots__ = ("_real", "_imaginary", "_complex", "_error")

    def __init__(self, real: float = 0.0, imaginary: float | None = None):
        """Initializes the scalar.

        Args:
            real: Real part.
            imaginary: Imaginary part. If given, the scalar is complex even
                when the imaginary part is zero.
        """
        self._real = 0.0
        self._imaginary = 0.0
        self._complex = False
        self._error = ErrorKind.OK
        if imaginary is None:
            self.set_real(real)
        else:
            self.set_complex(real, imaginary)

    @classmethod
    def of(cls, number: Number) -> Scalar:
        """Creates a scalar from a Python or NumPy number."""
        out = cls()
        out.set_value(number)
        return out

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------

    @property
    def error(self) -> ErrorKind:
        return self._error

    @property
    def real(self) -> float:
        return self._real if self._error is ErrorKind.OK else float("nan")

    @property
    def imaginary(self) -> float:
        return self._imaginary if self._error is ErrorKind.OK else float("nan")

    def is_valid(self) -> bool:
        return not self._error.is_error

    def is_complex(self) -> bool:
        return self._error is ErrorKind.OK and self._complex

    def is_zero(self) -> bool:
        """Whether the scalar is a valid exact zero.

        An errored scalar is never zero.
        """
        if self._error is not ErrorKind.OK:
            return False
        return self._real == 0.0 and (not self._complex or self._imaginary == 0.0)

    def get_integer(self) -> int:
        """Returns the real part truncated toward zero (``0`` if errored)."""
        return truncate_to_int(self.real)

    def as_number(self) -> float | complex | None:
        """Returns the value as ``float`` or ``complex``, or ``None`` if errored."""
        if self._error is not ErrorKind.OK:
            return None
        if self._complex:
            return complex(self._real, self._imaginary)
        return self._real

    def __repr__(self) -> str:
        if self._error is not ErrorKind.OK:
            return f"Scalar(<{self._error.name}>)"
        if self._complex:
            return f"Scalar({complex(self._real, self._imaginary)!r})"
        return f"Scalar({self._real!r})"

    # ------------------------------------------------------------------
    # setters
    # ------------------------------------------------------------------

    def set_real(self, x: float) -> ErrorKind:
        x = _as_float(x)
        if np.isnan(x):
            return self.invalidate(ErrorKind.NOT_A_NUMBER)
        self._real = x
        self._imaginary = 0.0
        self._complex = False
        self._error = ErrorKind.OK
        return ErrorKind.OK

    def set_complex(self, real: float, imaginary: float) -> ErrorKind:
        real, imaginary = _as_float(real), _as_float(imaginary)
        if np.isnan(real) or np.isnan(imaginary):
            return self.invalidate(ErrorKind.NOT_A_NUMBER)
        self._real = real
        self._imaginary = imaginary
        self._complex = True
        self._error = ErrorKind.OK
        return ErrorKind.OK

    def set_value(self, number: Number) -> ErrorKind:
        """Stores a Python or NumPy number; complex input yields a complex scalar."""
        if isinstance(number, (complex, np.complexfloating)):
            return self.set_complex(number.real, number.imag)
        return self.set_real(number)

    def invalidate(self, kind: ErrorKind) -> ErrorKind:
        """Marks the scalar as errored.

        Args:
            kind: Error state to store.

        Returns:
            The stored error state.

        Raises:
            ValueError: If ``kind`` is :attr:`ErrorKind.OK`.
        """
        if kind is ErrorKind.OK:
            raise ValueError("invalidate() requires an error state, got ErrorKind.OK.")
        self._real = float("nan")
        self._imaginary = float("nan")
        self._complex = False
        self._error = kind
        return kind

    def assign(self, other: Scalar) -> ErrorKind:
        """Copies value and error state of ``other`` verbatim."""
        self._real = other._real
        self._imaginary = other._imaginary
        self._complex = other._complex
        self._error = other._error
        return self._error

    def _set_from_complex(self, z: complex) -> ErrorKind:
        return self.set_complex(z.real, z.imag)

    def _to_complex(self) -> complex:
        return complex(self._real, self._imaginary)

    # ------------------------------------------------------------------
    # arithmetic
    # ------------------------------------------------------------------

    def add(self, a: Scalar, b: Scalar) -> ErrorKind:
        error = _absorb(a, b)
        if error is not None:
            return self.invalidate(error)
        if a._complex or b._complex:
            return self.set_complex(a._real + b._real, a._imaginary + b._imaginary)
        return self.set_real(a._real + b._real)

    def subtract(self, a: Scalar, b: Scalar) -> ErrorKind:
        error = _absorb(a, b)
        if error is not None:
            return self.invalidate(error)
        if a._complex or b._complex:
            return self.set_complex(a._real - b._real, a._imaginary - b._imaginary)
        return self.set_real(a._real - b._real)

    def multiply(self, a: Scalar, b: Scalar) -> ErrorKind:
        error = _absorb(a, b)
        if error is not None:
            return self.invalidate(error)
        if a._complex or b._complex:
            return self._set_from_complex(a._to_complex() * b._to_complex())
        return self.set_real(a._real * b._real)

    def divide(self, a: Scalar, b: Scalar) -> ErrorKind:
        """Stores ``a / b``; a zero denominator yields ``NOT_A_NUMBER``."""
        error = _absorb(a, b)
        if error is not None:
            return self.invalidate(error)
        if b.is_zero():
            return self.invalidate(ErrorKind.NOT_A_NUMBER)
        if a._complex or b._complex:
            return self._set_from_complex(a._to_complex() / b._to_complex())
        return self.set_real(a._real / b._real)

    def _complex_power(self, base: complex, exponent: complex) -> ErrorKind:
        # exp(w * log(z)) has no value at z = 0; the limit is 0 for re(w) > 0.
        if base == 0:
            if exponent.real > 0:
                return self.set_complex(0.0, 0.0)
            return self.invalidate(ErrorKind.NOT_A_NUMBER)
        with np.errstate(all="ignore"):
            z = np.exp(exponent * np.log(np.complex128(base)))
        return self._set_from_complex(complex(z))

    def _power(self, base: Scalar, exponent_real: float, exponent_imaginary: float,
               exponent_complex: bool) -> ErrorKind:
        if (
            base._complex
            or exponent_complex
            or (base._real < 0 and not is_integer_valued(exponent_real))
        ):
            return self._complex_power(
                base._to_complex(), complex(exponent_real, exponent_imaginary)
            )
        with np.errstate(all="ignore"):
            return self.set_real(np.power(base._real, exponent_real))

    def pow(self, base: Scalar, exponent: Scalar) -> ErrorKind:
        """Stores ``base ** exponent``.

        The complex form ``exp(exponent * log(base))`` is used when either
        operand is complex or when a negative base meets a non-integer
        exponent; plain real power otherwise.
        """
        error = _absorb(base, exponent)
        if error is not None:
            return self.invalidate(error)
        return self._power(base, exponent._real, exponent._imaginary, exponent._complex)

    def sqrt(self, a: Scalar) -> ErrorKind:
        """Stores the principal square root; negative reals promote to ``i*sqrt(|a|)``."""
        error = _absorb(a)
        if error is not None:
            return self.invalidate(error)
        if a._complex:
            with np.errstate(all="ignore"):
                return self._set_from_complex(complex(np.sqrt(np.complex128(a._to_complex()))))
        if a._real < 0:
            return self.set_complex(0.0, np.sqrt(-a._real))
        return self.set_real(np.sqrt(a._real))

    def nth_root(self, radicand: Scalar, n: int) -> ErrorKind:
        """Stores ``radicand ** (1 / n)`` following the rules of :meth:`pow`.

        Args:
            radicand: Value to take the root of.
            n: Integer root degree; ``0`` yields ``NOT_A_NUMBER``.
        """
        error = _absorb(radicand)
        if error is not None:
            return self.invalidate(error)
        if n == 0:
            return self.invalidate(ErrorKind.NOT_A_NUMBER)
        return self._power(radicand, 1.0 / n, 0.0, False)

    def abs(self, a: Scalar) -> ErrorKind:
        error = _absorb(a)
        if error is not None:
            return self.invalidate(error)
        if a._complex:
            return self.set_real(np.hypot(a._real, a._imaginary))
        return self.set_real(abs(a._real))

    def conj(self, a: Scalar) -> ErrorKind:
        error = _absorb(a)
        if error is not None:
            return self.invalidate(error)
        if a._complex:
            return self.set_complex(a._real, -a._imaginary)
        return self.set_real(a._real)

    def log(self, a: Scalar) -> ErrorKind:
        """Stores the natural logarithm (principal branch for negative or complex input)."""
        error = _absorb(a)
        if error is not None:
            return self.invalidate(error)
        with np.errstate(all="ignore"):
            if a._complex or a._real < 0:
                return self._set_from_complex(complex(np.log(np.complex128(a._to_complex()))))
            return self.set_real(np.log(a._real))

    def real_of(self, a: Scalar) -> ErrorKind:
        error = _absorb(a)
        if error is not None:
            return self.invalidate(error)
        return self.set_real(a._real)

    def imaginary_of(self, a: Scalar) -> ErrorKind:
        """Stores the imaginary part of ``a`` as a real value, ``0`` for real input."""
        error = _absorb(a)
        if error is not None:
            return self.invalidate(error)
        return self.set_real(a._imaginary if a._complex else 0.0)
