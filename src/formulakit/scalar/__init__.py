"""Real-or-complex scalar arithmetic with explicit error states."""

from formulakit.scalar.errors import ErrorKind
from formulakit.scalar.value import Scalar

__all__ = ["ErrorKind", "Scalar"]
