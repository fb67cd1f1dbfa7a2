"""Error states carried by :class:`formulakit.scalar.value.Scalar`."""

from __future__ import annotations

from enum import Enum

__all__ = ["ErrorKind"]


class ErrorKind(Enum):
    """Validity state of a scalar.

    ``OK`` marks a usable value. Any other member marks an errored value
    whose numeric parts must not be read.
    """

    OK = "ok"
    NOT_A_NUMBER = "not_a_number"
    PASSED_COMPLEX = "passed_complex"
    TERM_NOT_READY = "term_not_ready"

    @property
    def is_error(self) -> bool:
        """Whether this state marks an errored value."""
        return self is not ErrorKind.OK
