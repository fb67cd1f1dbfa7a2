"""Differentiability status of a term with respect to one variable.

The statuses form a total order by their explicit rank::

    NONE < NUMERIC < ANALYTICAL < INDEPENDENT

``NONE`` means no derivative can be certified; ``INDEPENDENT`` means the term
provably does not depend on the variable, so its derivative is zero. The
intermediate grades classify dependent but differentiable terms.
Combining children always keeps the most restrictive status.
"""

from __future__ import annotations

from enum import Enum
from functools import total_ordering
from typing import Iterable

__all__ = ["Differentiability", "reduce_differentiability"]


@total_ordering
class Differentiability(Enum):
    """Differentiability grade, ordered by :attr:`rank`."""

    NONE = 0
    NUMERIC = 1
    ANALYTICAL = 2
    INDEPENDENT = 3

    @property
    def rank(self) -> int:
        return self.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Differentiability):
            return NotImplemented
        return self.rank < other.rank

    def meet(self, other: Differentiability) -> Differentiability:
        """Returns the more restrictive of two statuses."""
        return self if self.rank <= other.rank else other


def reduce_differentiability(statuses: Iterable[Differentiability]) -> Differentiability:
    """Combines the statuses of a node's children.

    Args:
        statuses: Child statuses.

    Returns:
        The minimum status, or ``INDEPENDENT`` for no children.
    """
    result = Differentiability.INDEPENDENT
    for status in statuses:
        result = result.meet(status)
    return result
