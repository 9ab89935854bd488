"""Periodic trigger predicates.

Both predicates are stateless: they decide from the values of a single
record, so any number of independent periodic actions can hang off one
iteration without extra bookkeeping.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import Count, Seconds


def _check_period(n: float, /) -> None:
    if not n > 0:
        emsg = f"trigger period must be positive, got {n!r}"
        raise ValueError(emsg)


def crossed_seconds_boundary(elapsed: Seconds, previous_elapsed: Seconds | None, n: float) -> bool:
    """Check whether a multiple of `n` seconds was crossed since the previous record.

    Best effort: accuracy is bounded by how far apart pulls happen. Without a
    previous record, fires only when the first step alone took longer than `n`.
    """
    _check_period(n)

    if previous_elapsed is None:
        return elapsed > n

    return math.trunc(elapsed / n) != math.trunc(previous_elapsed / n)


def on_item_boundary(num_done: Count, n: int) -> bool:
    """Check whether `num_done` is the first item of a block of `n` (1, n+1, 2n+1, ...)."""
    _check_period(n)
    return (num_done - 1) % n == 0
