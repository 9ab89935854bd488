"""Per-step progress snapshot."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from .console import cout
from .triggers import crossed_seconds_boundary, on_item_boundary

if TYPE_CHECKING:
    from collections.abc import Callable

    from .types import Count, RecordSummary, Seconds, SizeHint, Timestamp, Uint

R = TypeVar("R")


def _inverse(duration: Seconds | None) -> float | None:
    if duration is None:
        return None
    return math.inf if duration == 0 else 1.0 / duration


@dataclass(frozen=True, slots=True)
class ProgressRecord:
    """State of an iteration at one step.

    Built by the progress iterators once per emitted item. Every query is a pure
    read of these fields; the only write is `assume_fraction`.
    """

    num_done: Count  # items yielded so far, including this one
    elapsed: Seconds  # since the iterator was wrapped
    size_hint: SizeHint  # remaining items, as reported after this pull
    start_time: Timestamp
    previous_step_time: Timestamp | None = None  # None on the first record
    assumed_size: Uint | None = None
    assumed_fraction: float | None = field(default=None, compare=False)  # writable once, see assume_fraction
    rolling_avg_step_duration: Seconds | None = None
    exp_avg_step_duration: Seconds | None = None

    @property
    def previous_step_elapsed(self) -> Seconds | None:
        """Seconds from the start to the previous record, if there was one."""
        if self.previous_step_time is None:
            return None
        return self.previous_step_time - self.start_time

    def rate(self) -> float:
        """Items per second since the start (`inf` if no time has passed)."""
        if self.elapsed == 0:
            return math.inf
        return self.num_done / self.elapsed

    def fraction(self) -> float | None:
        """How far through the iteration we are, from 0 to 1, if knowable.

        An assumed fraction always wins. Otherwise the total comes from an exact
        size hint, falling back to the assumed size. `None` for iterators of
        unknown length (e.g. `itertools.count()`).
        """
        if self.assumed_fraction is not None:
            return self.assumed_fraction

        lower, upper = self.size_hint
        if upper is not None and upper == lower:
            total = lower + self.num_done
        elif self.assumed_size is not None:
            total = self.assumed_size
        else:
            return None

        return self.num_done / total

    def percent(self) -> float | None:
        if (fraction := self.fraction()) is None:
            return None
        return fraction * 100

    def assume_fraction(self, fraction: float) -> None:
        """Override the computed fraction for this record only.

        Raises:
            ValueError: If a fraction was already assumed for this record
        """
        if self.assumed_fraction is not None:
            emsg = f"fraction already assumed for this record ({self.assumed_fraction!r})"
            raise ValueError(emsg)
        object.__setattr__(self, "assumed_fraction", float(fraction))

    def estimated_total_duration(self) -> Seconds | None:
        """Projected run time from start to finish, at the average rate so far."""
        fraction = self.fraction()
        if not fraction:
            return None
        return self.elapsed / fraction

    def eta(self) -> Seconds | None:
        """Projected time left, at the average rate so far."""
        if (total := self.estimated_total_duration()) is None:
            return None
        return total - self.elapsed

    def rolling_avg_rate(self) -> float | None:
        return _inverse(self.rolling_avg_step_duration)

    def exp_avg_rate(self) -> float | None:
        return _inverse(self.exp_avg_step_duration)

    def should_trigger_every_seconds(self, n: float) -> bool:
        return crossed_seconds_boundary(self.elapsed, self.previous_step_elapsed, n)

    def should_trigger_every_items(self, n: int) -> bool:
        return on_item_boundary(self.num_done, n)

    def do_every_n_sec(self, n: float, action: Callable[[], R]) -> R | None:
        """Call `action` at most once per `n` seconds of iteration."""
        if self.should_trigger_every_seconds(n):
            return action()
        return None

    def do_every_n_items(self, n: int, action: Callable[[], R]) -> R | None:
        """Call `action` on the first item, then every `n` items."""
        if self.should_trigger_every_items(n):
            return action()
        return None

    def print_every_n_sec(self, n: float, msg: object) -> None:
        """Print `msg` (no newline added) at most once per `n` seconds."""
        self.do_every_n_sec(n, lambda: cout.write(msg))

    def print_every_n_items(self, n: int, msg: object) -> None:
        """Print `msg` (no newline added) on the first item, then every `n` items."""
        self.do_every_n_items(n, lambda: cout.write(msg))

    def summary(self) -> RecordSummary:
        return {
            "num_done": self.num_done,
            "elapsed": self.elapsed,
            "rate": self.rate(),
            "fraction": self.fraction(),
            "percent": self.percent(),
            "eta": self.eta(),
            "rolling_avg_rate": self.rolling_avg_rate(),
            "exp_avg_rate": self.exp_avg_rate(),
        }
