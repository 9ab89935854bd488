"""Iterators that attach a `ProgressRecord` to every item of a wrapped iterable."""

from __future__ import annotations

import operator
import time
from functools import partial
from typing import TYPE_CHECKING, Final, Generic, Self, TypeVar

from .record import ProgressRecord
from .types import SizeHinted

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from .types import Count, Seconds, SizeHint, SmoothingFactor, Timestamp, Uint

T = TypeVar("T")

DEFAULT_EXP_RATE: Final = 0.001
DEFAULT_ROLLING_WINDOW: Final = 10


def _length_hint(it: Iterator[object], /) -> SizeHint:
    """Size hint for plain Python iterators.

    Builtin sequence/range iterators report their exact remaining length via
    `__length_hint__`; anything without one (generators, `itertools.count`) is
    treated as unbounded.

    `__length_hint__` is allowed to be an estimate, but it is taken as exact
    here. Iterators whose hint is only approximate should provide `size_hint()`
    (see `SizeHinted`) to report `(lower, None)` instead.
    """
    hint = operator.length_hint(it, -1)
    if hint < 0:
        return 0, None
    return hint, hint


class _RollingWindow:
    """Fixed-capacity ring of step durations. Oldest slot is overwritten."""

    __slots__ = ("_seen", "_total", "_values")

    def __init__(self, size: Count) -> None:
        self._values = [0.0] * size
        self._seen = 0
        self._total = 0.0  # sum of the slots written so far

    @property
    def size(self) -> int:
        return len(self._values)

    def push(self, duration: Seconds) -> Seconds:
        """Record `duration` and return the mean of the durations currently held."""
        slot = self._seen % self.size
        self._total += duration - self._values[slot]
        self._values[slot] = duration
        self._seen += 1
        return self._total / min(self._seen, self.size)


class _ExpAverage:
    __slots__ = ("average", "rate")

    def __init__(self, rate: SmoothingFactor) -> None:
        self.rate = rate
        self.average: Seconds | None = None

    def push(self, duration: Seconds) -> Seconds:
        if self.average is None:
            self.average = duration
        else:
            self.average = duration * self.rate + self.average * (1 - self.rate)
        return self.average


class _Recorder(Generic[T]):
    """Progress state shared by both iterator flavours.

    Owns the wrapped iterator, the item count, timestamps and the optional
    rolling/exponential averages. Everything is updated exactly once per
    successful pull from the wrapped iterator.
    """

    def __init__(
        self,
        iterable: Iterable[T],
        /,
        generate_every_count: Count = 1,
        *,
        clock: Callable[[], Timestamp] = time.monotonic,
    ) -> None:
        if generate_every_count < 1:
            emsg = f"generate_every_count must be at least 1, got {generate_every_count!r}"
            raise ValueError(emsg)

        self._iter: Iterator[T] = iter(iterable)
        self._size_hint: Callable[[], SizeHint] = (
            self._iter.size_hint if isinstance(self._iter, SizeHinted) else partial(_length_hint, self._iter)
        )
        self._generate_every_count = generate_every_count
        self._clock = clock
        self._count = 0
        self._start_time = clock()
        self._previous_pull_time: Timestamp | None = None
        self._previous_record_time: Timestamp | None = None
        self._rolling: _RollingWindow | None = None
        self._exp: _ExpAverage | None = None
        self._assumed_size: Uint | None = None
        self._fake_now: Timestamp | None = None

    def __iter__(self) -> Self:
        return self

    def __length_hint__(self) -> int:
        return self.size_hint()[0]

    # Configuration

    def with_rolling_average(self, size: Count | None = DEFAULT_ROLLING_WINDOW) -> Self:
        """Track the mean step duration over the last `size` steps (`None` disables).

        Each step costs O(`size`), so keep the window small.
        """
        if size is not None and size < 1:
            emsg = f"rolling average window must be at least 1, got {size!r}"
            raise ValueError(emsg)
        self._rolling = None if size is None else _RollingWindow(size)
        return self

    def with_exp_average(self, rate: SmoothingFactor | None = DEFAULT_EXP_RATE) -> Self:
        """Track an exponentially smoothed step duration (`None` disables).

        `rate` is the weight of the newest step, in (0, 1]. 0.001 is a good value
        for long runs.
        """
        if rate is not None and not 0 < rate <= 1:
            emsg = f"exponential average rate must be in (0, 1], got {rate!r}"
            raise ValueError(emsg)
        self._exp = None if rate is None else _ExpAverage(rate)
        return self

    def assume_size(self, size: Count | None) -> Self:
        """Total number of items, for iterators that can't report an exact size.

        An exact size hint from the wrapped iterator takes precedence. `None` clears.
        """
        if size is not None and size < 1:
            emsg = f"assumed size must be at least 1, got {size!r}"
            raise ValueError(emsg)
        self._assumed_size = size
        return self

    # Pass-through

    def size_hint(self) -> SizeHint:
        """Remaining-size hint of the wrapped iterator, unmodified."""
        return self._size_hint()

    def count(self) -> Uint:
        """Consume the rest of the wrapped iterator without building records."""
        return sum(1 for _ in self._iter)

    @property
    def inner(self) -> Iterator[T]:
        return self._iter

    def into_inner(self) -> Iterator[T]:
        """Return the wrapped iterator, positioned after the last item yielded here.

        The progress state is dropped; this object must not be used afterwards.
        """
        it = self._iter
        self._rolling = self._exp = None
        self._iter = iter(())
        self._size_hint = partial(_length_hint, self._iter)
        return it

    def set_fake_now(self, now: Timestamp | None) -> None:
        """Use `now` as the clock reading for the next pull only (for tests)."""
        self._fake_now = now

    # Stepping

    def _now(self) -> Timestamp:
        now, self._fake_now = self._fake_now, None
        return self._clock() if now is None else now

    def _advance(self) -> tuple[Timestamp, Seconds | None, Seconds | None]:
        """Account for one pulled item.

        Returns:
            The step's timestamp, rolling average and exponential average
        """
        now = self._now()
        self._count += 1

        rolling_avg: Seconds | None = None
        exp_avg: Seconds | None = None
        if self._previous_pull_time is not None:
            step_duration = now - self._previous_pull_time
            if self._exp is not None:
                exp_avg = self._exp.push(step_duration)
            if self._rolling is not None:
                rolling_avg = self._rolling.push(step_duration)
        self._previous_pull_time = now

        return now, rolling_avg, exp_avg

    def _record(self, now: Timestamp, rolling_avg: Seconds | None, exp_avg: Seconds | None) -> ProgressRecord:
        record = ProgressRecord(
            num_done=self._count,
            elapsed=now - self._start_time,
            size_hint=self.size_hint(),
            start_time=self._start_time,
            previous_step_time=self._previous_record_time,
            assumed_size=self._assumed_size,
            rolling_avg_step_duration=rolling_avg,
            exp_avg_step_duration=exp_avg,
        )
        self._previous_record_time = now
        return record


class ProgressIter(_Recorder[T]):
    """Yields `(record, item)` for every item of the wrapped iterable."""

    def __init__(
        self,
        iterable: Iterable[T],
        /,
        *,
        clock: Callable[[], Timestamp] = time.monotonic,
    ) -> None:
        super().__init__(iterable, 1, clock=clock)

    def __next__(self) -> tuple[ProgressRecord, T]:
        item = next(self._iter)
        return self._record(*self._advance()), item


class OptionalProgressIter(_Recorder[T]):
    """Yields `(record | None, item)`; a record is built only every `generate_every_count` items.

    Counts and averages still advance on every item, so sampled records carry
    the same numbers an unsampled iterator would have produced.
    """

    def __next__(self) -> tuple[ProgressRecord | None, T]:
        item = next(self._iter)
        step = self._advance()
        if self._count % self._generate_every_count != 0:
            return None, item
        return self._record(*step), item
