"""Entry points: wrap any iterable to get progress records alongside its items."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, TypeVar

from .console import cerr, cout
from .display import describe
from .recorder import DEFAULT_ROLLING_WINDOW, OptionalProgressIter, ProgressIter

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from .types import Count

T = TypeVar("T")

DEFAULT_UPDATE_EVERY_SEC: Final = 1.0
SPINNER: Final = "flip"


def progress(items: Iterable[T], /) -> ProgressIter[T]:
    """Wrap `items`, yielding `(record, item)` pairs.

    >>> state, n = next(progress(range(1_000)))
    >>> n, state.num_done, state.fraction()
    (0, 1, 0.001)
    """
    return ProgressIter(items)


def optional_progress(items: Iterable[T], /, generate_every_count: Count) -> OptionalProgressIter[T]:
    """Wrap `items`, yielding `(record | None, item)` with a record every `generate_every_count` items."""
    return OptionalProgressIter(items, generate_every_count)


def tracked(
    items: Iterable[T],
    label: str,
    *,
    total: int | None = None,
    update_every_sec: float = DEFAULT_UPDATE_EVERY_SEC,
    rolling_window: Count | None = DEFAULT_ROLLING_WINDOW,
    extra: str = "",
) -> Iterator[T]:
    """Iterate `items` under a rich status spinner showing percent, rate and ETA.

    Keyword Args:
    (Optional)
        total: Number of items, if `items` can't tell
        update_every_sec: Minimum seconds between status refreshes
        rolling_window: Steps averaged for the displayed rate (`None` for overall rate)
        extra: Markup appended to the status line
    """
    progressor = progress(items).assume_size(total or None).with_rolling_average(rolling_window)
    num_done = 0

    try:
        with cout.status(f"[dim]{label}{extra}[/]", spinner=SPINNER) as status:
            for record, item in progressor:
                num_done = record.num_done
                record.do_every_n_sec(
                    update_every_sec,
                    lambda record=record: status.update(f"[dim]{label}[/] {describe(record)}{extra}"),
                )
                yield item
    except Exception:
        # reported once the status line is gone
        cerr(f"{label} failed after {num_done:,} items")
        raise
