"""Human-readable rendering of progress records (rich markup)."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .record import ProgressRecord
    from .types import Seconds


def fmt_duration(seconds: Seconds, /) -> str:
    """Format seconds as a short human-readable duration."""

    if seconds < 60:  # noqa: PLR2004
        return f"{seconds:.0f}s"
    mins, secs = divmod(int(seconds), 60)

    if mins < 60:  # noqa: PLR2004
        return f"{mins}m {secs:02d}s"
    hrs, mins = divmod(mins, 60)

    return f"{hrs}h {mins:02d}m"


def fmt_rate(rate: float, /) -> str:
    if math.isinf(rate):
        return "∞/s"
    return f"{rate:,.1f}/s"


def describe(record: ProgressRecord, /) -> str:
    """One-line status for `record`: count, percent, rate and ETA where known.

    The rate shown is the smoothest one available (exponential, then rolling,
    then overall).
    """
    summary = record.summary()
    parts = [f"[cyan][{summary['num_done']:,}][/]"]

    if (percent := summary["percent"]) is not None:
        parts.append(f"[cyan]{percent:.1f}%[/]")

    rate = summary["exp_avg_rate"] or summary["rolling_avg_rate"] or summary["rate"]
    parts.append(f"[magenta]{fmt_rate(rate)}[/]")

    if (eta := summary["eta"]) is not None:
        parts.append(f"[green][ETA: {fmt_duration(eta)}][/]")
    else:
        parts.append(f"[dim][elapsed: {fmt_duration(summary['elapsed'])}][/]")

    return " ".join(parts)
