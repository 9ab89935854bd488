"""Wrap an iterator and get progress data (rate, fraction, ETA) as it's consumed."""

from .progress import optional_progress, progress, tracked
from .record import ProgressRecord
from .recorder import OptionalProgressIter, ProgressIter

__all__ = [
    "OptionalProgressIter",
    "ProgressIter",
    "ProgressRecord",
    "optional_progress",
    "progress",
    "tracked",
]
