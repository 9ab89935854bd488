from typing import Annotated, Protocol, TypedDict, runtime_checkable

from annotated_types import Ge, Gt, Le

Uint = Annotated[int, Ge(0)]
Ufloat = Annotated[float, Ge(0.0)]
Count = Annotated[int, Ge(1)]
Seconds = Ufloat
Timestamp = float  # monotonic clock reading
SmoothingFactor = Annotated[float, Gt(0.0), Le(1.0)]

SizeHint = tuple[Uint, Uint | None]  # (lower bound, exact upper bound or unknown)


@runtime_checkable
class SizeHinted(Protocol):
    """Iterator that reports how many items it has left."""

    def size_hint(self) -> SizeHint: ...


class RecordSummary(TypedDict):
    """Headline numbers of a single progress record."""

    num_done: Uint
    elapsed: Seconds
    rate: float  # items/sec since start (inf on a zero-length span)
    fraction: float | None
    percent: float | None
    eta: Seconds | None
    rolling_avg_rate: float | None
    exp_avg_rate: float | None
