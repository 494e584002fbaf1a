from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from typing import Sequence

import numpy as np

NS_PER_MS = 1_000_000
NS_PER_S = 1_000_000_000


@dataclass
class DurationStats:
    """Statistics over the durations of successful iterations, in nanoseconds.

    ``stddev`` is the sample standard deviation (n - 1 divisor) and is None
    when fewer than two samples exist.
    """

    count: int
    mean: float | None
    min: int | None
    max: int | None
    stddev: float | None

    def to_dict(self) -> dict[str, float | int | None]:
        return asdict(self)


def compute_stats(durations: Sequence[int | None]) -> DurationStats:
    """Compute count, mean, min, max, stddev over the non-None durations."""
    nums = [d for d in durations if d is not None]
    if not nums:
        return DurationStats(count=0, mean=None, min=None, max=None, stddev=None)

    arr = np.array(nums, dtype=np.float64)
    stddev = float(np.std(arr, ddof=1)) if len(nums) >= 2 else None
    return DurationStats(
        count=len(nums),
        mean=float(np.mean(arr)),
        min=int(min(nums)),
        max=int(max(nums)),
        stddev=stddev,
    )


def format_duration(ns: int | float) -> str:
    """Render a duration, truncating to the largest fitting unit.

    >>> format_duration(1_500_000)
    '1ms'
    """
    ns = math.floor(ns)
    if ns >= NS_PER_S:
        return f"{ns // NS_PER_S}s {(ns // NS_PER_MS) % 1000}ms"
    if ns >= NS_PER_MS:
        return f"{ns // NS_PER_MS}ms"
    return f"{ns}ns"


def format_stats(durations: Sequence[int | None]) -> str:
    """Format the timing suffix of a summary line.

    One entry: the raw duration. Several: mean/stddev/min/max over the
    successful samples (None entries are failed iterations).
    """
    if len(durations) == 1:
        (only,) = durations
        return format_duration(only) if only is not None else ""

    stats = compute_stats(durations)
    if stats.count == 0:
        return ""

    parts = [f"mean {format_duration(stats.mean)}"]
    if stats.stddev is not None:
        parts.append(f"stddev {format_duration(stats.stddev)}")
    parts.append(f"min {format_duration(stats.min)}")
    parts.append(f"max {format_duration(stats.max)}")
    return ", ".join(parts)
