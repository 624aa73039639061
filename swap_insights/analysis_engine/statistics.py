"""
Statistical primitives for trading pattern analysis.

Pure functions over numeric sequences. Empty input returns 0 for
mean / median / std / min / max rather than raising, so downstream
pattern code never guards against empty lists. Only percentile rank
outside [0, 100] is an error.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Hashable, Sequence, TypeVar

import numpy as np

from swap_insights.core.exceptions import InvalidArgumentError

T = TypeVar("T", bound=Hashable)

MS_PER_HOUR = 1000 * 60 * 60

# Sunday first, matching UTC weekday numbering 0-6 used in timing patterns
DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


@dataclass
class BasicStats:
    mean: float
    median: float
    mode: float | None
    min: float
    max: float
    std: float
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "mean": self.mean,
            "median": self.median,
            "mode": self.mode,
            "min": self.min,
            "max": self.max,
            "std": self.std,
            "count": self.count,
        }


@dataclass
class FrequencyEntry:
    """One value in a frequency distribution; percentage is 0-100 over all items."""

    value: Any
    count: int
    percentage: float


@dataclass
class TimePeriod:
    days: float
    hours: float
    start: datetime
    end: datetime


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round with .5 always going up (toward +inf).

    Built-in round() uses banker's rounding, which would turn a 2.5% share into 2%.
    Returns an int when ndigits is 0.
    """
    factor = 10 ** ndigits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if ndigits == 0 else rounded


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def median(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.median(values))


def mode(values: Sequence[float]) -> float | None:
    """Most frequent value; on ties the value that reached the top count first wins."""
    if len(values) == 0:
        return None
    counts: dict[float, int] = {}
    best_count = 0
    best: float | None = None
    for v in values:
        counts[v] = counts.get(v, 0) + 1
        if counts[v] > best_count:
            best_count = counts[v]
            best = v
    return best


def minimum(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(min(values))


def maximum(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(max(values))


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation (divides by N)."""
    if len(values) == 0:
        return 0.0
    return float(np.std(values))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """std / mean; lower = more consistent. 0 when the mean is 0."""
    avg = mean(values)
    if avg == 0:
        return 0.0
    return standard_deviation(values) / avg


def percentile(values: Sequence[float], p: float) -> float:
    """
    Linear-interpolated percentile of values.

    Raises:
        InvalidArgumentError: p outside [0, 100].
    """
    if p < 0 or p > 100:
        raise InvalidArgumentError(f"Percentile must be between 0 and 100, got {p}")
    if len(values) == 0:
        return 0.0
    return float(np.percentile(values, p))


def basic_stats(values: Sequence[float]) -> BasicStats:
    return BasicStats(
        mean=mean(values),
        median=median(values),
        mode=mode(values),
        min=minimum(values),
        max=maximum(values),
        std=standard_deviation(values),
        count=len(values),
    )


def frequency_distribution(items: Sequence[T]) -> list[FrequencyEntry]:
    """
    Count occurrences of each distinct item.

    Sorted by descending count; ties keep first-occurrence order.
    """
    if len(items) == 0:
        return []
    total = len(items)
    # Counter keeps insertion order and most_common() sorts stably
    return [
        FrequencyEntry(value=value, count=count, percentage=count / total * 100)
        for value, count in Counter(items).most_common()
    ]


def herfindahl_index(items: Sequence[T]) -> float:
    """
    Herfindahl-Hirschman concentration of items: sum of squared shares.

    1.0 when every item is identical; approaches 0 as items spread out.
    0 for empty input.
    """
    if len(items) == 0:
        return 0.0
    return sum((entry.percentage / 100) ** 2 for entry in frequency_distribution(items))


def hours_between(ts1_ms: float, ts2_ms: float) -> float:
    return abs(ts1_ms - ts2_ms) / MS_PER_HOUR


def days_between(ts1_ms: float, ts2_ms: float) -> float:
    return hours_between(ts1_ms, ts2_ms) / 24


def time_period(timestamps_ms: Sequence[int], now: datetime | None = None) -> TimePeriod:
    """Span between the earliest and latest timestamp (ms). Empty input spans zero at `now`."""
    if len(timestamps_ms) == 0:
        at = now or datetime.now(timezone.utc)
        return TimePeriod(days=0.0, hours=0.0, start=at, end=at)
    start = min(timestamps_ms)
    end = max(timestamps_ms)
    hours = hours_between(start, end)
    return TimePeriod(
        days=hours / 24,
        hours=hours,
        start=datetime.fromtimestamp(start / 1000, tz=timezone.utc),
        end=datetime.fromtimestamp(end / 1000, tz=timezone.utc),
    )


def format_percentage(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"


def format_number(value: float) -> str:
    """Compact number with K / M / B suffix."""
    if value >= 1e9:
        return f"{value / 1e9:.1f}B"
    if value >= 1e6:
        return f"{value / 1e6:.1f}M"
    if value >= 1e3:
        return f"{value / 1e3:.1f}K"
    return f"{value:.2f}"


def format_hour(hour: int) -> str:
    """0-23 hour as a 12-hour clock label, e.g. 14 -> '2:00 PM'."""
    if hour == 0:
        return "12:00 AM"
    if hour < 12:
        return f"{hour}:00 AM"
    if hour == 12:
        return "12:00 PM"
    return f"{hour - 12}:00 PM"
