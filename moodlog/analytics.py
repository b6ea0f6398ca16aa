"""
moodlog.analytics — Summary statistics over a subset of mood records.

Purely functional: every function takes a snapshot of records and
returns a fresh value.  Nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from moodlog.core.types import (
    MoodRecord,
    MoodSummary,
    TrendPoint,
    mood_color,
    now_local,
)
from moodlog.query import BUCKET_TABLES, bucket_of, local_day, local_midnight


def _chronological(records: Iterable[MoodRecord]) -> List[MoodRecord]:
    return sorted(records, key=lambda r: (r.timestamp, r.id))


def daily_average(records: Sequence[MoodRecord]) -> float:
    """Arithmetic mean of ``mood_value``.

    Returns ``0.0`` for an empty subset.  Valid scores start at 1, so
    callers read 0 as "no data".
    """
    if not records:
        return 0.0
    return sum(r.mood_value for r in records) / len(records)


def trend_series(records: Iterable[MoodRecord]) -> List[TrendPoint]:
    """One point per record, oldest first.  Same-day entries stay separate."""
    return [TrendPoint(r.timestamp, r.mood_value) for r in _chronological(records)]


def heatmap_window(window_days: int, reference: Optional[datetime] = None):
    """Half-open ``[start, end)`` covering the last *window_days* days, today included."""
    if window_days <= 0:
        raise ValueError("window_days must be positive")
    today = local_day(reference or now_local())
    return (
        local_midnight(today - timedelta(days=window_days - 1)),
        local_midnight(today + timedelta(days=1)),
    )


def heatmap(
    records: Iterable[MoodRecord],
    window_days: int,
    reference: Optional[datetime] = None,
) -> Dict[date, int]:
    """Representative mood per local calendar day inside the window.

    When a day has several records the latest one wins.  Keys come out
    in ascending date order.
    """
    start, end = heatmap_window(window_days, reference)
    days: Dict[date, int] = {}
    for record in _chronological(records):
        if start <= record.timestamp < end:
            days[local_day(record.timestamp)] = record.mood_value
    return days


@dataclass(frozen=True)
class HeatmapCell:
    day: date
    mood_value: int

    @property
    def weekday(self) -> str:
        return self.day.strftime("%a")

    @property
    def color(self) -> str:
        return mood_color(self.mood_value)

    def to_dict(self) -> Dict:
        return {
            "date": self.day.isoformat(),
            "weekday": self.weekday,
            "mood_value": self.mood_value,
            "color": self.color,
        }


def heatmap_cells(
    records: Iterable[MoodRecord],
    window_days: int,
    reference: Optional[datetime] = None,
) -> List[HeatmapCell]:
    """The heatmap as renderable cells, oldest day first."""
    return [
        HeatmapCell(day, value)
        for day, value in heatmap(records, window_days, reference).items()
    ]


def summarize(records: Sequence[MoodRecord], scheme: str = "history") -> MoodSummary:
    """Count, mean, extremes and bucket distribution of *records*."""
    buckets = {b.value: 0 for b in BUCKET_TABLES[scheme]}
    if not records:
        return MoodSummary(buckets=buckets)

    values = [r.mood_value for r in records]
    for value in values:
        buckets[bucket_of(value, scheme).value] += 1
    ordered = _chronological(records)
    return MoodSummary(
        count=len(values),
        average=daily_average(records),
        minimum=min(values),
        maximum=max(values),
        buckets=buckets,
        first=ordered[0].timestamp,
        last=ordered[-1].timestamp,
    )
