"""
moodlog.query — Filtering of mood records.

Turns a ``FilterSpec`` (search text, mood bucket, date range) into a
predicate and applies it to a snapshot of records.  Everything here is
a pure function of its inputs; the store is never touched.

Bucket tables
-------------
Two bucketings exist for the 1-10 scale.  ``history`` is canonical:

    ======== ========= ==========
    bucket   history   legacy
    ======== ========= ==========
    bad      1-4       1-3
    neutral  5         4-7
    good     6-10      8-10
    ======== ========= ==========

Both tables partition the scale: every value lands in exactly one
bucket.
"""

from __future__ import annotations

import calendar
import unicodedata
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from moodlog.core.types import MOOD_MAX, MOOD_MIN, MoodRecord, as_aware, now_local


# ---------------------------------------------------------------------------
# Mood buckets
# ---------------------------------------------------------------------------


class MoodBucket(str, Enum):
    ALL = "all"
    BAD = "bad"
    NEUTRAL = "neutral"
    GOOD = "good"


BUCKET_TABLES: Dict[str, Dict[MoodBucket, Tuple[int, int]]] = {
    "history": {
        MoodBucket.BAD: (1, 4),
        MoodBucket.NEUTRAL: (5, 5),
        MoodBucket.GOOD: (6, 10),
    },
    "legacy": {
        MoodBucket.BAD: (1, 3),
        MoodBucket.NEUTRAL: (4, 7),
        MoodBucket.GOOD: (8, 10),
    },
}


def bucket_range(bucket: MoodBucket, scheme: str = "history") -> Tuple[int, int]:
    """Inclusive ``(low, high)`` mood values covered by *bucket*."""
    if bucket is MoodBucket.ALL:
        return (MOOD_MIN, MOOD_MAX)
    try:
        return BUCKET_TABLES[scheme][bucket]
    except KeyError:
        raise ValueError(f"Unknown bucket scheme {scheme!r}") from None


def bucket_of(value: int, scheme: str = "history") -> MoodBucket:
    """The single named bucket *value* belongs to."""
    for bucket, (low, high) in BUCKET_TABLES[scheme].items():
        if low <= value <= high:
            return bucket
    raise ValueError(f"mood value {value} is outside the {MOOD_MIN}-{MOOD_MAX} scale")


# ---------------------------------------------------------------------------
# Date ranges
# ---------------------------------------------------------------------------


def local_day(moment: datetime) -> date:
    """Calendar day of *moment* on the local wall clock."""
    return as_aware(moment).astimezone().date()


def local_midnight(day: date) -> datetime:
    """Start of *day* in the local zone, carrying that day's own UTC offset."""
    return datetime.combine(day, time()).astimezone()


def shift_months(moment, months: int):
    """Move a date or datetime by whole calendar months, clamping the day of month."""
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class DateRange(str, Enum):
    """Relative ranges used when browsing history."""

    ALL = "all"
    LAST_MONTH = "last_month"
    LAST_YEAR = "last_year"

    def start(self, reference: datetime) -> Optional[datetime]:
        if self is DateRange.ALL:
            return None
        months = -1 if self is DateRange.LAST_MONTH else -12
        # shift the local wall-clock time, then let the target date pick its offset
        wall = as_aware(reference).astimezone().replace(tzinfo=None)
        return shift_months(wall, months).astimezone()


class Period(str, Enum):
    """Analytics periods, each ending on the reference day."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


def analytics_window(
    period: Period, reference: Optional[datetime] = None
) -> Tuple[datetime, datetime]:
    """Half-open ``[start, end)`` window of whole local days ending with *reference*'s day.

    The reference day is always included: a week is the reference day
    and the six days before it, a month starts on the same day one
    calendar month earlier, a year one calendar year earlier.  Both
    bounds are local midnights, each with its own UTC offset, so a
    daylight-saving change inside the window does not shift them.
    """
    today = local_day(reference or now_local())
    period = Period(period)
    if period is Period.DAY:
        first = today
    elif period is Period.WEEK:
        first = today - timedelta(days=6)
    elif period is Period.MONTH:
        first = shift_months(today, -1)
    else:
        first = shift_months(today, -12)
    return local_midnight(first), local_midnight(today + timedelta(days=1))


# ---------------------------------------------------------------------------
# FilterSpec
# ---------------------------------------------------------------------------


@dataclass
class FilterSpec:
    """
    What to show.  All active criteria must hold (logical AND).

    ``start``/``end`` form an explicit half-open window and take
    precedence over ``date_range``.  ``reference`` anchors relative
    ranges and defaults to now.
    """

    search_text: Optional[str] = None
    bucket: MoodBucket = MoodBucket.ALL
    date_range: DateRange = DateRange.ALL
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    reference: Optional[datetime] = None
    ascending: bool = False
    bucket_scheme: str = "history"

    def __post_init__(self) -> None:
        self.bucket = MoodBucket(self.bucket)
        self.date_range = DateRange(self.date_range)
        # naive bounds are local time, like record timestamps
        if self.start is not None:
            self.start = as_aware(self.start)
        if self.end is not None:
            self.end = as_aware(self.end)
        if self.bucket_scheme not in BUCKET_TABLES:
            raise ValueError(f"Unknown bucket scheme {self.bucket_scheme!r}")
        if self.start and self.end and self.start >= self.end:
            raise ValueError("window start must be before window end")

    @classmethod
    def for_period(
        cls,
        period: Period,
        reference: Optional[datetime] = None,
        **kwargs,
    ) -> "FilterSpec":
        """Spec covering one analytics period, oldest first."""
        start, end = analytics_window(period, reference)
        kwargs.setdefault("ascending", True)
        return cls(start=start, end=end, reference=reference, **kwargs)

    def window(self) -> Tuple[Optional[datetime], Optional[datetime]]:
        """Resolved ``(start, end)`` bounds; ``None`` means unbounded."""
        if self.start is not None or self.end is not None:
            return self.start, self.end
        reference = as_aware(self.reference or now_local())
        return self.date_range.start(reference), None


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def _fold(text: str) -> str:
    """Case- and diacritic-insensitive form of *text*."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def matches(
    record: MoodRecord,
    spec: FilterSpec,
    window: Optional[Tuple[Optional[datetime], Optional[datetime]]] = None,
) -> bool:
    """True if *record* satisfies every criterion of *spec*.

    *window* lets callers resolve relative date ranges once for a
    whole batch instead of once per record.
    """
    if spec.search_text:
        if record.note is None or _fold(spec.search_text) not in _fold(record.note):
            return False

    low, high = bucket_range(spec.bucket, spec.bucket_scheme)
    if not low <= record.mood_value <= high:
        return False

    start, end = window if window is not None else spec.window()
    if start is not None and record.timestamp < start:
        return False
    if end is not None and record.timestamp >= end:
        return False
    return True


def apply_filter(
    records: Iterable[MoodRecord], spec: Optional[FilterSpec] = None
) -> List[MoodRecord]:
    """Matching records ordered by timestamp (newest first unless ``spec.ascending``)."""
    spec = spec or FilterSpec()
    window = spec.window()
    selected = [r for r in records if matches(r, spec, window)]
    selected.sort(key=lambda r: (r.timestamp, r.id), reverse=not spec.ascending)
    return selected
