"""
moodlog.core.types — Data types for the mood journal.

Every structure here is a plain dataclass: no ORM, no magic,
serialisable to dict/JSON in one call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional
import uuid

# ---------------------------------------------------------------------------
# Scale
# ---------------------------------------------------------------------------

MOOD_MIN = 1
MOOD_MAX = 10


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def generate_id() -> str:
    """12-hex-char unique identifier."""
    return uuid.uuid4().hex[:12]


def now_local() -> datetime:
    """Current time as a timezone-aware datetime in the local zone."""
    return datetime.now().astimezone()


def as_aware(moment: datetime) -> datetime:
    """Attach the local zone to a naive datetime; aware ones pass through."""
    if moment.tzinfo is None:
        return moment.astimezone()
    return moment


def normalize_note(note: Optional[str]) -> Optional[str]:
    """Empty or whitespace-only notes are stored as absent."""
    if note is None:
        return None
    if not note.strip():
        return None
    return note


def emoji_for(value: int) -> str:
    """Display emoji for a mood value."""
    if value <= 2:
        return "😞"
    if value <= 4:
        return "😕"
    if value == 5:
        return "😐"
    if value <= 7:
        return "🙂"
    if value <= 9:
        return "😃"
    return "😄"


def description_for(value: int) -> str:
    """Human-readable label for a mood value."""
    if value <= 2:
        return "Very Bad"
    if value <= 4:
        return "Bad"
    if value == 5:
        return "Neutral"
    if value <= 7:
        return "Okay"
    if value <= 9:
        return "Good"
    return "Great"


def mood_color(value: int) -> str:
    """Heatmap colour class for a single day's mood."""
    if value <= 2:
        return "red"
    if value <= 4:
        return "orange"
    if value == 5:
        return "yellow"
    if value <= 7:
        return "green"
    return "light-green"


def average_color(average: float) -> str:
    """Colour class for an average score.  ``0.0`` means no data."""
    if average <= 0:
        return "gray"
    if average > 7:
        return "green"
    if average < 4:
        return "red"
    return "blue"


# ---------------------------------------------------------------------------
# MoodRecord: one submitted rating
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MoodRecord:
    """
    One user-submitted mood rating.

    ``emoji`` and ``description`` are derived from ``mood_value`` and
    are never stored.  Instances are immutable; the store hands back a
    fresh record after a note edit.
    """

    mood_value: int
    timestamp: datetime
    note: Optional[str] = None
    id: str = field(default_factory=generate_id)

    @property
    def emoji(self) -> str:
        return emoji_for(self.mood_value)

    @property
    def description(self) -> str:
        return description_for(self.mood_value)

    @property
    def day(self) -> date:
        """Calendar day of the timestamp in its own zone (local for stored records)."""
        return self.timestamp.date()

    # -- serialisation ------------------------------------------------------

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "mood_value": self.mood_value,
            "emoji": self.emoji,
            "description": self.description,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "MoodRecord":
        return cls(
            id=d["id"],
            mood_value=int(d["mood_value"]),
            timestamp=datetime.fromisoformat(d["timestamp"]),
            note=normalize_note(d.get("note")),
        )


# ---------------------------------------------------------------------------
# TrendPoint: one point of a line chart
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrendPoint:
    timestamp: datetime
    mood_value: int

    def to_dict(self) -> Dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "mood_value": self.mood_value,
        }


# ---------------------------------------------------------------------------
# MoodSummary: statistics over a subset
# ---------------------------------------------------------------------------


@dataclass
class MoodSummary:
    """
    Headline numbers for a set of records.

    ``average`` follows the daily-average convention: ``0.0`` when
    ``count`` is zero.
    """

    count: int = 0
    average: float = 0.0
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    buckets: Dict[str, int] = field(default_factory=dict)
    first: Optional[datetime] = None
    last: Optional[datetime] = None

    @property
    def color(self) -> str:
        return average_color(self.average)

    def to_dict(self) -> Dict:
        return {
            "count": self.count,
            "average": round(self.average, 2),
            "color": self.color,
            "minimum": self.minimum,
            "maximum": self.maximum,
            "buckets": dict(self.buckets),
            "first": self.first.isoformat() if self.first else None,
            "last": self.last.isoformat() if self.last else None,
        }
