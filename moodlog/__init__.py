"""
moodlog -- Local mood journal: store, filter and chart 1-10 mood ratings.

    from moodlog import MoodJournal

    journal = MoodJournal(data_dir="./data")
    record = journal.create_record(7, note="Had coffee today")
    average = journal.daily_average()
"""

from moodlog.core.config import Config
from moodlog.core.errors import (
    MoodLogError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from moodlog.core.types import MoodRecord, MoodSummary, TrendPoint
from moodlog.journal import MoodJournal
from moodlog.query import DateRange, FilterSpec, MoodBucket, Period
from moodlog.store import MoodStore

__version__ = "0.1.0"

__all__ = [
    "MoodJournal",
    "MoodStore",
    "Config",
    "MoodRecord",
    "MoodSummary",
    "TrendPoint",
    "FilterSpec",
    "MoodBucket",
    "DateRange",
    "Period",
    "MoodLogError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]
