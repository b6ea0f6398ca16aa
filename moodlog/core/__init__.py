"""moodlog.core — Configuration, type definitions, and errors."""

from moodlog.core.config import Config
from moodlog.core.errors import (
    MoodLogError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from moodlog.core.types import (
    MOOD_MAX,
    MOOD_MIN,
    MoodRecord,
    MoodSummary,
    TrendPoint,
    average_color,
    description_for,
    emoji_for,
    generate_id,
    mood_color,
    now_local,
)

__all__ = [
    "Config",
    "MoodLogError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
    "MOOD_MAX",
    "MOOD_MIN",
    "MoodRecord",
    "MoodSummary",
    "TrendPoint",
    "average_color",
    "description_for",
    "emoji_for",
    "generate_id",
    "mood_color",
    "now_local",
]
