"""
moodlog.core.errors — Exception taxonomy.

Every failure the store or journal raises is a ``MoodLogError``, so
callers that do not care about the kind can catch the base class.
"""

from __future__ import annotations


class MoodLogError(Exception):
    """Base class for moodlog failures."""


class ValidationError(MoodLogError, ValueError):
    """Input rejected before touching storage (bad mood value, bad timestamp)."""


class NotFoundError(MoodLogError, KeyError):
    """An operation targeted a record id that does not exist."""

    def __init__(self, record_id: str) -> None:
        super().__init__(record_id)
        self.record_id = record_id

    def __str__(self) -> str:
        return f"No mood record with id {self.record_id!r}"


class PersistenceError(MoodLogError):
    """The underlying database failed to read or write."""
