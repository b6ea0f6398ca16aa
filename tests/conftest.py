"""Shared fixtures for moodlog tests."""

import os
import time
from datetime import datetime, timedelta, timezone

import pytest

from moodlog.core.config import Config
from moodlog.core.types import MoodRecord, now_local
from moodlog.journal import MoodJournal
from moodlog.store import MoodStore


def days_ago(n: int, hour: int = 12, minute: int = 0) -> datetime:
    """Local wall-clock time *n* whole days before today (n >= 1)."""
    day = now_local().date() - timedelta(days=n)
    return datetime(day.year, day.month, day.day, hour, minute).astimezone()


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def local(*args) -> datetime:
    """Local wall-clock time with the UTC offset in force on that date."""
    return datetime(*args).astimezone()


@pytest.fixture
def berlin_tz():
    """Run the test with the process zone set to Europe/Berlin (DST in late March)."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    saved = os.environ.get("TZ")
    os.environ["TZ"] = "Europe/Berlin"
    time.tzset()
    yield
    if saved is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = saved
    time.tzset()


def make_record(value: int, when: datetime, note=None) -> MoodRecord:
    return MoodRecord(mood_value=value, timestamp=when, note=note)


@pytest.fixture
def tmp_dir(tmp_path):
    """Provide a temporary directory that persists for the test."""
    return tmp_path


@pytest.fixture
def config(tmp_dir):
    """Provide a Config pointing at a temp directory."""
    cfg = Config.from_data_dir(tmp_dir)
    cfg.ensure_directories()
    return cfg


@pytest.fixture
def store(config):
    """Provide a fresh on-disk MoodStore."""
    s = MoodStore(config.db_path)
    yield s
    s.close()


@pytest.fixture
def memory_store():
    """Provide a fresh in-memory MoodStore."""
    s = MoodStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def journal(config):
    """Provide a MoodJournal over a temp data directory."""
    j = MoodJournal(config=config)
    yield j
    j.close()


def install_failing_trigger(store: MoodStore, event: str) -> None:
    """Make every *event* (INSERT/UPDATE/DELETE) on moods fail inside SQLite."""
    store.conn.execute(
        f"CREATE TRIGGER fail_{event.lower()} BEFORE {event} ON moods "
        f"BEGIN SELECT RAISE(ABORT, 'simulated disk failure'); END"
    )
    store.conn.commit()
