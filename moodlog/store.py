"""
Mood record store — SQLite-backed storage for mood ratings.

One table, keyed by ``id`` and indexed on ``timestamp``.  Timestamps
are stored as UTC ISO-8601 strings so that text ordering matches
chronological ordering; they are handed back as aware datetimes in
the local zone.

Pass ``":memory:"`` as the path for a throwaway store that behaves
identically but loses everything on close.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Union

from moodlog.core.errors import NotFoundError, PersistenceError, ValidationError
from moodlog.core.types import (
    MOOD_MAX,
    MOOD_MIN,
    MoodRecord,
    generate_id,
    normalize_note,
    now_local,
)

log = logging.getLogger(__name__)

MEMORY = ":memory:"


def _to_db(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _from_db(text: str) -> datetime:
    return datetime.fromisoformat(text).astimezone()


def validate_mood_value(value: object) -> int:
    """Return *value* if it is an int on the 1-10 scale, else raise."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"mood value must be an integer, got {value!r}")
    if not MOOD_MIN <= value <= MOOD_MAX:
        raise ValidationError(
            f"mood value must be between {MOOD_MIN} and {MOOD_MAX}, got {value}"
        )
    return value


def coerce_timestamp(value: Union[datetime, str, None]) -> datetime:
    """Turn *value* into an aware datetime no later than now.

    ``None`` means now.  Naive datetimes are taken as local time.
    ISO-8601 strings are parsed.  Anything else, or a moment in the
    future, raises ``ValidationError``.
    """
    now = now_local()
    if value is None:
        return now
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(f"malformed timestamp {value!r}") from exc
    if not isinstance(value, datetime):
        raise ValidationError(f"timestamp must be a datetime, got {value!r}")
    ts = value.astimezone()
    if ts > now:
        raise ValidationError(f"timestamp {ts.isoformat()} is in the future")
    return ts


class MoodStore:
    """SQLite-based store of ``MoodRecord`` rows."""

    def __init__(self, db_path: Union[Path, str] = MEMORY):
        self.in_memory = str(db_path) == MEMORY
        self.db_path = db_path if self.in_memory else Path(db_path)
        try:
            if self.in_memory:
                self.conn = sqlite3.connect(MEMORY)
            else:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self.conn = sqlite3.connect(str(self.db_path))
                self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.row_factory = sqlite3.Row
            self._create_tables()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not open mood store at {db_path}: {exc}") from exc
        log.debug("Opened mood store at %s", db_path)

    # ── Schema ────────────────────────────────────────────────

    def _create_tables(self) -> None:
        c = self.conn.cursor()
        c.execute("""
            CREATE TABLE IF NOT EXISTS moods (
                id          TEXT PRIMARY KEY,
                timestamp   TEXT NOT NULL,
                mood_value  INTEGER NOT NULL
                            CHECK (mood_value BETWEEN 1 AND 10),
                note        TEXT
            )
        """)
        c.execute(
            "CREATE INDEX IF NOT EXISTS idx_moods_timestamp ON moods(timestamp)"
        )
        self.conn.commit()

    # ── Transactions ──────────────────────────────────────────

    @contextmanager
    def _write(self, action: str) -> Iterator[sqlite3.Connection]:
        """Commit on success; roll back and raise ``PersistenceError`` on failure."""
        try:
            yield self.conn
            self.conn.commit()
        except sqlite3.Error as exc:
            try:
                self.conn.rollback()
            except sqlite3.Error:
                log.exception(
                    "Rollback failed after error in %s", action, extra={"action": action}
                )
            log.error("Failed to %s: %s", action, exc, extra={"action": action})
            raise PersistenceError(f"Failed to {action}: {exc}") from exc

    def _read(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        try:
            return self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            log.error("Mood store read failed: %s", exc)
            raise PersistenceError(f"Failed to read mood records: {exc}") from exc

    # ── Write ─────────────────────────────────────────────────

    def create(
        self,
        mood_value: int,
        note: Optional[str] = None,
        timestamp: Union[datetime, str, None] = None,
    ) -> MoodRecord:
        """Validate, persist and return a new record."""
        record = MoodRecord(
            id=generate_id(),
            mood_value=validate_mood_value(mood_value),
            timestamp=coerce_timestamp(timestamp),
            note=normalize_note(note),
        )
        with self._write("create mood record") as conn:
            conn.execute(
                "INSERT INTO moods (id, timestamp, mood_value, note) VALUES (?, ?, ?, ?)",
                (record.id, _to_db(record.timestamp), record.mood_value, record.note),
            )
        log.debug("Created mood record %s (value=%d)", record.id, record.mood_value)
        return record

    def delete(self, record_id: str) -> None:
        """Remove a record.  Deleting a missing id raises ``NotFoundError``."""
        with self._write("delete mood record") as conn:
            cur = conn.execute("DELETE FROM moods WHERE id = ?", (record_id,))
            deleted = cur.rowcount
        if not deleted:
            raise NotFoundError(record_id)
        log.debug("Deleted mood record %s", record_id)

    def update_note(self, record_id: str, note: Optional[str] = None) -> MoodRecord:
        """Replace the note of a record and return the updated record."""
        note = normalize_note(note)
        with self._write("update mood note") as conn:
            cur = conn.execute(
                "UPDATE moods SET note = ? WHERE id = ?", (note, record_id)
            )
            updated = cur.rowcount
        if not updated:
            raise NotFoundError(record_id)
        log.debug("Updated note on mood record %s", record_id)
        return self.get(record_id)

    # ── Read ──────────────────────────────────────────────────

    def _row_to_record(self, row: sqlite3.Row) -> MoodRecord:
        return MoodRecord(
            id=row["id"],
            timestamp=_from_db(row["timestamp"]),
            mood_value=row["mood_value"],
            note=row["note"],
        )

    def find(self, record_id: str) -> Optional[MoodRecord]:
        rows = self._read("SELECT * FROM moods WHERE id = ?", (record_id,))
        return self._row_to_record(rows[0]) if rows else None

    def get(self, record_id: str) -> MoodRecord:
        record = self.find(record_id)
        if record is None:
            raise NotFoundError(record_id)
        return record

    def all(self, ascending: bool = False) -> List[MoodRecord]:
        """Every record, newest first unless *ascending*."""
        order = "ASC" if ascending else "DESC"
        rows = self._read(f"SELECT * FROM moods ORDER BY timestamp {order}, id {order}")
        return [self._row_to_record(r) for r in rows]

    def in_range(
        self,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        ascending: bool = True,
    ) -> List[MoodRecord]:
        """Records with ``since <= timestamp < until``.

        Either bound may be omitted.  Ordered oldest first by default,
        the order charts consume.
        """
        clauses: List[str] = []
        params: list = []
        if since is not None:
            clauses.append("timestamp >= ?")
            params.append(_to_db(since.astimezone()))
        if until is not None:
            clauses.append("timestamp < ?")
            params.append(_to_db(until.astimezone()))

        where = " WHERE " + " AND ".join(clauses) if clauses else ""
        order = "ASC" if ascending else "DESC"
        rows = self._read(
            f"SELECT * FROM moods{where} ORDER BY timestamp {order}, id {order}",
            tuple(params),
        )
        return [self._row_to_record(r) for r in rows]

    def count(self) -> int:
        rows = self._read("SELECT COUNT(*) FROM moods")
        return rows[0][0] if rows else 0

    # ── Internal ──────────────────────────────────────────────

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "MoodStore":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
