"""
moodlog.journal -- Top-level MoodJournal: the public API for moodlog.

    from moodlog import MoodJournal
    from moodlog.query import FilterSpec, MoodBucket

    with MoodJournal(data_dir="./data") as journal:
        journal.create_record(7, note="Had coffee today")
        good = journal.list_records(FilterSpec(bucket=MoodBucket.GOOD))
        avg = journal.daily_average()

Everything is wired up here: config, store, filtering and analytics.
The UI layer only needs to touch MoodJournal.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from moodlog import analytics
from moodlog.core.config import Config
from moodlog.core.errors import PersistenceError
from moodlog.core.types import MoodRecord, MoodSummary, TrendPoint, now_local
from moodlog.export import export_records
from moodlog.query import FilterSpec, Period, apply_filter
from moodlog.store import MoodStore

log = logging.getLogger("moodlog.journal")


class MoodJournal:
    """Owns one ``MoodStore`` and exposes the operations screens call.

    Parameters
    ----------
    config:
        Full ``Config`` object.  If not given, ``data_dir`` and
        ``**kwargs`` are forwarded to ``Config``.
    data_dir:
        Shortcut -- if you just want to point at a directory and go.
    store:
        An already-open store to use instead of opening one from the
        config.  The journal closes it on ``close()``.
    **kwargs:
        Extra keyword args forwarded to ``Config()``.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        data_dir: Optional[Union[str, Path]] = None,
        store: Optional[MoodStore] = None,
        **kwargs: Any,
    ) -> None:
        if config is not None:
            self.config = config
        elif data_dir is not None:
            self.config = Config.from_data_dir(data_dir, **kwargs)
        else:
            self.config = Config(**kwargs)

        if self.config.structured_logging:
            from moodlog.core.logging import configure_logging

            configure_logging(structured=True, level=self.config.log_level)

        if store is not None:
            self.store = store
        else:
            if not self.config.in_memory:
                self.config.ensure_directories()
            self.store = MoodStore(self.config.database)

        #: Last failure swallowed by a read operation, or None.
        self.last_read_error: Optional[PersistenceError] = None

    # -- writes -------------------------------------------------------------

    def create_record(
        self,
        mood_value: int,
        note: Optional[str] = None,
        timestamp: Union[datetime, str, None] = None,
    ) -> MoodRecord:
        record = self.store.create(mood_value, note=note, timestamp=timestamp)
        log.info(
            "Recorded mood %d %s",
            record.mood_value,
            record.emoji,
            extra={"record_id": record.id, "mood_value": record.mood_value},
        )
        return record

    def delete_record(self, record_id: str) -> None:
        self.store.delete(record_id)
        log.info("Deleted mood record %s", record_id, extra={"record_id": record_id})

    def update_note(self, record_id: str, note: Optional[str] = None) -> MoodRecord:
        return self.store.update_note(record_id, note)

    # -- reads --------------------------------------------------------------

    def _snapshot(self, spec: FilterSpec) -> List[MoodRecord]:
        """Records for *spec*, degrading to an empty list on storage failure."""
        start, end = spec.window()
        try:
            if start is None and end is None:
                records = self.store.all()
            else:
                records = self.store.in_range(since=start, until=end)
        except PersistenceError as exc:
            log.warning(
                "Read failed, returning no records: %s", exc, extra={"action": "read"}
            )
            self.last_read_error = exc
            return []
        self.last_read_error = None
        return records

    def _spec(self, spec: Optional[FilterSpec]) -> FilterSpec:
        if spec is None:
            return FilterSpec(bucket_scheme=self.config.bucket_scheme)
        return spec

    def get_record(self, record_id: str) -> MoodRecord:
        return self.store.get(record_id)

    def list_records(self, spec: Optional[FilterSpec] = None) -> List[MoodRecord]:
        """Filtered records, newest first unless ``spec.ascending``."""
        spec = self._spec(spec)
        return apply_filter(self._snapshot(spec), spec)

    def period_spec(
        self,
        period: Optional[Union[Period, str]] = None,
        reference: Optional[datetime] = None,
    ) -> FilterSpec:
        """Spec for an analytics period (defaults to ``config.default_period``)."""
        return FilterSpec.for_period(
            Period(period or self.config.default_period),
            reference=reference,
            bucket_scheme=self.config.bucket_scheme,
        )

    def daily_average(self, spec: Optional[FilterSpec] = None) -> float:
        """Mean mood of the records *spec* selects; ``0.0`` when there are none."""
        return analytics.daily_average(self.list_records(spec))

    def trend(self, spec: Optional[FilterSpec] = None) -> List[TrendPoint]:
        return analytics.trend_series(self.list_records(spec))

    def heatmap(
        self,
        window_days: Optional[int] = None,
        reference: Optional[datetime] = None,
    ) -> Dict[date, int]:
        """Latest mood per day over the last *window_days* days."""
        if window_days is None:
            window_days = self.config.heatmap_window_days
        records = self._window_records(window_days, reference)
        return analytics.heatmap(records, window_days, reference)

    def heatmap_cells(
        self,
        window_days: Optional[int] = None,
        reference: Optional[datetime] = None,
    ) -> List[analytics.HeatmapCell]:
        if window_days is None:
            window_days = self.config.heatmap_window_days
        records = self._window_records(window_days, reference)
        return analytics.heatmap_cells(records, window_days, reference)

    def _window_records(
        self, window_days: int, reference: Optional[datetime]
    ) -> List[MoodRecord]:
        start, end = analytics.heatmap_window(window_days, reference)
        return self.list_records(
            FilterSpec(start=start, end=end, ascending=True, reference=reference)
        )

    def summary(self, spec: Optional[FilterSpec] = None) -> MoodSummary:
        return analytics.summarize(self.list_records(spec), self.config.bucket_scheme)

    # -- export -------------------------------------------------------------

    def export(
        self,
        fmt: str = "csv",
        path: Optional[Union[str, Path]] = None,
        spec: Optional[FilterSpec] = None,
    ) -> Path:
        """Write the selected records to *path* (default: ``export_dir``).

        Returns the path written.
        """
        if path is None:
            stamp = now_local().strftime("%Y%m%d_%H%M%S")
            path = self.config.export_dir / f"moods_{stamp}.{fmt.lower()}"
        path = Path(path)
        records = self.list_records(spec)
        try:
            export_records(records, path, fmt)
        except OSError as exc:
            raise PersistenceError(f"Could not write export {path}: {exc}") from exc
        return path

    # -- lifecycle ----------------------------------------------------------

    def count(self) -> int:
        return self.store.count()

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> "MoodJournal":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
