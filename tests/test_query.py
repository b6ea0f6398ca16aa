"""Tests for moodlog.query."""

from datetime import date, datetime, timedelta

import pytest

from moodlog.core.types import MOOD_MAX, MOOD_MIN
from moodlog.query import (
    BUCKET_TABLES,
    DateRange,
    FilterSpec,
    MoodBucket,
    Period,
    analytics_window,
    apply_filter,
    bucket_of,
    bucket_range,
    matches,
    shift_months,
)
from tests.conftest import local, make_record


REFERENCE = local(2026, 3, 15, 12)


@pytest.fixture
def records():
    return [
        make_record(2, local(2025, 1, 10, 9), note="rough start"),
        make_record(5, local(2026, 2, 1, 9), note="meh"),
        make_record(6, local(2026, 2, 20, 9), note="Had COFFEE with Ana"),
        make_record(9, local(2026, 3, 14, 9), note="Café au lait"),
        make_record(4, local(2026, 3, 15, 8)),
    ]


class TestBuckets:
    @pytest.mark.parametrize("scheme", sorted(BUCKET_TABLES))
    def test_partition(self, scheme):
        for value in range(MOOD_MIN, MOOD_MAX + 1):
            hits = [
                b for b, (lo, hi) in BUCKET_TABLES[scheme].items() if lo <= value <= hi
            ]
            assert len(hits) == 1, value

    def test_history_table(self):
        assert bucket_range(MoodBucket.BAD) == (1, 4)
        assert bucket_range(MoodBucket.NEUTRAL) == (5, 5)
        assert bucket_range(MoodBucket.GOOD) == (6, 10)
        assert bucket_range(MoodBucket.ALL) == (1, 10)

    def test_legacy_table(self):
        assert bucket_of(3, "legacy") is MoodBucket.BAD
        assert bucket_of(4, "legacy") is MoodBucket.NEUTRAL
        assert bucket_of(7, "legacy") is MoodBucket.NEUTRAL
        assert bucket_of(8, "legacy") is MoodBucket.GOOD

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            bucket_range(MoodBucket.BAD, "nope")

    def test_bucket_of_out_of_scale(self):
        with pytest.raises(ValueError):
            bucket_of(11)


class TestShiftMonths:
    def test_simple(self):
        assert shift_months(date(2026, 3, 15), -1) == date(2026, 2, 15)

    def test_clamps_day(self):
        assert shift_months(date(2026, 3, 31), -1) == date(2026, 2, 28)
        assert shift_months(date(2024, 3, 31), -1) == date(2024, 2, 29)

    def test_crosses_year(self):
        assert shift_months(date(2026, 1, 10), -1) == date(2025, 12, 10)
        assert shift_months(date(2026, 3, 15), -12) == date(2025, 3, 15)

    def test_keeps_time_of_day(self):
        moment = datetime(2026, 5, 31, 21, 45)
        assert shift_months(moment, -1) == datetime(2026, 4, 30, 21, 45)


class TestAnalyticsWindow:
    def test_day(self):
        assert analytics_window(Period.DAY, REFERENCE) == (
            local(2026, 3, 15),
            local(2026, 3, 16),
        )

    def test_week_includes_reference_day(self):
        start, end = analytics_window("week", REFERENCE)
        assert start == local(2026, 3, 9)
        assert end == local(2026, 3, 16)
        assert end - start == timedelta(days=7)

    def test_month_and_year(self):
        assert analytics_window(Period.MONTH, REFERENCE)[0] == local(2026, 2, 15)
        assert analytics_window(Period.YEAR, REFERENCE)[0] == local(2025, 3, 15)

    def test_unknown_period(self):
        with pytest.raises(ValueError):
            analytics_window("fortnight", REFERENCE)


class TestFilterSpec:
    def test_defaults(self):
        spec = FilterSpec()
        assert spec.bucket is MoodBucket.ALL
        assert spec.date_range is DateRange.ALL
        assert spec.window() == (None, None)

    def test_coerces_strings(self):
        spec = FilterSpec(bucket="good", date_range="last_month")
        assert spec.bucket is MoodBucket.GOOD
        assert spec.date_range is DateRange.LAST_MONTH

    def test_invalid_bucket(self):
        with pytest.raises(ValueError):
            FilterSpec(bucket="great")

    def test_inverted_window(self):
        with pytest.raises(ValueError):
            FilterSpec(start=local(2026, 3, 2), end=local(2026, 3, 1))

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            FilterSpec(bucket_scheme="fancy")

    def test_explicit_bounds_beat_range(self):
        spec = FilterSpec(
            date_range="last_year", start=local(2026, 1, 1), reference=REFERENCE
        )
        assert spec.window() == (local(2026, 1, 1), None)

    def test_for_period(self):
        spec = FilterSpec.for_period("week", REFERENCE, bucket="good")
        assert spec.ascending is True
        assert spec.bucket is MoodBucket.GOOD
        assert spec.window() == (local(2026, 3, 9), local(2026, 3, 16))


class TestApplyFilter:
    def test_no_filter_newest_first(self, records):
        result = apply_filter(records)
        assert [r.mood_value for r in result] == [4, 9, 6, 5, 2]

    def test_ascending(self, records):
        result = apply_filter(records, FilterSpec(ascending=True))
        assert [r.mood_value for r in result] == [2, 5, 6, 9, 4]

    def test_search_case_insensitive(self, records):
        result = apply_filter(records, FilterSpec(search_text="coffee"))
        assert [r.note for r in result] == ["Had COFFEE with Ana"]

    def test_search_coffee_not_tea(self):
        coffee = make_record(6, local(2026, 3, 1, 9), note="Had coffee today")
        tea = make_record(6, local(2026, 3, 2, 9), note="Had tea today")
        bare = make_record(6, local(2026, 3, 3, 9))
        result = apply_filter([coffee, tea, bare], FilterSpec(search_text="coffee"))
        assert result == [coffee]

    def test_search_diacritic_insensitive(self, records):
        result = apply_filter(records, FilterSpec(search_text="cafe"))
        assert [r.mood_value for r in result] == [9]

    def test_search_skips_missing_notes(self, records):
        result = apply_filter(records, FilterSpec(search_text="a"))
        assert all(r.note is not None for r in result)

    def test_empty_search_is_inactive(self, records):
        assert len(apply_filter(records, FilterSpec(search_text=""))) == len(records)

    def test_bucket_good(self, records):
        result = apply_filter(records, FilterSpec(bucket="good"))
        assert sorted(r.mood_value for r in result) == [6, 9]

    def test_bucket_legacy_scheme(self, records):
        spec = FilterSpec(bucket="neutral", bucket_scheme="legacy")
        assert sorted(r.mood_value for r in apply_filter(records, spec)) == [4, 5, 6]

    def test_buckets_partition_records(self, records):
        total = sum(
            len(apply_filter(records, FilterSpec(bucket=b)))
            for b in (MoodBucket.BAD, MoodBucket.NEUTRAL, MoodBucket.GOOD)
        )
        assert total == len(records)

    def test_last_month(self, records):
        spec = FilterSpec(date_range="last_month", reference=REFERENCE)
        result = apply_filter(records, spec)
        assert [r.mood_value for r in result] == [4, 9, 6]

    def test_last_year(self, records):
        spec = FilterSpec(date_range="last_year", reference=REFERENCE)
        assert len(apply_filter(records, spec)) == 4

    def test_window_end_exclusive(self, records):
        spec = FilterSpec(start=local(2026, 2, 1, 9), end=local(2026, 3, 14, 9))
        assert sorted(r.mood_value for r in apply_filter(records, spec)) == [5, 6]

    def test_criteria_combine(self, records):
        spec = FilterSpec(
            search_text="a", bucket="good", date_range="last_month", reference=REFERENCE
        )
        assert sorted(r.mood_value for r in apply_filter(records, spec)) == [6, 9]

    def test_matches_single(self, records):
        assert matches(records[3], FilterSpec(bucket="good"))
        assert not matches(records[0], FilterSpec(bucket="good"))

    def test_empty_input(self):
        assert apply_filter([], FilterSpec(bucket="bad")) == []


class TestDaylightSaving:
    """Europe/Berlin moves from +01:00 to +02:00 on 2026-03-29."""

    def test_week_bounds_are_local_midnights(self, berlin_tz):
        start, end = analytics_window("week", local(2026, 3, 31, 12))
        assert start == local(2026, 3, 25)
        assert (start.hour, start.minute) == (0, 0)
        assert start.utcoffset() == timedelta(hours=1)
        assert end == local(2026, 4, 1)
        assert end.utcoffset() == timedelta(hours=2)

    def test_late_evening_before_window_excluded(self, berlin_tz):
        records = [
            make_record(2, local(2026, 3, 24, 23, 30)),
            make_record(5, local(2026, 3, 25, 0, 30)),
        ]
        spec = FilterSpec.for_period("week", local(2026, 3, 31, 12))
        assert [r.mood_value for r in apply_filter(records, spec)] == [5]

    def test_last_month_keeps_wall_clock_time(self, berlin_tz):
        start = DateRange.LAST_MONTH.start(local(2026, 4, 10, 12))
        assert start == local(2026, 3, 10, 12)
        assert start.utcoffset() == timedelta(hours=1)
