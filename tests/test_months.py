"""Tests for month identifier helpers."""

import pytest
from datetime import date, datetime, timedelta, timezone

from app.productivity.exceptions import InvalidMonthException
from app.productivity.months import (
    days_in_month,
    format_month_id,
    is_valid_month_id,
    month_date_range,
    month_datetime_range,
    parse_month_id,
    shift_month,
    to_utc_date,
    week_ranges,
)


class TestParseMonthId:
    def test_valid(self):
        assert parse_month_id("2026-09") == (2026, 9)

    @pytest.mark.parametrize("month_id", ["2026-9", "202609", "2026-00", "2026-13", "2019-12", "2031-01", None])
    def test_invalid(self, month_id):
        with pytest.raises(InvalidMonthException) as exc_info:
            parse_month_id(month_id)

        assert exc_info.value.detail["code"] == "INVALID_MONTH_ID"
        assert exc_info.value.detail["details"] == {"month": month_id}

    @pytest.mark.parametrize("month_id,valid", [
        ("2020-01", True),
        ("2030-12", True),
        ("2026-13", False),
        ("2026-1", False),
        ("2032-01", False),
    ])
    def test_is_valid_month_id(self, month_id, valid):
        assert is_valid_month_id(month_id) is valid


class TestMonthRanges:
    @pytest.mark.parametrize("month_id,days", [
        ("2026-02", 28),
        ("2028-02", 29),
        ("2026-09", 30),
        ("2026-10", 31),
    ])
    def test_days_in_month(self, month_id, days):
        assert days_in_month(month_id) == days

    def test_date_range_is_closed(self):
        assert month_date_range("2026-09") == (date(2026, 9, 1), date(2026, 9, 30))

    def test_datetime_range_covers_whole_days_in_utc(self):
        start, end = month_datetime_range("2026-12")

        assert start == datetime(2026, 12, 1, tzinfo=timezone.utc)
        assert end.date() == date(2026, 12, 31)
        assert end.hour == 23 and end.minute == 59
        assert end.tzinfo == timezone.utc

    def test_format_month_id(self):
        assert format_month_id(date(2026, 3, 15)) == "2026-03"
        assert format_month_id(datetime(2026, 11, 30, 23, 59)) == "2026-11"

    @pytest.mark.parametrize("month_id,delta,expected", [
        ("2026-10", -1, "2026-09"),
        ("2026-01", -1, "2025-12"),
        ("2026-12", 1, "2027-01"),
        ("2026-10", -12, "2025-10"),
        ("2026-10", 0, "2026-10"),
    ])
    def test_shift_month(self, month_id, delta, expected):
        assert shift_month(month_id, delta) == expected


class TestToUtcDate:
    def test_naive_timestamp_is_utc(self):
        assert to_utc_date(datetime(2026, 9, 30, 23, 30)) == date(2026, 9, 30)

    def test_aware_timestamp_is_converted(self):
        value = datetime(2026, 9, 30, 20, 0, tzinfo=timezone(timedelta(hours=-5)))

        assert to_utc_date(value) == date(2026, 10, 1)


class TestWeekRanges:
    def test_october_buckets(self):
        assert week_ranges("2026-10") == [
            (date(2026, 10, 1), date(2026, 10, 7)),
            (date(2026, 10, 8), date(2026, 10, 14)),
            (date(2026, 10, 15), date(2026, 10, 21)),
            (date(2026, 10, 22), date(2026, 10, 28)),
            (date(2026, 10, 29), date(2026, 10, 31)),
        ]

    def test_february_has_four_full_weeks(self):
        ranges = week_ranges("2026-02")

        assert len(ranges) == 4
        assert ranges[-1] == (date(2026, 2, 22), date(2026, 2, 28))
