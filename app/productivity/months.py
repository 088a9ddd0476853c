"""
Month identifier helpers.

A month identifier is a canonical "YYYY-MM" string.
"""

import calendar
import re
from datetime import date, datetime, time, timezone, timedelta
from typing import Tuple

from app.productivity.constants import MIN_MONTH_YEAR, MAX_MONTH_YEAR
from app.productivity.exceptions import InvalidMonthException

MONTH_ID_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def is_valid_month_id(month_id: str) -> bool:
    """Check format, month number and supported year range."""
    if not isinstance(month_id, str) or not MONTH_ID_PATTERN.match(month_id):
        return False
    year, month = (int(part) for part in month_id.split("-"))
    return MIN_MONTH_YEAR <= year <= MAX_MONTH_YEAR and 1 <= month <= 12


def parse_month_id(month_id: str) -> Tuple[int, int]:
    """
    Split a month identifier into (year, month).

    Raises:
        InvalidMonthException: Malformed or out-of-range identifier
    """
    if not isinstance(month_id, str) or not MONTH_ID_PATTERN.match(month_id):
        raise InvalidMonthException(month_id, "expected YYYY-MM")

    year, month = (int(part) for part in month_id.split("-"))

    if not 1 <= month <= 12:
        raise InvalidMonthException(month_id, "month must be between 01 and 12")

    if not MIN_MONTH_YEAR <= year <= MAX_MONTH_YEAR:
        raise InvalidMonthException(
            month_id, f"year must be between {MIN_MONTH_YEAR} and {MAX_MONTH_YEAR}"
        )

    return year, month


def format_month_id(value: date) -> str:
    """Format a date (or datetime) as YYYY-MM."""
    return f"{value.year:04d}-{value.month:02d}"


def days_in_month(month_id: str) -> int:
    year, month = parse_month_id(month_id)
    return calendar.monthrange(year, month)[1]


def month_date_range(month_id: str) -> Tuple[date, date]:
    """First and last calendar day of the month (closed range)."""
    year, month = parse_month_id(month_id)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_datetime_range(month_id: str) -> Tuple[datetime, datetime]:
    """UTC datetimes covering the whole month, start of first day to end of last day."""
    start, end = month_date_range(month_id)
    return (
        datetime.combine(start, time.min, tzinfo=timezone.utc),
        datetime.combine(end, time.max, tzinfo=timezone.utc),
    )


def shift_month(month_id: str, delta: int) -> str:
    """Move a month identifier by delta months (negative goes back)."""
    year, month = (int(part) for part in month_id.split("-"))
    index = year * 12 + (month - 1) + delta
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def to_utc_date(value: datetime) -> date:
    """Canonical calendar date of a timestamp; naive timestamps are treated as UTC."""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(timezone.utc).date()


def week_ranges(month_id: str):
    """7-day buckets from the 1st of the month; the last bucket may be shorter."""
    start, end = month_date_range(month_id)
    ranges = []
    week_start = start
    while week_start <= end:
        week_end = min(week_start + timedelta(days=6), end)
        ranges.append((week_start, week_end))
        week_start = week_end + timedelta(days=1)
    return ranges
