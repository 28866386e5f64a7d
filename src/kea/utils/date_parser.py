"""Date parsing utilities."""

from datetime import UTC, date, datetime, time, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "last month", "this year"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
        "this month": today.replace(day=1),
        "this year": today.replace(month=1, day=1),
        "this week": today - timedelta(days=today.weekday()),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_timestamp(date_str: str, end_of_day: bool = False) -> int:
    """Parse a date string into a Unix timestamp.

    A bare date maps to midnight UTC, or to the last second of the day when
    ``end_of_day`` is set (useful for inclusive range ends).

    Raises:
        ValueError: If date string cannot be parsed
    """
    return int(to_datetime(parse_date(date_str), end_of_day).timestamp())


def to_datetime(day: date, end_of_day: bool = False) -> datetime:
    """UTC datetime at the start (or last second) of ``day``."""
    moment = time(23, 59, 59) if end_of_day else time(0, 0, 0)
    return datetime.combine(day, moment, tzinfo=UTC)


def format_timestamp(timestamp: int) -> str:
    """Render a Unix timestamp as an ISO date (UTC)."""
    return datetime.fromtimestamp(timestamp, tz=UTC).strftime("%Y-%m-%d")
