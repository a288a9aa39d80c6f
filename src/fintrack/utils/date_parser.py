"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("this-month", "last-month", "this-year", "last-year")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Accepts absolute dates understood by dateutil ("2024-01-15",
    "Jan 15 2024") and the relative words "today", "yesterday", "tomorrow",
    "this month" / "last month" (first day of that month).

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    relative = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
    }
    if text in relative:
        return relative[text]

    try:
        return date_parser.parse(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def month_bounds(day: date) -> tuple[date, date]:
    """First and last day of the calendar month containing ``day``."""
    start = day.replace(day=1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return month_bounds(today)
    if period == "last-month":
        return month_bounds(today - relativedelta(months=1))
    if period == "this-year":
        return today.replace(month=1, day=1), today.replace(month=12, day=31)
    if period == "last-year":
        year = today.year - 1
        return date(year, 1, 1), date(year, 12, 31)
    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
