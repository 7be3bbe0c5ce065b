"""
Calendar period helpers for the monthly and weekly rollups.

All boundaries are naive UTC datetimes at midnight, half-open: a period is
``start <= date < end``. Months follow calendar boundaries, not a rolling
30-day window. Weeks are ISO weeks starting on Monday.
"""

from datetime import datetime, timedelta
from typing import List, Tuple

from .constants import DAYS_PER_WEEK


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def month_bounds(now: datetime) -> Tuple[datetime, datetime, datetime]:
    """
    Boundaries of the previous and current calendar months.

    Returns:
        (previous_month_start, current_month_start, next_month_start)

    Example:
        >>> month_bounds(datetime(2024, 1, 15))
        (datetime.datetime(2023, 12, 1, 0, 0), datetime.datetime(2024, 1, 1, 0, 0), datetime.datetime(2024, 2, 1, 0, 0))
    """
    current_start = start_of_day(now).replace(day=1)

    if current_start.month == 1:
        previous_start = current_start.replace(year=current_start.year - 1, month=12)
    else:
        previous_start = current_start.replace(month=current_start.month - 1)

    if current_start.month == 12:
        next_start = current_start.replace(year=current_start.year + 1, month=1)
    else:
        next_start = current_start.replace(month=current_start.month + 1)

    return previous_start, current_start, next_start


def week_start(dt: datetime) -> datetime:
    """Monday 00:00 of the week containing ``dt``."""
    return start_of_day(dt) - timedelta(days=dt.weekday())


def trailing_weeks(now: datetime, weeks: int) -> List[Tuple[datetime, datetime]]:
    """
    The last ``weeks`` ISO weeks ending with the current one, oldest first.

    Returns:
        List of (week_start, next_week_start) tuples
    """
    if weeks < 1:
        raise ValueError("weeks must be at least 1")

    current = week_start(now)
    first = current - timedelta(days=DAYS_PER_WEEK * (weeks - 1))
    return [
        (first + timedelta(days=DAYS_PER_WEEK * i), first + timedelta(days=DAYS_PER_WEEK * (i + 1)))
        for i in range(weeks)
    ]


def bucket_index(dt: datetime, first_week_start: datetime) -> int:
    """Index of the week bucket ``dt`` falls into, counted from ``first_week_start``."""
    return (dt - first_week_start).days // DAYS_PER_WEEK


def week_range_label(start: datetime) -> str:
    """
    Human-readable range for a week.

    Example:
        >>> week_range_label(datetime(2026, 10, 12))
        'Oct 12 - Oct 18'
    """
    end = start + timedelta(days=DAYS_PER_WEEK - 1)
    return f"{start:%b} {start.day} - {end:%b} {end.day}"


def week_number_label(start: datetime) -> str:
    """
    ISO week number label for a week.

    Example:
        >>> week_number_label(datetime(2026, 10, 12))
        'W42 2026'
    """
    year, week, _ = start.isocalendar()
    return f"W{week:02d} {year}"
