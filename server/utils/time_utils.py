"""
Time parsing utilities for the EV charge tracker.

Charge dates are stored as naive UTC datetimes; everything coming in from a
request is normalized to that form before it reaches a query.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current UTC time with timezone info."""
    return datetime.now(timezone.utc)


def to_naive_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to naive UTC.

    Aware values are shifted to UTC first; naive values are assumed to be UTC
    already.

    Example:
        >>> to_naive_utc(datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc))
        datetime.datetime(2024, 1, 15, 14, 30)
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def utc_now_naive() -> datetime:
    return to_naive_utc(utc_now())


def parse_datetime(date_string: str, default: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse a date/time string into a naive UTC datetime.

    Supports ISO 8601 ("2024-01-15T14:30:00Z"), date only ("2024-01-15") and
    the other formats dateutil understands.

    Args:
        date_string: The date/time string to parse
        default: Value to return if parsing fails

    Returns:
        datetime or default if parsing fails
    """
    if not date_string or not isinstance(date_string, str):
        return default

    try:
        return to_naive_utc(date_parser.parse(date_string.strip()))
    except (ValueError, OverflowError) as e:
        logger.debug(f"Could not parse date {date_string!r}: {e}")
        return default
