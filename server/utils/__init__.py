"""Utility modules for the EV charge tracker."""

from .time_utils import (
    parse_datetime,
    to_naive_utc,
    utc_now,
    utc_now_naive,
)

__all__ = [
    'parse_datetime',
    'to_naive_utc',
    'utc_now',
    'utc_now_naive',
]
