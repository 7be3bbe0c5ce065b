"""
Calculation helpers for charge statistics.

Pure functions with no database access:
- numbers: two-decimal rounding and guarded division
- consumption: per-charge distance and consumption
- periods: calendar month and ISO week boundaries and labels
"""

from .constants import DECIMAL_PLACES, DISTANCE_UNIT, UNKNOWN_LOCATION
from .consumption import (
    annotate_series,
    consumption_per_distance,
    cost_per_kwh,
    mileage_delta,
)
from .numbers import round2, round2_or_zero, safe_divide
from .periods import (
    bucket_index,
    month_bounds,
    trailing_weeks,
    week_number_label,
    week_range_label,
    week_start,
)

__all__ = [
    "DECIMAL_PLACES",
    "DISTANCE_UNIT",
    "UNKNOWN_LOCATION",
    "annotate_series",
    "consumption_per_distance",
    "cost_per_kwh",
    "mileage_delta",
    "round2",
    "round2_or_zero",
    "safe_divide",
    "bucket_index",
    "month_bounds",
    "trailing_weeks",
    "week_number_label",
    "week_range_label",
    "week_start",
]
