"""
Services module for the EV charge tracker.

Query logic kept apart from the Flask route handlers.
"""

from services.preferences_service import (
    get_preference_summary,
    save_preferences,
)
from services.stats_service import (
    get_charge_series,
    get_cumulative_totals,
    get_global_stats,
    get_monthly_totals,
    get_simple_averages,
    get_totals_by_location,
    get_vehicle_consumption,
    get_weekly_totals,
)

__all__ = [
    # Preferences
    'get_preference_summary',
    'save_preferences',
    # Statistics
    'get_charge_series',
    'get_cumulative_totals',
    'get_global_stats',
    'get_monthly_totals',
    'get_simple_averages',
    'get_totals_by_location',
    'get_vehicle_consumption',
    'get_weekly_totals',
]
