"""
Constants shared by the charge statistics calculations.
"""

# Consumption is expressed per this many distance units (kWh/100 km)
DISTANCE_UNIT = 100

# Money and energy values are rendered with this many decimal places
DECIMAL_PLACES = 2

# Label for charges recorded without a location
UNKNOWN_LOCATION = "Unknown"

# ISO weeks start on Monday
DAYS_PER_WEEK = 7
