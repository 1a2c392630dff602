"""Utility constants and helpers for intime.

Time unit constants represent durations in seconds. The year is the fixed
365-day year used by the fixed-ratio projections, not a calendar year.
"""

# Time unit constants (all values in seconds)
SECOND = 1
MINUTE = 60
HOUR = 3600
DAY = 86400
WEEK = 604800
YEAR = 31536000

MONTHS_PER_YEAR = 12
DAYS_PER_WEEK = 7

# Default timezone for anchors and naive base instants
DEFAULT_TZ = "UTC"


def floor(value: float, truncate: bool) -> int | float:
    """Truncate ``value`` toward zero when ``truncate`` is set."""
    return int(value) if truncate else value
