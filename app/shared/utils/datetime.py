"""
UTC date/time utilities for consistent timezone handling.

Dates written to the store (join_date, admission_date defaults) are
calendar dates in UTC. Use these helpers instead of date.today().
"""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def today_utc() -> date:
    """Return today's calendar date in UTC."""
    return utc_now().date()
