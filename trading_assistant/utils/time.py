"""
Time helpers for tick timestamps and human-readable durations.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current wall-clock time as a UTC datetime."""
    return datetime.now(timezone.utc)


def format_duration_minutes(minutes: int) -> str:
    """
    Render a whole-minute duration, switching to hours at 60 minutes.

    Args:
        minutes: Duration in whole minutes

    Returns:
        e.g. "45 minutes", "1 hour", "1.5 hours"
    """
    if minutes < 60:
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"

    hours = round(minutes / 60.0, 1)
    if hours == 1:
        return "1 hour"
    return f"{hours:g} hours"
