"""
Calendar Datetime Utilities

This module provides datetime helpers shared by the adapter and the assistant:
- utc_now: Current time as an aware UTC datetime
- lookahead_window: UTC ISO bounds of a [now, now + N days] window
- zoned_event_time: Google start/end dict anchored to the reference zone
- describe_reference_now: Human-readable date and time for the system prompt
"""

from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

import pytz


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Args:
        dt: Aware datetime, or naive datetime assumed to already be UTC

    Returns:
        Aware datetime in UTC
    """
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def lookahead_window(days_ahead: int, now: Optional[datetime] = None) -> Tuple[str, str]:
    """
    Compute the listing window for upcoming events.

    Args:
        days_ahead: Number of days after now to include
        now: Window start; defaults to the current time

    Returns:
        (time_min, time_max) as UTC ISO strings for the Calendar API
    """
    start = to_utc(now) if now is not None else utc_now()
    end = start + timedelta(days=days_ahead)
    return start.isoformat(), end.isoformat()


def zoned_event_time(date_time: str, timezone_name: str) -> Dict[str, str]:
    return {"dateTime": date_time, "timeZone": timezone_name}


def describe_reference_now(now: datetime, timezone: pytz.BaseTzInfo) -> Tuple[str, str]:
    """
    Format the reference instant for the assistant prompt.

    Args:
        now: Reference instant (naive values are treated as UTC)
        timezone: Reference timezone the user lives in

    Returns:
        (date, time) e.g. ("Monday, June 10, 2024", "09:30")
    """
    local = to_utc(now).astimezone(timezone)
    date_text = f"{local.strftime('%A')}, {local.strftime('%B')} {local.day}, {local.year}"
    return date_text, local.strftime("%H:%M")
