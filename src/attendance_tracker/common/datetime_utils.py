from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Any, Optional


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as returned by the gateway."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def parse_time_of_day(value: Any) -> time:
    """Normalize a time-of-day value.

    The gateway can return TIME columns as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30' or '08:30:00')
    """

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(float(parts[2])) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported time value type: {type(value)!r}")


def format_time_of_day(value: Any) -> str:
    """Format a time of day the way the gateway accepts it ('HH:MM' or 'HH:MM:SS')."""
    t = parse_time_of_day(value)
    if t.second:
        return t.strftime("%H:%M:%S")
    return t.strftime("%H:%M")
