# algoflow/utils/time_helpers.py
"""
Time-related utility functions.

Timestamps crossing module boundaries are epoch milliseconds; broker
request dates are rendered in exchange time (IST).
"""

import time
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo


MARKET_TZ = ZoneInfo("Asia/Kolkata")
DAY_MS = 24 * 60 * 60 * 1000


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def ms_to_datetime(timestamp_ms: int, tz=MARKET_TZ) -> datetime:
    """Convert epoch milliseconds to an aware datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).astimezone(tz)


def datetime_to_ms(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds; naive values are taken as IST."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=MARKET_TZ)
    return int(dt.timestamp() * 1000)


def parse_iso_to_ms(value: str) -> int:
    """Parse an ISO-8601 string (offset optional) to epoch milliseconds."""
    return datetime_to_ms(datetime.fromisoformat(value))


def iso_now() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def resolve_range(
    from_ms: Optional[int],
    to_ms: Optional[int],
    default_days: int,
) -> Tuple[int, int]:
    """
    Fill in a missing request range.

    ``to`` defaults to now and ``from`` to ``default_days`` before ``to``.
    """
    end = to_ms if to_ms is not None else now_ms()
    start = from_ms if from_ms is not None else end - default_days * DAY_MS
    return start, end


def format_date(timestamp_ms: int) -> str:
    """YYYY-MM-DD in exchange time."""
    return ms_to_datetime(timestamp_ms).strftime("%Y-%m-%d")


def format_date_minutes(timestamp_ms: int) -> str:
    """YYYY-MM-DD HH:MM in exchange time."""
    return ms_to_datetime(timestamp_ms).strftime("%Y-%m-%d %H:%M")


def format_duration(seconds: float) -> str:
    """
    Format duration in seconds to human readable string.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    delta = timedelta(seconds=seconds)
    if delta.days > 0:
        return f"{delta.days}d {delta.seconds // 3600}h"
    if seconds >= 3600:
        return f"{int(seconds // 3600)}h {int((seconds % 3600) // 60)}m"
    if seconds >= 60:
        return f"{int(seconds // 60)}m {int(seconds % 60)}s"
    return f"{seconds:.1f}s"
