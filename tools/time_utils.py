"""
Time Utilities
Clock-time parsing and calendar-window helpers shared by the scheduling tools
"""

import logging
from typing import Optional, Tuple, Union
from datetime import datetime, date, time, timedelta
from zoneinfo import ZoneInfo

from config import settings


logger = logging.getLogger(__name__)


CLOCK_FORMATS = ("%H:%M", "%H:%M:%S")


def parse_clock_time(val: Union[str, time, None]) -> Optional[time]:
    """Parse a reminder clock-time.

    Accepts a time object or a string like 'HH:MM' or 'HH:MM:SS'.
    Returns None when the value cannot be interpreted; callers decide
    whether that is worth a warning.
    """
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.time()
    if isinstance(val, time):
        return val
    if isinstance(val, str):
        for fmt in CLOCK_FORMATS:
            try:
                return datetime.strptime(val.strip(), fmt).time()
            except ValueError:
                continue
    return None


def format_clock_time(t: time) -> str:
    return t.strftime("%H:%M")


def to_local_naive(value: datetime, tz: Optional[ZoneInfo] = None) -> datetime:
    """
    Normalize a timestamp to naive local wall-clock time.

    Aware values are converted into the configured zone first, so a log
    stored as 07:00Z and one stored as 09:00+02:00 compare equal.
    Naive values are assumed to already be local.
    """
    if value.tzinfo is None:
        return value
    zone = tz or ZoneInfo(settings.TIMEZONE)
    return value.astimezone(zone).replace(tzinfo=None)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Local midnight through the last microsecond of the day"""
    start = datetime.combine(day, time.min)
    end = datetime.combine(day, time.max)
    return start, end


def week_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """
    Monday 00:00 through Sunday 23:59:59.999999 of the week containing now.

    Weeks always start on Monday regardless of locale.
    """
    today = to_local_naive(now).date()
    monday = today - timedelta(days=today.weekday())
    start = datetime.combine(monday, time.min)
    end = datetime.combine(monday + timedelta(days=6), time.max)
    return start, end


def format_week_range(week_start: datetime, week_end: datetime) -> str:
    """Human readable week label, e.g. 'Jun 9 - Jun 15'"""
    return (
        f"{week_start.strftime('%b')} {week_start.day} - "
        f"{week_end.strftime('%b')} {week_end.day}"
    )
