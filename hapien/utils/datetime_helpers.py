"""
Local-time and calendar-day helpers

Every streak and hour-of-day rule works on "local time": the configured
GAMIFICATION_TIMEZONE, or the process' local time when unset.

RULES:
- Naive datetimes are already local
- Aware datetimes are converted to local before reading hour or day
- "Yesterday" is one calendar day back, never 24 hours back
"""

import logging
from datetime import datetime, date, timedelta, tzinfo
from typing import Optional, Union

from hapien.config import get_timezone

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Current local datetime (aware when a timezone is configured)"""
    tz = tz or get_timezone()
    return datetime.now(tz) if tz else datetime.now()


def to_local(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Convert a datetime to local time; naive datetimes are returned as-is"""
    if dt.tzinfo is None:
        return dt
    tz = tz or get_timezone()
    return dt.astimezone(tz) if tz else dt.astimezone()


def to_calendar_date(value: Optional[DateLike], tz: Optional[tzinfo] = None) -> Optional[date]:
    """
    Reduce a date, datetime or ISO-8601 string to its local calendar day

    Args:
        value: date, datetime, ISO string ("2024-01-10" or "2024-01-10T21:30:00+00:00") or None
        tz: Override for the configured timezone

    Returns:
        The calendar day, or None when value is None
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value) if "T" in value or " " in value else date.fromisoformat(value)
    if isinstance(value, datetime):
        return to_local(value, tz).date()
    return value


def previous_calendar_day(day: date) -> date:
    """The calendar day before day"""
    return day - timedelta(days=1)


def is_same_calendar_day(a: DateLike, b: DateLike, tz: Optional[tzinfo] = None) -> bool:
    """Whether two moments fall on the same local calendar day"""
    return to_calendar_date(a, tz) == to_calendar_date(b, tz)


def end_of_day(moment: datetime) -> datetime:
    """Last millisecond of moment's day, in moment's timezone"""
    return moment.replace(hour=23, minute=59, second=59, microsecond=999000)


def local_hour(moment: datetime, tz: Optional[tzinfo] = None) -> int:
    """Hour of day (0-23) in local time"""
    return to_local(moment, tz).hour
