"""
Time arithmetic for duty-log clock strings.

Clock values arrive as "HH:mm" strings typed into the duty log. Missing or
malformed values parse as 0 minutes, the same value as midnight; callers
decide from context whether 0 means "absent".

Calendar dates are "YYYY-MM-DD" strings anchored to UTC.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union
import logging

import pytz

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


def parse_time_to_minutes(time_str: Optional[str]) -> int:
    """Minutes from midnight for "HH:mm", or 0 if missing/malformed"""
    if not time_str or ':' not in time_str:
        return 0
    hours, minutes = time_str.split(':')[:2]
    try:
        return int(hours.strip()) * 60 + int(minutes.strip())
    except ValueError:
        logger.debug(f"Unparseable clock value {time_str!r}, treating as 00:00")
        return 0


def calculate_duration_hours(start: Optional[str], end: Optional[str]) -> float:
    """
    Hours between two clock strings.

    An end earlier than the start rolls over midnight once; multi-day spans
    are not representable.
    """
    if not start or not end:
        return 0.0
    start_minutes = parse_time_to_minutes(start)
    end_minutes = parse_time_to_minutes(end)
    if end_minutes < start_minutes:
        end_minutes += MINUTES_PER_DAY
    return (end_minutes - start_minutes) / 60


def decimal_to_time(decimal: Optional[float], allow_zero: bool = False) -> str:
    """1.5 -> "01:30", -1.5 -> "-01:30"; 0 -> "" unless allow_zero"""
    if decimal is None or (not allow_zero and decimal == 0):
        return ''
    total_minutes = int(round(decimal * 60))
    hours, minutes = divmod(abs(total_minutes), 60)
    sign = '-' if total_minutes < 0 else ''
    return f"{sign}{hours:02d}:{minutes:02d}"


def time_to_decimal(time_str: Optional[str]) -> float:
    """"1:30" -> 1.5 and "1.5" -> 1.5"""
    if not time_str:
        return 0.0
    if ':' in time_str:
        hours, minutes = time_str.split(':')[:2]
        return _to_float(hours) + _to_float(minutes) / 60
    return _to_float(time_str)


def _to_float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return 0.0


# ============================================================================
# DATES
# ============================================================================

def to_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse a YYYY-MM-DD string (or pass a date through); None if malformed"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return datetime.strptime(value.strip()[:10], '%Y-%m-%d').date()
    except ValueError:
        logger.debug(f"Unparseable date {value!r}")
        return None


def to_date_str(value: Union[str, date, None]) -> Optional[str]:
    parsed = to_date(value)
    return parsed.isoformat() if parsed else None


def shift_date(date_str: str, days: int) -> str:
    """ISO date `days` calendar days after (or before) date_str"""
    return (to_date(date_str) + timedelta(days=days)).isoformat()


def utc_instant(date_str: str, time_str: Optional[str], next_day: bool = False) -> datetime:
    """UTC instant of a clock time on a calendar date"""
    day = datetime.combine(to_date(date_str), datetime.min.time())
    instant = pytz.utc.localize(day) + timedelta(minutes=parse_time_to_minutes(time_str))
    if next_day:
        instant += timedelta(days=1)
    return instant


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600
