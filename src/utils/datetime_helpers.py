"""
Standardized Date/Time Handling Utilities

The whole group lives on one reference timezone (REMINDER_TIMEZONE):
- "today" for completions, undo and streaks is the calendar day there
- reminder trigger instants are wall-clock times there

RULES:
- Timestamps stored in the DB are timezone-aware (TIMESTAMPTZ)
- Day keys are plain dates in the reference timezone
- Never mix naive and aware datetimes
"""

import logging
from datetime import datetime, date, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from src.config import REMINDER_TIMEZONE

logger = logging.getLogger(__name__)


def reference_timezone() -> ZoneInfo:
    """Timezone that defines calendar days for the whole group"""
    return ZoneInfo(REMINDER_TIMEZONE)


def now_utc() -> datetime:
    """
    Get current datetime in UTC (timezone-aware)

    Returns:
        Current datetime in UTC with timezone info
    """
    return datetime.now(ZoneInfo("UTC"))


def now_local(tz: Optional[ZoneInfo] = None) -> datetime:
    """Current datetime in the reference timezone"""
    return now_utc().astimezone(tz or reference_timezone())


def today_local(tz: Optional[ZoneInfo] = None) -> date:
    """
    Today's calendar day in the reference timezone

    Every day-keyed operation (mark, undo, streak) uses this as "today".
    """
    return now_local(tz).date()


def yesterday_local(tz: Optional[ZoneInfo] = None) -> date:
    """Calendar day before today in the reference timezone"""
    return today_local(tz) - timedelta(days=1)


def days_back(start: date, count: int) -> list[date]:
    """``count`` consecutive days ending at ``start``, newest first"""
    return [start - timedelta(days=offset) for offset in range(count)]
