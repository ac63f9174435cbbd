"""Reset instants for rate limit windows.

Windows close at the end of the current day, week (Sunday) or month, or at
the top of the next hour. All datetimes are timezone-aware UTC.
"""

import calendar
from datetime import datetime, time, timedelta, timezone

from application.models import Period

_END_OF_DAY = time(23, 59, 59, 999999)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def reset_time(period: Period, now: datetime) -> datetime:
    """Instant at which a window opened at `now` expires."""
    if period is Period.HOUR:
        return now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
    if period is Period.WEEK:
        days_until_sunday = 6 - now.weekday()
        return _end_of_day(now + timedelta(days=days_until_sunday))
    if period is Period.MONTH:
        last_day = calendar.monthrange(now.year, now.month)[1]
        return _end_of_day(now.replace(day=last_day))
    return _end_of_day(now)


def _end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), _END_OF_DAY, tzinfo=moment.tzinfo or timezone.utc)
