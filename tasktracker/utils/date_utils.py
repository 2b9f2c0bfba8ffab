from datetime import date, datetime, time, timedelta, timezone
from typing import List


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_utc_day(value: datetime) -> datetime:
    return datetime.combine(as_utc(value).date(), time.min, tzinfo=timezone.utc)


def last_utc_days(now: datetime, days: int) -> List[date]:
    """The ``days`` UTC calendar days ending today, oldest first."""
    today = as_utc(now).date()
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
