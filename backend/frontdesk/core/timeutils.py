from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple

from frontdesk.core.config import settings


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def clinic_day_bounds(day: date, offset_minutes: int = None) -> Tuple[datetime, datetime]:
    """
    Return the [start, end) bounds of a clinic-local calendar day as naive UTC.
    """
    if offset_minutes is None:
        offset_minutes = settings.clinic_utc_offset_minutes
    clinic_tz = timezone(timedelta(minutes=offset_minutes))
    start_local = datetime.combine(day, time.min).replace(tzinfo=clinic_tz)
    start = start_local.astimezone(timezone.utc).replace(tzinfo=None)
    return start, start + timedelta(days=1)


def clinic_today(now: datetime, offset_minutes: int = None) -> date:
    if offset_minutes is None:
        offset_minutes = settings.clinic_utc_offset_minutes
    return (now + timedelta(minutes=offset_minutes)).date()


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60


def as_utc_naive(value: datetime) -> datetime:
    """Normalize caller-supplied datetimes to the naive UTC form stored in the database."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
