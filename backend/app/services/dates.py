from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.env import ReadEnv

FALLBACK_TIMEZONE = "UTC"


def NowUtc() -> datetime:
    return datetime.now(tz=timezone.utc)


def EnsureUtc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive values; everything is stored as UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def DefaultTimezoneName() -> str:
    return ReadEnv("DEFAULT_TIMEZONE", FALLBACK_TIMEZONE)


def IsValidTimezone(value: str | None) -> bool:
    if not value:
        return False
    try:
        ZoneInfo(value)
        return True
    except (ZoneInfoNotFoundError, ValueError):
        return False


def ResolveTimezone(*candidates: str | None) -> ZoneInfo:
    for value in (*candidates, DefaultTimezoneName()):
        if IsValidTimezone(value):
            return ZoneInfo(value)
    return ZoneInfo(FALLBACK_TIMEZONE)


def LocalDayStartUtc(now: datetime, tz: ZoneInfo) -> datetime:
    """Return local midnight of ``now``'s calendar day in ``tz``, expressed in UTC."""
    local_now = EnsureUtc(now).astimezone(tz)
    local_midnight = datetime.combine(local_now.date(), time.min, tzinfo=tz)
    return local_midnight.astimezone(timezone.utc)


def ElapsedSeconds(started_at: datetime | None, completed_at: datetime) -> int:
    if started_at is None:
        return 0
    elapsed_ms = (EnsureUtc(completed_at) - EnsureUtc(started_at)) // timedelta(milliseconds=1)
    return max(elapsed_ms // 1000, 0)
