"""Calendar-day helpers shared by the scheduling queries."""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from boxoffice.clock import Clock

# Inclusive end of a calendar day, to the millisecond
END_OF_DAY = time(23, 59, 59, 999000)


def get_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """
    Return the inclusive [00:00:00.000, 23:59:59.999] window of a calendar day.

    Args:
        day: The calendar date
        tz: Timezone the day is interpreted in

    Returns:
        Tuple of aware datetimes (start, end)
    """
    start = datetime.combine(day, time(0, 0), tzinfo=tz)
    end = datetime.combine(day, END_OF_DAY, tzinfo=tz)
    return start, end


def today(clock: Clock, tz: ZoneInfo) -> date:
    """Current calendar date in ``tz`` according to ``clock``."""
    return clock().astimezone(tz).date()


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def add_minutes(value: datetime, minutes: int) -> datetime:
    return value + timedelta(minutes=minutes)
