"""Injectable "now" for time-window checks."""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Return the current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class FixedClock:
    """Clock that always returns the same instant."""

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant

    def __call__(self) -> datetime:
        return self.instant

    def __repr__(self) -> str:
        return f"<FixedClock({self.instant.isoformat()})>"


def get_clock() -> Clock:
    """FastAPI dependency returning the clock used by services."""
    return utcnow
