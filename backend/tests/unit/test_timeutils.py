"""Unit tests for calendar-day helpers and the injectable clock."""

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from boxoffice.clock import FixedClock, utcnow
from boxoffice.utils.timeutils import END_OF_DAY, add_minutes, day_bounds, ensure_aware, today

UTC = timezone.utc
LONDON_TZ = ZoneInfo("Europe/London")


class TestDayBounds:
    def test_utc_day(self) -> None:
        start, end = day_bounds(date(2025, 7, 5), ZoneInfo("UTC"))

        assert start == datetime(2025, 7, 5, 0, 0, tzinfo=UTC)
        assert end == datetime(2025, 7, 5, 23, 59, 59, 999000, tzinfo=UTC)

    def test_end_is_last_millisecond(self) -> None:
        assert END_OF_DAY == time(23, 59, 59, 999000)

    def test_local_day_is_shifted_from_utc(self) -> None:
        start, _ = day_bounds(date(2025, 7, 5), LONDON_TZ)

        # BST is UTC+1 in July
        assert start.astimezone(UTC) == datetime(2025, 7, 4, 23, 0, tzinfo=UTC)


class TestToday:
    def test_uses_clock(self) -> None:
        clock = FixedClock(datetime(2025, 7, 5, 12, 0, tzinfo=UTC))
        assert today(clock, ZoneInfo("UTC")) == date(2025, 7, 5)

    def test_late_utc_evening_is_next_day_in_london(self) -> None:
        clock = FixedClock(datetime(2025, 7, 5, 23, 30, tzinfo=UTC))
        assert today(clock, LONDON_TZ) == date(2025, 7, 6)


class TestEnsureAware:
    def test_naive_is_utc(self) -> None:
        assert ensure_aware(datetime(2025, 7, 5, 9, 0)) == datetime(2025, 7, 5, 9, 0, tzinfo=UTC)

    def test_aware_is_unchanged(self) -> None:
        value = datetime(2025, 7, 5, 9, 0, tzinfo=LONDON_TZ)
        assert ensure_aware(value) is value


class TestAddMinutes:
    def test_adds_minutes(self) -> None:
        value = datetime(2025, 7, 5, 9, 0, tzinfo=UTC)
        assert add_minutes(value, 120) == datetime(2025, 7, 5, 11, 0, tzinfo=UTC)


class TestClock:
    def test_utcnow_is_aware(self) -> None:
        assert utcnow().tzinfo is not None

    def test_fixed_clock_returns_same_instant(self) -> None:
        instant = datetime(2025, 7, 5, 9, 0, tzinfo=UTC)
        clock = FixedClock(instant)
        assert clock() == instant
        assert clock() == instant

    def test_fixed_clock_assumes_utc_for_naive(self) -> None:
        clock = FixedClock(datetime(2025, 7, 5, 9, 0))
        assert clock() == datetime(2025, 7, 5, 9, 0, tzinfo=UTC)
