"""Unit tests for the bounded counter primitive."""

from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.dialects import postgresql

from boxoffice.models import ShowtimeSlot, Voucher
from boxoffice.services.counters import Bound, BoundedCounter, check_bounds


def compile_sql(clause) -> str:
    return str(clause.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))


def make_execute_result(row: object = None) -> MagicMock:
    r = MagicMock()
    r.scalar_one_or_none.return_value = row
    return r


class TestCheckBounds:
    def test_increment_within_upper_bound(self) -> None:
        assert check_bounds(10, 5, upper=100) is None

    def test_reaching_upper_bound_exactly_is_allowed(self) -> None:
        assert check_bounds(95, 5, upper=100) is None

    def test_exceeding_upper_bound(self) -> None:
        assert check_bounds(0, 150, upper=100) is Bound.UPPER

    def test_going_negative(self) -> None:
        assert check_bounds(2, -3, upper=100) is Bound.LOWER

    def test_down_to_zero_is_allowed(self) -> None:
        assert check_bounds(3, -3, upper=100) is None

    def test_unbounded_counter_never_hits_upper(self) -> None:
        assert check_bounds(1_000_000, 1) is None

    def test_lower_bound_checked_before_upper(self) -> None:
        assert check_bounds(0, -1, upper=-5) is Bound.LOWER

    def test_zero_delta_is_allowed(self) -> None:
        assert check_bounds(7, 0, upper=7) is None


class TestGuard:
    def test_unbounded_counter_has_only_lower_guard(self) -> None:
        counter = BoundedCounter(Voucher, Voucher.current_usage)

        clauses = counter.guard(1)

        assert len(clauses) == 1
        assert compile_sql(clauses[0]) == "vouchers.current_usage + 1 >= 0"

    def test_upper_guard_allows_null_cap(self) -> None:
        counter = BoundedCounter(Voucher, Voucher.current_usage, upper=Voucher.max_usage)

        sql = compile_sql(counter.guard(1)[1])

        assert "vouchers.max_usage IS NULL" in sql
        assert "vouchers.current_usage + 1 <= vouchers.max_usage" in sql

    def test_negative_delta_renders_subtraction(self) -> None:
        counter = BoundedCounter(ShowtimeSlot, ShowtimeSlot.booked_seats, upper=ShowtimeSlot.total_seats)

        sql = compile_sql(counter.guard(-2)[0])

        assert "showtime_slots.booked_seats" in sql
        assert ">= 0" in sql


class TestAdjust:
    async def test_returns_updated_row(self) -> None:
        slot = ShowtimeSlot(id=1, booked_seats=5, total_seats=100)
        db = AsyncMock()
        db.execute = AsyncMock(return_value=make_execute_result(slot))
        counter = BoundedCounter(ShowtimeSlot, ShowtimeSlot.booked_seats, upper=ShowtimeSlot.total_seats)

        result = await counter.adjust(db, 1, 5)

        assert result is slot
        db.execute.assert_awaited_once()

    async def test_returns_none_when_guard_rejects(self) -> None:
        db = AsyncMock()
        db.execute = AsyncMock(return_value=make_execute_result(None))
        counter = BoundedCounter(ShowtimeSlot, ShowtimeSlot.booked_seats, upper=ShowtimeSlot.total_seats)

        assert await counter.adjust(db, 1, 150) is None

    async def test_issues_single_conditional_update_with_returning(self) -> None:
        db = AsyncMock()
        db.execute = AsyncMock(return_value=make_execute_result(None))
        counter = BoundedCounter(ShowtimeSlot, ShowtimeSlot.booked_seats, upper=ShowtimeSlot.total_seats)

        await counter.adjust(db, 7, 3)

        stmt = db.execute.call_args.args[0]
        sql = compile_sql(stmt)
        assert sql.startswith("UPDATE showtime_slots SET")
        assert "showtime_slots.id = 7" in sql
        assert "showtime_slots.booked_seats + 3 <= showtime_slots.total_seats" in sql
        assert "RETURNING" in sql

    async def test_extra_values_are_written_in_same_statement(self) -> None:
        db = AsyncMock()
        db.execute = AsyncMock(return_value=make_execute_result(None))
        counter = BoundedCounter(Voucher, Voucher.current_usage, upper=Voucher.max_usage)

        await counter.adjust(db, 1, 1, priority=3)

        sql = compile_sql(db.execute.call_args.args[0])
        assert "priority=3" in sql
        assert db.execute.await_count == 1
