"""Bounded counters updated with a single conditional UPDATE.

Seat occupancy and voucher usage are both "non-negative integer, optionally
capped by another column on the same row". Reading the row, checking the bound
in Python and saving it back loses updates when two requests race, so the
bound is evaluated by the database inside the UPDATE itself:

    UPDATE t SET n = n + :delta
    WHERE id = :id AND n + :delta >= 0 AND (cap IS NULL OR n + :delta <= cap)
    RETURNING *

No returned row means the row is missing or the bound would be violated;
``check_bounds`` is the same rule in plain Python, used to explain a rejection.
"""

import logging
from enum import Enum
from typing import Any

from sqlalchemy import ColumnElement, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from boxoffice.models.base import Base

logger = logging.getLogger(__name__)


class Bound(Enum):
    """Which side of a counter's range an adjustment would cross."""

    LOWER = "lower"
    UPPER = "upper"


def check_bounds(current: int, delta: int, upper: int | None = None) -> Bound | None:
    """
    Check whether ``current + delta`` stays inside ``[0, upper]``.

    Args:
        current: Current counter value
        delta: Signed adjustment
        upper: Inclusive upper bound, or None for unbounded

    Returns:
        The violated bound, or None if the adjustment is allowed
    """
    new_value = current + delta
    if new_value < 0:
        return Bound.LOWER
    if upper is not None and new_value > upper:
        return Bound.UPPER
    return None


class BoundedCounter:
    """A non-negative integer column with an optional upper-bound column."""

    def __init__(
        self,
        model: type[Base],
        column: InstrumentedAttribute[int],
        upper: InstrumentedAttribute[Any] | None = None,
    ) -> None:
        self.model = model
        self.column = column
        self.upper = upper

    def guard(self, delta: int) -> list[ColumnElement[bool]]:
        """SQL predicates that hold when ``column + delta`` is within bounds."""
        new_value = self.column + delta
        clauses: list[ColumnElement[bool]] = [new_value >= 0]
        if self.upper is not None:
            clauses.append(or_(self.upper.is_(None), new_value <= self.upper))
        return clauses

    async def adjust(
        self,
        db: AsyncSession,
        row_id: int,
        delta: int,
        **values: Any,
    ) -> Any | None:
        """
        Atomically add ``delta`` to the counter of one row.

        Extra ``values`` are written in the same statement; SQL expressions in
        them see the row's pre-update column values.

        Returns:
            The updated ORM object, or None if no row matched
        """
        stmt = (
            update(self.model)
            .where(self.model.id == row_id, *self.guard(delta))
            .values({self.column.key: self.column + delta, **values})
            .returning(self.model)
            .execution_options(populate_existing=True, synchronize_session=False)
        )
        result = await db.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            logger.debug(
                f"Counter {self.model.__tablename__}.{self.column.key} "
                f"rejected delta {delta:+d} for id={row_id}"
            )
        return row
