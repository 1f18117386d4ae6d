"""Showtime session model: a named time window on one calendar date."""

import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, String, Text, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boxoffice.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from boxoffice.models.showtime_slot import ShowtimeSlot


class ShowtimeSession(Base, TimestampMixin):
    """
    Showtime session model ("Morning Session" on 2025-07-05, 09:00-12:00).

    Groups the slots that are checked against each other for room/time
    conflicts. Slots are not deleted along with their session.
    """

    __tablename__ = "showtime_sessions"
    __table_args__ = (UniqueConstraint("name", "date", name="uq_session_name_date"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[datetime.time] = mapped_column(Time, nullable=False)
    end_time: Mapped[datetime.time] = mapped_column(Time, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    # Relationships
    slots: Mapped[list["ShowtimeSlot"]] = relationship(
        back_populates="session",
        order_by="ShowtimeSlot.start_time",
    )

    def __repr__(self) -> str:
        return f"<ShowtimeSession(id={self.id!r}, name={self.name!r}, date={self.date})>"
