"""Showtime slot model: one concrete screening with its own seat counter."""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boxoffice.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from boxoffice.models.movie import Movie
    from boxoffice.models.room import Room
    from boxoffice.models.showtime_session import ShowtimeSession


class ShowtimeSlot(Base, TimestampMixin):
    """
    Showtime slot model.

    ``end_time`` is derived from the movie's duration plus the buffer, and
    ``total_seats`` is copied from the room when the slot is created; resizing
    the room later does not change existing slots.
    """

    __tablename__ = "showtime_slots"
    __table_args__ = (
        # Inactive slots may share a start time with the active one that replaced them
        Index(
            "uq_slot_session_room_start",
            "session_id",
            "room_id",
            "start_time",
            unique=True,
            postgresql_where=text("is_active"),
        ),
        CheckConstraint("booked_seats >= 0", name="ck_slots_booked_non_negative"),
        CheckConstraint("booked_seats <= total_seats", name="ck_slots_booked_within_total"),
        CheckConstraint("end_time > start_time", name="ck_slots_end_after_start"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Foreign keys
    session_id: Mapped[int] = mapped_column(
        ForeignKey("showtime_sessions.id"),
        nullable=False,
        index=True,
    )
    movie_id: Mapped[int] = mapped_column(ForeignKey("movies.id"), nullable=False, index=True)
    room_id: Mapped[int] = mapped_column(ForeignKey("rooms.id"), nullable=False, index=True)

    # Screening window
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0, nullable=False)

    # Seat occupancy
    booked_seats: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_seats: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    session: Mapped["ShowtimeSession"] = relationship(back_populates="slots")
    movie: Mapped["Movie"] = relationship()
    room: Mapped["Room"] = relationship()

    @property
    def available_seats(self) -> int:
        return self.total_seats - self.booked_seats

    @property
    def is_fully_booked(self) -> bool:
        return self.booked_seats >= self.total_seats

    def __repr__(self) -> str:
        return (
            f"<ShowtimeSlot(id={self.id!r}, "
            f"room_id={self.room_id!r}, "
            f"start_time={self.start_time}, "
            f"booked={self.booked_seats}/{self.total_seats})>"
        )
