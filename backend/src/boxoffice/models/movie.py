"""Movie model. Slots read its duration to compute end times."""

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from boxoffice.models.base import Base, TimestampMixin


class Movie(Base, TimestampMixin):
    """
    Movie model.

    Only ``duration`` (minutes) matters to scheduling; the rest is catalogue data.
    """

    __tablename__ = "movies"
    __table_args__ = (CheckConstraint("duration > 0", name="ck_movies_duration_positive"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    director: Mapped[str | None] = mapped_column(String(100), nullable=True)
    genre: Mapped[list[str] | None] = mapped_column(ARRAY(String), nullable=True)
    rating: Mapped[Decimal | None] = mapped_column(Numeric(3, 1), nullable=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    release_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    poster_url: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Movie(id={self.id!r}, title={self.title!r}, duration={self.duration})>"
