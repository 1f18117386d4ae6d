"""Room model. Slots snapshot its capacity at creation time."""

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from boxoffice.models.base import Base, TimestampMixin


class Room(Base, TimestampMixin):
    """Screening room."""

    __tablename__ = "rooms"
    __table_args__ = (CheckConstraint("capacity >= 0", name="ck_rooms_capacity_non_negative"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    room_type: Mapped[str | None] = mapped_column(String(10), nullable=True)  # "Standard", "IMAX", "VIP"
    floor: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Room(id={self.id!r}, name={self.name!r}, capacity={self.capacity})>"
