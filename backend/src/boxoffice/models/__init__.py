"""SQLAlchemy ORM models."""

from boxoffice.models.base import Base
from boxoffice.models.movie import Movie
from boxoffice.models.room import Room
from boxoffice.models.showtime_session import ShowtimeSession
from boxoffice.models.showtime_slot import ShowtimeSlot
from boxoffice.models.voucher import DiscountScope, Voucher, VoucherStatus, VoucherType

__all__ = [
    "Base",
    "Movie",
    "Room",
    "ShowtimeSession",
    "ShowtimeSlot",
    "Voucher",
    "VoucherType",
    "VoucherStatus",
    "DiscountScope",
]
