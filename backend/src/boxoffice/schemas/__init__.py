"""Pydantic schemas for API requests and responses."""

from boxoffice.schemas.catalog import MovieCreate, MovieResponse, RoomCreate, RoomResponse
from boxoffice.schemas.showtime import (
    BookSeatsRequest,
    SessionCreate,
    SessionResponse,
    SessionWithSlots,
    SlotCreate,
    SlotResponse,
)
from boxoffice.schemas.voucher import (
    VoucherCreate,
    VoucherResponse,
    VoucherUpdate,
    VoucherUsageStats,
    VoucherValidateRequest,
    VoucherValidationResponse,
)

__all__ = [
    "MovieCreate",
    "MovieResponse",
    "RoomCreate",
    "RoomResponse",
    "SessionCreate",
    "SessionResponse",
    "SessionWithSlots",
    "SlotCreate",
    "SlotResponse",
    "BookSeatsRequest",
    "VoucherCreate",
    "VoucherUpdate",
    "VoucherResponse",
    "VoucherValidateRequest",
    "VoucherValidationResponse",
    "VoucherUsageStats",
]
