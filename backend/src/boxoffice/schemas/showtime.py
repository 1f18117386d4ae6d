"""Pydantic schemas for showtime sessions and slots."""

from datetime import date, datetime, time
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SessionCreate(BaseModel):
    """Request body for creating a showtime session."""

    name: str = Field(min_length=1, max_length=100, examples=["Morning Session"])
    date: date
    start_time: time = Field(examples=["09:00"])
    end_time: time = Field(examples=["12:00"])
    description: str | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def check_window(self) -> "SessionCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class SlotCreate(BaseModel):
    """Request body for creating a showtime slot."""

    session_id: int
    movie_id: int
    room_id: int
    start_time: datetime = Field(examples=["2025-07-05T09:30:00.000Z"])
    base_price: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None
    is_active: bool | None = None


class BookSeatsRequest(BaseModel):
    """Seats to add (booking) or subtract (cancellation) on a slot."""

    increment: int


class SlotResponse(BaseModel):
    """Showtime slot response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    movie_id: int
    room_id: int
    start_time: datetime
    end_time: datetime
    base_price: float
    booked_seats: int
    total_seats: int
    is_active: bool
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Derived from the seat counters
    available_seats: int
    is_fully_booked: bool


class SessionResponse(BaseModel):
    """Showtime session response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    date: date
    start_time: time
    end_time: time
    description: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SessionWithSlots(SessionResponse):
    """Session with its slots nested, earliest slot first."""

    slots: list[SlotResponse]
