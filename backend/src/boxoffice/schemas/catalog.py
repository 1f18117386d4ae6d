"""Pydantic schemas for movies and rooms."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class MovieCreate(BaseModel):
    """Request body for creating a movie."""

    title: str = Field(min_length=1, max_length=255)
    duration: int = Field(gt=0, description="Runtime in minutes")
    description: str | None = None
    director: str | None = Field(default=None, max_length=100)
    genre: list[str] | None = None
    rating: float | None = Field(default=None, ge=0, le=10)
    release_date: date | None = None
    poster_url: str | None = Field(default=None, max_length=255)


class MovieResponse(BaseModel):
    """Movie response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    duration: int
    description: str | None = None
    director: str | None = None
    genre: list[str] | None = None
    rating: float | None = None
    release_date: date | None = None
    poster_url: str | None = None


class RoomCreate(BaseModel):
    """Request body for creating a room."""

    name: str = Field(min_length=1, max_length=100)
    capacity: int = Field(ge=0)
    room_type: str | None = Field(default=None, max_length=10)
    floor: int | None = None
    description: str | None = None
    is_active: bool = True


class RoomResponse(BaseModel):
    """Room response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    capacity: int
    room_type: str | None = None
    floor: int | None = None
    description: str | None = None
    is_active: bool
