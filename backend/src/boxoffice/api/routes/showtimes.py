"""Showtime session and slot API endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response

from boxoffice.models import ShowtimeSession, ShowtimeSlot
from boxoffice.schemas import (
    BookSeatsRequest,
    SessionCreate,
    SessionResponse,
    SessionWithSlots,
    SlotCreate,
    SlotResponse,
)
from boxoffice.services import ShowtimeScheduler, get_scheduler

router = APIRouter(prefix="/showtimes")


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(
    request: SessionCreate,
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> ShowtimeSession:
    """Create a session. Returns 409 if the name is already used on that date."""
    return await scheduler.create_session(request.model_dump())


@router.get("/sessions", response_model=list[SessionWithSlots])
async def get_sessions(
    date_param: date | None = Query(None, alias="date", description="Filter by date (YYYY-MM-DD)"),
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> list[ShowtimeSession]:
    """
    Active sessions with their slots.

    Ordered by date, session start time and slot start time.
    """
    return await scheduler.get_sessions_with_slots(date_param)


@router.get("/sessions/all", response_model=list[SessionWithSlots])
async def list_all_sessions(
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> list[ShowtimeSession]:
    return await scheduler.list_sessions()


@router.get("/sessions/active", response_model=list[SessionWithSlots])
async def get_active_sessions(
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> list[ShowtimeSession]:
    return await scheduler.find_active_sessions()


@router.get("/sessions/date/{day}", response_model=list[SessionWithSlots])
async def get_sessions_by_date(
    day: date,
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> list[ShowtimeSession]:
    return await scheduler.find_sessions_by_date(day)


@router.get("/sessions/{session_id}", response_model=SessionWithSlots)
async def get_session(
    session_id: int,
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> ShowtimeSession:
    return await scheduler.get_session(session_id)


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(
    session_id: int,
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> Response:
    """Delete a session. Returns 409 while it still has slots."""
    await scheduler.remove_session(session_id)
    return Response(status_code=204)


@router.get("/sessions/{session_id}/slots", response_model=list[SlotResponse])
async def get_slots_by_session(
    session_id: int,
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> list[ShowtimeSlot]:
    return await scheduler.find_slots_by_session(session_id)


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------


@router.post("/slots", response_model=SlotResponse, status_code=201)
async def create_slot(
    request: SlotCreate,
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> ShowtimeSlot:
    """
    Schedule a slot.

    The end time is the movie's runtime plus the turnover buffer, and the seat
    count is copied from the room. Returns 404 for an unknown movie, room or
    session and 409 when the room is already booked in an overlapping slot.
    """
    return await scheduler.create_slot(request.model_dump())


@router.get("/slots/available", response_model=list[SlotResponse])
async def get_available_slots(
    movie_id: int | None = Query(None, description="Filter by movie ID"),
    date_param: date | None = Query(None, alias="date", description="Filter by date (YYYY-MM-DD)"),
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> list[ShowtimeSlot]:
    """Upcoming active slots with free seats, earliest first."""
    return await scheduler.find_available(movie_id=movie_id, day=date_param)


@router.get("/slots/movie/{movie_id}", response_model=list[SlotResponse])
async def get_slots_by_movie_and_date(
    movie_id: int,
    date_param: date = Query(..., alias="date", description="Date to search (YYYY-MM-DD)"),
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> list[ShowtimeSlot]:
    return await scheduler.find_slots_by_movie_and_date(movie_id, date_param)


@router.get("/slots/{slot_id}", response_model=SlotResponse)
async def get_slot(
    slot_id: int,
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> ShowtimeSlot:
    return await scheduler.get_slot(slot_id)


@router.delete("/slots/{slot_id}", status_code=204)
async def delete_slot(
    slot_id: int,
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> Response:
    await scheduler.remove_slot(slot_id)
    return Response(status_code=204)


@router.post("/slots/{slot_id}/book", response_model=SlotResponse)
async def update_booked_seats(
    slot_id: int,
    request: BookSeatsRequest,
    scheduler: ShowtimeScheduler = Depends(get_scheduler),
) -> ShowtimeSlot:
    """
    Add or remove booked seats.

    A positive increment books seats, a negative one releases them. Returns
    400 with code CAPACITY_EXCEEDED past the room capacity and BAD_REQUEST
    below zero.
    """
    return await scheduler.update_booked_seats(slot_id, request.increment)
