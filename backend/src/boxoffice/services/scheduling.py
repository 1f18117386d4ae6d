"""Showtime scheduling: sessions, slots, time conflicts and seat occupancy."""

import logging
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from boxoffice.clock import Clock, utcnow
from boxoffice.config import settings
from boxoffice.errors import (
    BadRequestError,
    CapacityExceededError,
    ConflictError,
    NotFoundError,
)
from boxoffice.models import ShowtimeSession, ShowtimeSlot
from boxoffice.services.catalog import CatalogService
from boxoffice.services.counters import Bound, BoundedCounter, check_bounds
from boxoffice.utils.timeutils import add_minutes, day_bounds, ensure_aware, get_zone, today

logger = logging.getLogger(__name__)


def overlaps(
    start_a: datetime,
    end_a: datetime,
    start_b: datetime,
    end_b: datetime,
) -> bool:
    """Half-open interval overlap: [a) and [b) share at least one instant."""
    return start_a < end_b and end_a > start_b


def compute_end_time(start_time: datetime, duration_minutes: int, buffer_minutes: int) -> datetime:
    """End of a screening: runtime plus the cleaning/turnover buffer."""
    return add_minutes(start_time, duration_minutes + buffer_minutes)


def find_conflict(
    slots: Iterable[ShowtimeSlot],
    start_time: datetime,
    end_time: datetime,
    exclude_slot_id: int | None = None,
) -> ShowtimeSlot | None:
    """
    Return the first active slot whose window overlaps [start_time, end_time).

    Back-to-back slots (one ends exactly when the other starts) do not
    conflict. ``exclude_slot_id`` skips the slot being rescheduled.
    """
    for slot in slots:
        if exclude_slot_id is not None and slot.id == exclude_slot_id:
            continue
        if not slot.is_active:
            continue
        if overlaps(slot.start_time, slot.end_time, start_time, end_time):
            return slot
    return None


class ShowtimeScheduler:
    """
    Service owning showtime sessions and their slots.

    Slot creation is serialized per session by locking the session row, so two
    concurrent requests cannot both pass the conflict scan for the same room.
    Seat counts only change through ``update_booked_seats``.
    """

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock = utcnow,
        buffer_minutes: int | None = None,
        tz: ZoneInfo | None = None,
    ) -> None:
        self.db = db
        self.clock = clock
        self.buffer_minutes = (
            settings.slot_buffer_minutes if buffer_minutes is None else buffer_minutes
        )
        self.tz = tz or get_zone(settings.timezone)
        self.catalog = CatalogService(db)
        self.seats = BoundedCounter(
            ShowtimeSlot,
            ShowtimeSlot.booked_seats,
            upper=ShowtimeSlot.total_seats,
        )

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def create_session(self, data: dict[str, Any]) -> ShowtimeSession:
        """
        Create a showtime session.

        Raises:
            ConflictError: If a session with the same name and date exists
        """
        existing = await self.db.execute(
            select(ShowtimeSession).where(
                ShowtimeSession.name == data["name"],
                ShowtimeSession.date == data["date"],
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("Session with this name and date already exists")

        values = dict(data)
        if values.get("is_active") is None:
            values["is_active"] = True
        session = ShowtimeSession(**values)
        self.db.add(session)
        await self.db.flush()
        await self.db.refresh(session)
        logger.info(f"Created session {session.id}: {session.name!r} on {session.date}")
        return session

    async def list_sessions(self) -> list[ShowtimeSession]:
        query = (
            select(ShowtimeSession)
            .options(selectinload(ShowtimeSession.slots))
            .order_by(ShowtimeSession.date.desc(), ShowtimeSession.start_time)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_sessions_by_date(self, day: date) -> list[ShowtimeSession]:
        query = (
            select(ShowtimeSession)
            .options(selectinload(ShowtimeSession.slots))
            .where(ShowtimeSession.date == day, ShowtimeSession.is_active.is_(True))
            .order_by(ShowtimeSession.start_time)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_active_sessions(self) -> list[ShowtimeSession]:
        """Active sessions dated today or later."""
        query = (
            select(ShowtimeSession)
            .options(selectinload(ShowtimeSession.slots))
            .where(
                ShowtimeSession.is_active.is_(True),
                ShowtimeSession.date >= today(self.clock, self.tz),
            )
            .order_by(ShowtimeSession.date, ShowtimeSession.start_time)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_session(self, session_id: int) -> ShowtimeSession:
        query = (
            select(ShowtimeSession)
            .options(selectinload(ShowtimeSession.slots))
            .where(ShowtimeSession.id == session_id)
        )
        result = await self.db.execute(query)
        session = result.scalar_one_or_none()
        if session is None:
            raise NotFoundError("Session", session_id)
        return session

    async def remove_session(self, session_id: int) -> None:
        """
        Delete a session that no longer owns any slots.

        Raises:
            NotFoundError: If the session does not exist
            ConflictError: If slots still reference the session
        """
        session = await self.get_session(session_id)
        if session.slots:
            raise ConflictError(
                f"Session {session_id} still has {len(session.slots)} slot(s); remove them first"
            )
        await self.db.delete(session)
        await self.db.flush()
        logger.info(f"Removed session {session_id}")

    async def get_sessions_with_slots(self, day: date | None = None) -> list[ShowtimeSession]:
        """
        Active sessions with their slots nested.

        Ordered by session date, session start time, then slot start time.
        """
        query = (
            select(ShowtimeSession)
            .options(selectinload(ShowtimeSession.slots))
            .where(ShowtimeSession.is_active.is_(True))
            .order_by(ShowtimeSession.date, ShowtimeSession.start_time)
        )
        if day is not None:
            query = query.where(ShowtimeSession.date == day)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    async def create_slot(self, data: dict[str, Any]) -> ShowtimeSlot:
        """
        Schedule a movie in a room within a session.

        Args:
            data: ``session_id``, ``movie_id``, ``room_id``, ``start_time`` and
                optional ``base_price``, ``notes``, ``is_active``

        Returns:
            The new slot with ``booked_seats`` at 0

        Raises:
            NotFoundError: If the movie, room or session does not exist
            ConflictError: If the room is already booked in an overlapping slot
        """
        session_id = data["session_id"]
        room_id = data["room_id"]

        movie = await self.catalog.get_movie(data["movie_id"])
        room = await self.catalog.get_room(room_id)

        start_time = ensure_aware(data["start_time"])
        end_time = compute_end_time(start_time, movie.duration, self.buffer_minutes)

        await self._lock_session(session_id)
        await self.check_time_conflict(room_id, session_id, start_time, end_time)

        is_active = data.get("is_active")
        slot = ShowtimeSlot(
            session_id=session_id,
            movie_id=movie.id,
            room_id=room.id,
            start_time=start_time,
            end_time=end_time,
            base_price=data.get("base_price") or Decimal("0"),
            booked_seats=0,
            total_seats=room.capacity,
            is_active=True if is_active is None else is_active,
            notes=data.get("notes"),
        )
        self.db.add(slot)
        await self.db.flush()
        await self.db.refresh(slot)
        logger.info(
            f"Created slot {slot.id}: movie {movie.id} in room {room.id} "
            f"{start_time.isoformat()} -> {end_time.isoformat()} ({room.capacity} seats)"
        )
        return slot

    async def _lock_session(self, session_id: int) -> None:
        """Take a row lock on the session for the rest of the transaction."""
        result = await self.db.execute(
            select(ShowtimeSession.id)
            .where(ShowtimeSession.id == session_id)
            .with_for_update()
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Session", session_id)

    async def check_time_conflict(
        self,
        room_id: int,
        session_id: int,
        start_time: datetime,
        end_time: datetime,
        exclude_slot_id: int | None = None,
    ) -> None:
        """
        Reject a window that overlaps an active slot in the same room and session.

        Raises:
            ConflictError: If an overlapping slot exists
        """
        result = await self.db.execute(
            select(ShowtimeSlot).where(
                ShowtimeSlot.room_id == room_id,
                ShowtimeSlot.session_id == session_id,
                ShowtimeSlot.is_active.is_(True),
            )
        )
        conflict = find_conflict(
            result.scalars().all(),
            start_time,
            end_time,
            exclude_slot_id=exclude_slot_id,
        )
        if conflict is not None:
            logger.warning(
                f"Slot conflict in room {room_id}, session {session_id}: "
                f"{start_time.isoformat()}-{end_time.isoformat()} overlaps slot {conflict.id}"
            )
            raise ConflictError(
                f"Time conflict detected. Room {room_id} is already booked "
                f"during this time period."
            )

    async def find_slots_by_session(self, session_id: int) -> list[ShowtimeSlot]:
        query = (
            select(ShowtimeSlot)
            .where(ShowtimeSlot.session_id == session_id, ShowtimeSlot.is_active.is_(True))
            .order_by(ShowtimeSlot.start_time)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_slots_by_movie_and_date(self, movie_id: int, day: date) -> list[ShowtimeSlot]:
        start_of_day, end_of_day = day_bounds(day, self.tz)
        query = (
            select(ShowtimeSlot)
            .where(
                ShowtimeSlot.movie_id == movie_id,
                ShowtimeSlot.start_time >= start_of_day,
                ShowtimeSlot.start_time <= end_of_day,
                ShowtimeSlot.is_active.is_(True),
            )
            .order_by(ShowtimeSlot.start_time)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_available(
        self,
        movie_id: int | None = None,
        day: date | None = None,
    ) -> list[ShowtimeSlot]:
        """
        Upcoming active slots that still have free seats, earliest first.

        Args:
            movie_id: Only slots screening this movie
            day: Only slots starting on this calendar date
        """
        query = select(ShowtimeSlot).where(
            ShowtimeSlot.start_time > self.clock(),
            ShowtimeSlot.is_active.is_(True),
            ShowtimeSlot.booked_seats < ShowtimeSlot.total_seats,
        )
        if movie_id is not None:
            query = query.where(ShowtimeSlot.movie_id == movie_id)
        if day is not None:
            start_of_day, end_of_day = day_bounds(day, self.tz)
            query = query.where(
                ShowtimeSlot.start_time >= start_of_day,
                ShowtimeSlot.start_time <= end_of_day,
            )
        result = await self.db.execute(query.order_by(ShowtimeSlot.start_time))
        return list(result.scalars().all())

    async def get_slot(self, slot_id: int) -> ShowtimeSlot:
        slot = await self.db.get(ShowtimeSlot, slot_id, populate_existing=True)
        if slot is None:
            raise NotFoundError("Showtime slot", slot_id)
        return slot

    async def update_booked_seats(self, slot_id: int, delta: int) -> ShowtimeSlot:
        """
        Book (positive delta) or release (negative delta) seats on a slot.

        Raises:
            NotFoundError: If the slot does not exist
            BadRequestError: If booked seats would go negative
            CapacityExceededError: If booked seats would exceed total seats
            ConflictError: If the counter moved between the update and the re-read
        """
        slot = await self.seats.adjust(self.db, slot_id, delta)
        if slot is not None:
            logger.info(
                f"Slot {slot_id} booked seats {delta:+d} -> {slot.booked_seats}/{slot.total_seats}"
            )
            return slot

        current = await self.get_slot(slot_id)
        violated = check_bounds(current.booked_seats, delta, current.total_seats)
        logger.warning(
            f"Rejected seat update {delta:+d} on slot {slot_id} "
            f"({current.booked_seats}/{current.total_seats})"
        )
        if violated is Bound.LOWER:
            raise BadRequestError("Booked seats cannot be negative")
        if violated is Bound.UPPER:
            raise CapacityExceededError("Cannot exceed total seats capacity")
        raise ConflictError(f"Booked seats for slot {slot_id} changed concurrently, please retry")

    async def remove_slot(self, slot_id: int) -> None:
        slot = await self.get_slot(slot_id)
        await self.db.delete(slot)
        await self.db.flush()
        logger.info(f"Removed slot {slot_id}")
