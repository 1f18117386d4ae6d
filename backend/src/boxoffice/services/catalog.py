"""Movie and room lookups used by scheduling, plus their plain CRUD."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.errors import ConflictError, NotFoundError
from boxoffice.models import Movie, Room

logger = logging.getLogger(__name__)


class CatalogService:
    """Service for the movie and room catalogue."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_movie(self, movie_id: int) -> Movie:
        movie = await self.db.get(Movie, movie_id)
        if movie is None:
            raise NotFoundError("Movie", movie_id)
        return movie

    async def get_room(self, room_id: int) -> Room:
        room = await self.db.get(Room, room_id)
        if room is None:
            raise NotFoundError("Room", room_id)
        return room

    async def list_movies(self) -> list[Movie]:
        result = await self.db.execute(select(Movie).order_by(Movie.title))
        return list(result.scalars().all())

    async def list_rooms(self, active_only: bool = False) -> list[Room]:
        query = select(Room).order_by(Room.name)
        if active_only:
            query = query.where(Room.is_active.is_(True))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_movie(self, data: dict[str, Any]) -> Movie:
        movie = Movie(**data)
        self.db.add(movie)
        await self.db.flush()
        await self.db.refresh(movie)
        logger.info(f"Created movie {movie.id}: {movie.title!r} ({movie.duration} min)")
        return movie

    async def create_room(self, data: dict[str, Any]) -> Room:
        """
        Create a room.

        Raises:
            ConflictError: If a room with the same name already exists
        """
        existing = await self.db.execute(select(Room).where(Room.name == data["name"]))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("Room with this name already exists")

        room = Room(**{"is_active": True, **data})
        self.db.add(room)
        await self.db.flush()
        await self.db.refresh(room)
        logger.info(f"Created room {room.id}: {room.name!r} (capacity {room.capacity})")
        return room
