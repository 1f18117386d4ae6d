"""Seed script to populate initial rooms and movies."""

import asyncio
from datetime import date
from decimal import Decimal

from sqlalchemy import select

from boxoffice.database import AsyncSessionLocal
from boxoffice.models import Movie, Room

ROOMS = [
    {"name": "Screen 1", "capacity": 120, "room_type": "Standard", "floor": 1},
    {"name": "Screen 2", "capacity": 80, "room_type": "Standard", "floor": 1},
    {"name": "IMAX", "capacity": 250, "room_type": "IMAX", "floor": 2},
    {"name": "Lounge", "capacity": 24, "room_type": "VIP", "floor": 2},
]

MOVIES = [
    {
        "title": "Inception",
        "director": "Christopher Nolan",
        "genre": ["Sci-Fi", "Thriller"],
        "rating": Decimal("8.8"),
        "duration": 148,
        "release_date": date(2010, 7, 16),
    },
    {
        "title": "Spirited Away",
        "director": "Hayao Miyazaki",
        "genre": ["Animation", "Fantasy"],
        "rating": Decimal("8.6"),
        "duration": 125,
        "release_date": date(2001, 7, 20),
    },
    {
        "title": "Paddington 2",
        "director": "Paul King",
        "genre": ["Family", "Comedy"],
        "rating": Decimal("7.8"),
        "duration": 103,
        "release_date": date(2017, 11, 10),
    },
]


async def seed_catalog() -> None:
    """Seed the database with rooms and movies, skipping ones that already exist."""
    async with AsyncSessionLocal() as session:
        for room_data in ROOMS:
            result = await session.execute(select(Room).where(Room.name == room_data["name"]))
            if result.scalar_one_or_none():
                print(f"Room {room_data['name']} already exists, skipping")
                continue
            session.add(Room(**room_data))
            print(f"Added room: {room_data['name']} ({room_data['capacity']} seats)")

        for movie_data in MOVIES:
            result = await session.execute(select(Movie).where(Movie.title == movie_data["title"]))
            if result.scalars().first():
                print(f"Movie {movie_data['title']} already exists, skipping")
                continue
            session.add(Movie(**movie_data))
            print(f"Added movie: {movie_data['title']}")

        await session.commit()
        print("Catalog seeding complete")


if __name__ == "__main__":
    asyncio.run(seed_catalog())
