"""Movie and room API endpoints."""

from fastapi import APIRouter, Depends, Query

from boxoffice.models import Movie, Room
from boxoffice.schemas import MovieCreate, MovieResponse, RoomCreate, RoomResponse
from boxoffice.services import CatalogService, get_catalog_service

router = APIRouter()


@router.post("/movies", response_model=MovieResponse, status_code=201)
async def create_movie(
    request: MovieCreate,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Movie:
    return await catalog.create_movie(request.model_dump())


@router.get("/movies", response_model=list[MovieResponse])
async def list_movies(catalog: CatalogService = Depends(get_catalog_service)) -> list[Movie]:
    return await catalog.list_movies()


@router.get("/movies/{movie_id}", response_model=MovieResponse)
async def get_movie(
    movie_id: int,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Movie:
    return await catalog.get_movie(movie_id)


@router.post("/rooms", response_model=RoomResponse, status_code=201)
async def create_room(
    request: RoomCreate,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Room:
    """Create a room. Returns 409 if the name is taken."""
    return await catalog.create_room(request.model_dump())


@router.get("/rooms", response_model=list[RoomResponse])
async def list_rooms(
    active_only: bool = Query(False, description="Only return active rooms"),
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[Room]:
    return await catalog.list_rooms(active_only=active_only)


@router.get("/rooms/{room_id}", response_model=RoomResponse)
async def get_room(
    room_id: int,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Room:
    return await catalog.get_room(room_id)
