"""Liveness endpoint, mounted outside the /api prefix."""

from fastapi import APIRouter, Depends

from boxoffice.clock import Clock, get_clock

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check(clock: Clock = Depends(get_clock)) -> dict[str, str]:
    """
    Report that the API process is up.

    Does not touch the database, so it stays green while Postgres is down.

    Returns:
        ``status`` and the server's current UTC time
    """
    return {"status": "ok", "time": clock().isoformat()}
