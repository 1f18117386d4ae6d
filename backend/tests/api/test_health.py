"""Tests for the health check endpoint."""

from datetime import datetime, timezone

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from boxoffice.clock import FixedClock, get_clock


async def test_health_returns_ok_with_server_time(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_clock] = lambda: FixedClock(
        datetime(2025, 7, 5, 9, 0, tzinfo=timezone.utc)
    )
    try:
        async with AsyncClient(
            transport=ASGITransport(app=test_app), base_url="http://test"
        ) as client:
            response = await client.get("/health")
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "time": "2025-07-05T09:00:00+00:00"}


async def test_health_is_not_under_api_prefix(test_app: FastAPI) -> None:
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        response = await client.get("/api/health")

    assert response.status_code == 404
