"""Shared test fixtures."""

import pytest
from fastapi import FastAPI

from boxoffice.api.errors import register_error_handlers
from boxoffice.api.routes import catalog, health, showtimes, vouchers


@pytest.fixture
def test_app() -> FastAPI:
    """Minimal FastAPI app without the APScheduler lifespan, for API tests."""
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(catalog.router, prefix="/api")
    app.include_router(showtimes.router, prefix="/api")
    app.include_router(vouchers.router, prefix="/api")
    return app
