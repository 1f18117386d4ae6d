"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from boxoffice.api.errors import register_error_handlers
from boxoffice.api.routes import catalog, health, showtimes, vouchers
from boxoffice.config import settings
from boxoffice.tasks.voucher_expiry import run_expire_vouchers

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: register the voucher expiry sweep
    scheduler = AsyncIOScheduler()
    if settings.voucher_expiry_sweep_minutes > 0:
        scheduler.add_job(
            run_expire_vouchers,
            trigger=IntervalTrigger(minutes=settings.voucher_expiry_sweep_minutes),
            id="voucher_expiry",
            name="Mark overdue vouchers as expired",
            replace_existing=True,
        )
        logger.info(
            f"Scheduler started, voucher expiry sweep every "
            f"{settings.voucher_expiry_sweep_minutes} minutes"
        )
    else:
        logger.info("Voucher expiry sweep disabled")
    scheduler.start()

    yield

    # Shutdown: stop the scheduler gracefully
    scheduler.shutdown(wait=False)
    logger.info("Scheduler shut down")


# Create FastAPI app
app = FastAPI(
    title="Boxoffice API",
    description="Showtime scheduling, seat capacity and vouchers for a cinema",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(health.router)
app.include_router(catalog.router, prefix="/api", tags=["catalog"])
app.include_router(showtimes.router, prefix="/api", tags=["showtimes"])
app.include_router(vouchers.router, prefix="/api", tags=["vouchers"])
