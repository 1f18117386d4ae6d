"""Business logic services and their FastAPI dependency providers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.clock import Clock, get_clock
from boxoffice.database import get_db
from boxoffice.services.catalog import CatalogService
from boxoffice.services.scheduling import ShowtimeScheduler
from boxoffice.services.vouchers import VoucherService


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_scheduler(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ShowtimeScheduler:
    return ShowtimeScheduler(db, clock=clock)


def get_voucher_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> VoucherService:
    return VoucherService(db, clock=clock)


__all__ = [
    "CatalogService",
    "ShowtimeScheduler",
    "VoucherService",
    "get_catalog_service",
    "get_scheduler",
    "get_voucher_service",
]
