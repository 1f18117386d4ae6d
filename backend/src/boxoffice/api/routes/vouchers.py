"""Voucher API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response

from boxoffice.config import settings
from boxoffice.models import Voucher
from boxoffice.schemas import (
    VoucherCreate,
    VoucherResponse,
    VoucherUpdate,
    VoucherUsageStats,
    VoucherValidateRequest,
    VoucherValidationResponse,
)
from boxoffice.services import VoucherService, get_voucher_service
from boxoffice.services.vouchers import VoucherValidation

router = APIRouter(prefix="/vouchers")


@router.post("", response_model=VoucherResponse, status_code=201)
async def create_voucher(
    request: VoucherCreate,
    vouchers: VoucherService = Depends(get_voucher_service),
) -> Voucher:
    """Create a voucher. Returns 409 if the code already exists."""
    return await vouchers.create_voucher(request.model_dump())


@router.get("", response_model=list[VoucherResponse])
async def list_vouchers(vouchers: VoucherService = Depends(get_voucher_service)) -> list[Voucher]:
    return await vouchers.list_vouchers()


@router.get("/active", response_model=list[VoucherResponse])
async def get_active_vouchers(
    vouchers: VoucherService = Depends(get_voucher_service),
) -> list[Voucher]:
    """Currently usable vouchers, highest priority first."""
    return await vouchers.find_active()


@router.get("/stats", response_model=VoucherUsageStats)
async def get_usage_stats(
    start_date: datetime | None = Query(None, description="Created on or after"),
    end_date: datetime | None = Query(None, description="Created on or before"),
    vouchers: VoucherService = Depends(get_voucher_service),
) -> dict[str, int]:
    return await vouchers.usage_stats(start_date, end_date)


@router.get("/expiring", response_model=list[VoucherResponse])
async def get_expiring_vouchers(
    days: int = Query(settings.expiring_voucher_days, ge=0, description="Days until expiration"),
    vouchers: VoucherService = Depends(get_voucher_service),
) -> list[Voucher]:
    return await vouchers.find_expiring(days)


@router.get("/code/{code}", response_model=VoucherResponse)
async def get_voucher_by_code(
    code: str,
    vouchers: VoucherService = Depends(get_voucher_service),
) -> Voucher:
    return await vouchers.find_by_code(code)


@router.get("/movie/{movie_id}", response_model=list[VoucherResponse])
async def get_vouchers_for_movie(
    movie_id: int,
    vouchers: VoucherService = Depends(get_voucher_service),
) -> list[Voucher]:
    """Vouchers for this movie or for all movies, highest priority first."""
    return await vouchers.find_by_movie_id(movie_id)


@router.post("/validate/{code}", response_model=VoucherValidationResponse)
async def validate_voucher(
    code: str,
    request: VoucherValidateRequest,
    vouchers: VoucherService = Depends(get_voucher_service),
) -> VoucherValidation:
    """
    Check a voucher against an order without consuming it.

    Always returns 200; an unusable voucher is reported with
    ``is_valid: false`` and an error message.
    """
    return await vouchers.validate_voucher(
        code,
        movie_id=request.movie_id,
        order_amount=request.order_amount,
        customer_email=request.customer_email,
    )


@router.post("/apply/{code}", response_model=VoucherResponse)
async def apply_voucher(
    code: str,
    vouchers: VoucherService = Depends(get_voucher_service),
) -> Voucher:
    """Consume one use of a voucher. Returns 400 once the usage limit is reached."""
    return await vouchers.apply_voucher(code)


@router.get("/{voucher_id}", response_model=VoucherResponse)
async def get_voucher(
    voucher_id: int,
    vouchers: VoucherService = Depends(get_voucher_service),
) -> Voucher:
    return await vouchers.get_voucher(voucher_id)


@router.patch("/{voucher_id}", response_model=VoucherResponse)
async def update_voucher(
    voucher_id: int,
    request: VoucherUpdate,
    vouchers: VoucherService = Depends(get_voucher_service),
) -> Voucher:
    return await vouchers.update_voucher(voucher_id, request.model_dump(exclude_unset=True))


@router.patch("/{voucher_id}/deactivate", response_model=VoucherResponse)
async def deactivate_voucher(
    voucher_id: int,
    vouchers: VoucherService = Depends(get_voucher_service),
) -> Voucher:
    return await vouchers.deactivate(voucher_id)


@router.delete("/{voucher_id}", status_code=204)
async def delete_voucher(
    voucher_id: int,
    vouchers: VoucherService = Depends(get_voucher_service),
) -> Response:
    await vouchers.remove_voucher(voucher_id)
    return Response(status_code=204)
