"""Pydantic schemas for vouchers."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from boxoffice.models.voucher import DiscountScope, VoucherStatus, VoucherType
from boxoffice.utils.timeutils import ensure_aware

CODE_PATTERN = r"^[A-Z0-9_-]+$"
HHMM_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


class VoucherFields(BaseModel):
    """Writable voucher attributes shared by create and update."""

    title: str | None = Field(default=None, min_length=5, max_length=200)
    description: str | None = Field(default=None, min_length=10, max_length=2000)
    voucher_type: VoucherType | None = None
    status: VoucherStatus | None = None
    discount_scope: DiscountScope | None = None
    discount_value: Decimal | None = Field(default=None, ge=0)
    discount_percent: Decimal | None = Field(default=None, ge=0, le=100)
    max_discount_amount: Decimal | None = Field(default=None, ge=0)
    min_order_amount: Decimal | None = Field(default=None, ge=0)
    applicable_movie_id: int | None = None
    applicable_genres: list[str] | None = None
    applicable_screen_types: list[str] | None = None
    applicable_days_of_week: list[int] | None = None
    applicable_time_from: str | None = Field(default=None, pattern=HHMM_PATTERN)
    applicable_time_to: str | None = Field(default=None, pattern=HHMM_PATTERN)
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    max_usage: int | None = Field(default=None, ge=1)
    max_usage_per_user: int | None = Field(default=None, ge=1, le=100)
    is_first_time_user_only: bool | None = None
    is_stackable: bool | None = None
    requires_code: bool | None = None
    auto_apply: bool | None = None
    created_by: str | None = Field(default=None, min_length=1, max_length=200)
    terms_and_conditions: str | None = Field(default=None, min_length=1, max_length=500)
    priority: int | None = Field(default=None, ge=0, le=10)
    is_active: bool | None = None

    @field_validator("valid_from", "valid_until")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None

    @field_validator("applicable_days_of_week")
    @classmethod
    def check_days(cls, value: list[int] | None) -> list[int] | None:
        if value is not None and any(day < 0 or day > 6 for day in value):
            raise ValueError("days of week must be between 0 (Sunday) and 6 (Saturday)")
        return value

    @model_validator(mode="after")
    def check_window(self):
        if (
            self.valid_from is not None
            and self.valid_until is not None
            and self.valid_until < self.valid_from
        ):
            raise ValueError("valid_until must not be before valid_from")
        return self


class VoucherCreate(VoucherFields):
    """Request body for creating a voucher."""

    code: str = Field(min_length=3, max_length=50, pattern=CODE_PATTERN)
    title: str = Field(min_length=5, max_length=200)
    description: str = Field(min_length=10, max_length=2000)
    voucher_type: VoucherType
    valid_from: datetime
    valid_until: datetime


class VoucherUpdate(VoucherFields):
    """Request body for a partial voucher update."""

    code: str | None = Field(default=None, min_length=3, max_length=50, pattern=CODE_PATTERN)


class VoucherResponse(BaseModel):
    """Voucher response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    title: str
    description: str
    voucher_type: VoucherType
    status: VoucherStatus
    discount_scope: DiscountScope
    discount_value: float | None = None
    discount_percent: float | None = None
    max_discount_amount: float | None = None
    min_order_amount: float | None = None
    applicable_movie_id: int | None = None
    applicable_genres: list[str] | None = None
    applicable_screen_types: list[str] | None = None
    applicable_days_of_week: list[int] | None = None
    applicable_time_from: str | None = None
    applicable_time_to: str | None = None
    valid_from: datetime
    valid_until: datetime
    max_usage: int | None = None
    current_usage: int
    max_usage_per_user: int | None = None
    is_first_time_user_only: bool = False
    is_stackable: bool = False
    requires_code: bool = False
    auto_apply: bool = False
    created_by: str | None = None
    terms_and_conditions: str | None = None
    priority: int
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class VoucherValidateRequest(BaseModel):
    """Order context a voucher is validated against."""

    movie_id: int | None = None
    order_amount: Decimal | None = Field(default=None, ge=0)
    customer_email: str | None = None


class VoucherValidationResponse(BaseModel):
    """Result of validating a voucher code."""

    model_config = ConfigDict(from_attributes=True)

    is_valid: bool
    voucher: VoucherResponse | None = None
    error: str | None = None
    discount_amount: float | None = None


class VoucherUsageStats(BaseModel):
    """Voucher counts by status."""

    total_vouchers: int
    active_vouchers: int
    used_vouchers: int
