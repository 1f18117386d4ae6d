"""Voucher service: eligibility checks, discount calculation and usage tracking."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from sqlalchemy import and_, case, func, literal, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from boxoffice.clock import Clock, utcnow
from boxoffice.errors import BadRequestError, ConflictError, NotFoundError
from boxoffice.models import DiscountScope, Voucher, VoucherStatus, VoucherType
from boxoffice.services.catalog import CatalogService
from boxoffice.services.counters import BoundedCounter

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# NOT NULL columns an update may leave untouched but never clear
REQUIRED_VOUCHER_FIELDS = frozenset(
    {
        "code",
        "title",
        "description",
        "voucher_type",
        "status",
        "discount_scope",
        "valid_from",
        "valid_until",
        "is_first_time_user_only",
        "is_stackable",
        "requires_code",
        "auto_apply",
        "priority",
        "is_active",
    }
)


class ValidationFailure(Enum):
    """Why a voucher failed validation (not exposed to API clients)."""

    CODE_NOT_FOUND = "code_not_found"
    NOT_ACTIVE = "not_active"
    OUTSIDE_VALIDITY_WINDOW = "outside_validity_window"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    BELOW_MINIMUM_ORDER = "below_minimum_order"
    MOVIE_NOT_APPLICABLE = "movie_not_applicable"


@dataclass(frozen=True)
class VoucherValidation:
    """Outcome of ``VoucherService.validate_voucher``."""

    is_valid: bool
    voucher: Voucher | None = None
    error: str | None = None
    discount_amount: Decimal | None = None
    failure: ValidationFailure | None = None

    @classmethod
    def reject(cls, failure: ValidationFailure, error: str) -> "VoucherValidation":
        return cls(is_valid=False, error=error, failure=failure)


def _to_decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def compute_discount(voucher: Voucher, order_amount: Decimal) -> Decimal:
    """
    Discount a voucher grants on an order, rounded to cents.

    Percentage vouchers are capped by ``max_discount_amount``; fixed-amount
    vouchers never discount more than the order itself. Other voucher types
    carry no computable discount.
    """
    order_amount = _to_decimal(order_amount)
    discount = Decimal("0")

    if voucher.voucher_type == VoucherType.PERCENTAGE and voucher.discount_percent is not None:
        discount = order_amount * _to_decimal(voucher.discount_percent) / 100
        if voucher.max_discount_amount is not None:
            cap = _to_decimal(voucher.max_discount_amount)
            if discount > cap:
                discount = cap
    elif voucher.voucher_type == VoucherType.FIXED_AMOUNT and voucher.discount_value is not None:
        discount = min(_to_decimal(voucher.discount_value), order_amount)

    return discount.quantize(CENT, rounding=ROUND_HALF_UP)


class VoucherService:
    """
    Service for voucher lookups, validation and redemption.

    ``validate_voucher`` is read-only and reports failures in its result;
    every other operation raises domain errors. Validation and redemption are
    separate calls, so a voucher shown as valid can still be used up by
    another customer before ``apply_voucher`` runs; only ``apply_voucher``
    enforces the usage cap atomically.
    """

    def __init__(self, db: AsyncSession, clock: Clock = utcnow) -> None:
        self.db = db
        self.clock = clock
        self.usage = BoundedCounter(Voucher, Voucher.current_usage, upper=Voucher.max_usage)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def _get_by_code(self, code: str) -> Voucher | None:
        result = await self.db.execute(select(Voucher).where(Voucher.code == code))
        return result.scalar_one_or_none()

    async def find_by_code(self, code: str) -> Voucher:
        voucher = await self._get_by_code(code)
        if voucher is None:
            raise NotFoundError("Voucher", code, key="code")
        return voucher

    async def get_voucher(self, voucher_id: int) -> Voucher:
        voucher = await self.db.get(Voucher, voucher_id, populate_existing=True)
        if voucher is None:
            raise NotFoundError("Voucher", voucher_id)
        return voucher

    async def list_vouchers(self) -> list[Voucher]:
        result = await self.db.execute(select(Voucher).order_by(Voucher.created_at.desc()))
        return list(result.scalars().all())

    def _currently_valid(self, now: datetime) -> list:
        return [
            Voucher.status == VoucherStatus.ACTIVE,
            Voucher.is_active.is_(True),
            Voucher.valid_from <= now,
            Voucher.valid_until >= now,
        ]

    async def find_active(self) -> list[Voucher]:
        query = (
            select(Voucher)
            .where(*self._currently_valid(self.clock()))
            .order_by(Voucher.priority.desc(), Voucher.created_at.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_by_movie_id(self, movie_id: int) -> list[Voucher]:
        """
        Vouchers usable for a movie, best candidate first.

        Combines vouchers tied to this movie with vouchers valid for all
        movies; both must be active and inside their validity window.
        """
        query = (
            select(Voucher)
            .where(
                *self._currently_valid(self.clock()),
                or_(
                    Voucher.applicable_movie_id == movie_id,
                    Voucher.discount_scope == DiscountScope.ALL_MOVIES,
                ),
            )
            .order_by(Voucher.priority.desc(), Voucher.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_expiring(self, days: int = 7) -> list[Voucher]:
        """Active vouchers whose validity ends within ``days`` days."""
        horizon = self.clock() + timedelta(days=days)
        query = (
            select(Voucher)
            .where(Voucher.status == VoucherStatus.ACTIVE, Voucher.valid_until <= horizon)
            .order_by(Voucher.valid_until)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def usage_stats(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[str, int]:
        """Count all, active and used-up vouchers, optionally by creation date."""
        created_filter = []
        if start is not None and end is not None:
            created_filter = [Voucher.created_at >= start, Voucher.created_at <= end]

        async def count(*conditions: Any) -> int:
            query = select(func.count()).select_from(Voucher).where(*created_filter, *conditions)
            result = await self.db.execute(query)
            return result.scalar_one()

        return {
            "total_vouchers": await count(),
            "active_vouchers": await count(Voucher.status == VoucherStatus.ACTIVE),
            "used_vouchers": await count(Voucher.status == VoucherStatus.USED_UP),
        }

    # ------------------------------------------------------------------
    # Validation and redemption
    # ------------------------------------------------------------------

    async def validate_voucher(
        self,
        code: str,
        movie_id: int | None = None,
        order_amount: Decimal | None = None,
        customer_email: str | None = None,
    ) -> VoucherValidation:
        """
        Check whether a voucher can be used, without consuming it.

        Checks run in order and the first failure is returned. The movie
        scope is only checked when a movie is given. ``customer_email`` is
        accepted for per-customer rules but not evaluated.

        Returns:
            VoucherValidation with the discount when ``order_amount`` is given
        """
        voucher = await self._get_by_code(code)
        if voucher is None:
            return VoucherValidation.reject(ValidationFailure.CODE_NOT_FOUND, "Invalid voucher code")

        now = self.clock()

        # An expiry-swept voucher still fails on its window below
        swept = voucher.status == VoucherStatus.EXPIRED and voucher.valid_until < now
        if (voucher.status != VoucherStatus.ACTIVE and not swept) or not voucher.is_active:
            return VoucherValidation.reject(ValidationFailure.NOT_ACTIVE, "Voucher is not active")

        if voucher.valid_from > now or voucher.valid_until < now:
            return VoucherValidation.reject(
                ValidationFailure.OUTSIDE_VALIDITY_WINDOW,
                "Voucher has expired or not yet valid",
            )

        if voucher.max_usage is not None and voucher.current_usage >= voucher.max_usage:
            return VoucherValidation.reject(
                ValidationFailure.USAGE_LIMIT_REACHED,
                "Voucher usage limit exceeded",
            )

        if (
            voucher.min_order_amount is not None
            and order_amount is not None
            and _to_decimal(order_amount) < _to_decimal(voucher.min_order_amount)
        ):
            return VoucherValidation.reject(
                ValidationFailure.BELOW_MINIMUM_ORDER,
                f"Minimum order amount is {voucher.min_order_amount}",
            )

        if (
            movie_id is not None
            and voucher.discount_scope == DiscountScope.SPECIFIC_MOVIE
            and voucher.applicable_movie_id != movie_id
        ):
            return VoucherValidation.reject(
                ValidationFailure.MOVIE_NOT_APPLICABLE,
                "Voucher not applicable to this movie",
            )

        discount_amount = Decimal("0")
        if order_amount is not None:
            discount_amount = compute_discount(voucher, order_amount)

        return VoucherValidation(is_valid=True, voucher=voucher, discount_amount=discount_amount)

    async def apply_voucher(self, code: str) -> Voucher:
        """
        Consume one use of a voucher.

        The increment, the cap check and the switch to USED_UP happen in one
        UPDATE statement.

        Raises:
            NotFoundError: If the code does not exist
            BadRequestError: If the usage limit is already reached
        """
        result = await self.db.execute(select(Voucher.id).where(Voucher.code == code))
        voucher_id = result.scalar_one_or_none()
        if voucher_id is None:
            raise NotFoundError("Voucher", code, key="code")

        cap_reached = and_(
            Voucher.max_usage.is_not(None),
            Voucher.current_usage + 1 >= Voucher.max_usage,
        )
        voucher = await self.usage.adjust(
            self.db,
            voucher_id,
            1,
            status=case(
                (cap_reached, literal(VoucherStatus.USED_UP, Voucher.status.type)),
                else_=Voucher.status,
            ),
        )
        if voucher is None:
            # Raises NotFoundError if the voucher was deleted in the meantime
            await self.get_voucher(voucher_id)
            logger.warning(f"Voucher {code} usage limit exceeded")
            raise BadRequestError("Voucher usage limit exceeded")

        logger.info(
            f"Applied voucher {code}: usage {voucher.current_usage}/{voucher.max_usage}, "
            f"status {voucher.status.value}"
        )
        return voucher

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    async def create_voucher(self, data: dict[str, Any]) -> Voucher:
        """
        Create a voucher with zero usage.

        Raises:
            ConflictError: If the code already exists
            NotFoundError: If ``applicable_movie_id`` references no movie
        """
        if await self._get_by_code(data["code"]) is not None:
            raise ConflictError("Voucher code already exists")

        if data.get("applicable_movie_id") is not None:
            await CatalogService(self.db).get_movie(data["applicable_movie_id"])

        values = {key: value for key, value in data.items() if value is not None}
        values.setdefault("status", VoucherStatus.ACTIVE)
        values.setdefault("discount_scope", DiscountScope.ALL_MOVIES)
        values.setdefault("is_active", True)
        values.setdefault("priority", 0)
        for flag in ("is_first_time_user_only", "is_stackable", "requires_code", "auto_apply"):
            values.setdefault(flag, False)
        values["current_usage"] = 0

        voucher = Voucher(**values)
        self.db.add(voucher)
        await self.db.flush()
        await self.db.refresh(voucher)
        logger.info(f"Created voucher {voucher.code} ({voucher.voucher_type.value})")
        return voucher

    async def update_voucher(self, voucher_id: int, changes: dict[str, Any]) -> Voucher:
        """
        Update voucher attributes. Usage counters are not writable here.

        ``None`` clears optional attributes and is ignored for required ones.
        Lowering ``max_usage`` to the current usage marks the voucher USED_UP.

        Raises:
            NotFoundError: If the voucher does not exist
            ConflictError: If the new code belongs to another voucher
            BadRequestError: If ``max_usage`` drops below the current usage or
                the validity window ends before it starts
        """
        voucher = await self.get_voucher(voucher_id)

        changes = {
            field: value
            for field, value in changes.items()
            if field not in ("id", "current_usage")
            and not (value is None and field in REQUIRED_VOUCHER_FIELDS)
        }

        new_code = changes.get("code")
        if new_code is not None and new_code != voucher.code:
            if await self._get_by_code(new_code) is not None:
                raise ConflictError("Voucher code already exists")

        if changes.get("valid_from", voucher.valid_from) > changes.get(
            "valid_until", voucher.valid_until
        ):
            raise BadRequestError("valid_until must not be before valid_from")

        max_usage = changes.get("max_usage")
        if max_usage is not None:
            if max_usage < voucher.current_usage:
                raise BadRequestError(
                    f"max_usage cannot be below current usage ({voucher.current_usage})"
                )
            if max_usage == voucher.current_usage:
                changes["status"] = VoucherStatus.USED_UP

        for field, value in changes.items():
            setattr(voucher, field, value)

        await self.db.flush()
        await self.db.refresh(voucher)
        return voucher

    async def deactivate(self, voucher_id: int) -> Voucher:
        voucher = await self.get_voucher(voucher_id)
        voucher.status = VoucherStatus.INACTIVE
        voucher.is_active = False
        await self.db.flush()
        await self.db.refresh(voucher)
        logger.info(f"Deactivated voucher {voucher.code}")
        return voucher

    async def remove_voucher(self, voucher_id: int) -> None:
        voucher = await self.get_voucher(voucher_id)
        await self.db.delete(voucher)
        await self.db.flush()
        logger.info(f"Removed voucher {voucher.code}")

    async def expire_overdue(self) -> int:
        """Mark active vouchers past ``valid_until`` as EXPIRED; return how many."""
        result = await self.db.execute(
            update(Voucher)
            .where(Voucher.status == VoucherStatus.ACTIVE, Voucher.valid_until < self.clock())
            .values(status=VoucherStatus.EXPIRED)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
