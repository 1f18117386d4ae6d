"""Voucher model for promotional codes."""

import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boxoffice.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from boxoffice.models.movie import Movie


class VoucherType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    BUY_ONE_GET_ONE = "buy_one_get_one"
    FREE_ITEM = "free_item"
    COMBO_DEAL = "combo_deal"


class VoucherStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    USED_UP = "used_up"


class DiscountScope(str, enum.Enum):
    ALL_MOVIES = "all_movies"
    SPECIFIC_MOVIE = "specific_movie"
    SPECIFIC_GENRE = "specific_genre"
    WEEKEND_ONLY = "weekend_only"
    WEEKDAY_ONLY = "weekday_only"
    PREMIUM_SCREENS = "premium_screens"
    CONCESSIONS = "concessions"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Voucher(Base, TimestampMixin):
    """
    Voucher model.

    Only PERCENTAGE and FIXED_AMOUNT carry discount arithmetic, and only the
    ALL_MOVIES / SPECIFIC_MOVIE scopes are enforced; the remaining types,
    scopes and targeting columns are stored for display.
    """

    __tablename__ = "vouchers"
    __table_args__ = (
        CheckConstraint("current_usage >= 0", name="ck_vouchers_usage_non_negative"),
        CheckConstraint(
            "max_usage IS NULL OR current_usage <= max_usage",
            name="ck_vouchers_usage_within_max",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    voucher_type: Mapped[VoucherType] = mapped_column(
        Enum(VoucherType, name="voucher_type", values_callable=_enum_values),
        nullable=False,
    )
    status: Mapped[VoucherStatus] = mapped_column(
        Enum(VoucherStatus, name="voucher_status", values_callable=_enum_values),
        default=VoucherStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    discount_scope: Mapped[DiscountScope] = mapped_column(
        Enum(DiscountScope, name="discount_scope", values_callable=_enum_values),
        default=DiscountScope.ALL_MOVIES,
        nullable=False,
    )

    # Discount arithmetic
    discount_value: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    discount_percent: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    max_discount_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    min_order_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    # Applicability
    applicable_movie_id: Mapped[int | None] = mapped_column(
        ForeignKey("movies.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    applicable_genres: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    applicable_screen_types: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    applicable_days_of_week: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    applicable_time_from: Mapped[str | None] = mapped_column(String(5), nullable=True)
    applicable_time_to: Mapped[str | None] = mapped_column(String(5), nullable=True)

    # Validity window
    valid_from: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    valid_until: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    # Usage
    max_usage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    current_usage: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    max_usage_per_user: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Flags and metadata
    is_first_time_user_only: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_stackable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    requires_code: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    auto_apply: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    terms_and_conditions: Mapped[str | None] = mapped_column(String(500), nullable=True)
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    applicable_movie: Mapped["Movie | None"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<Voucher(code={self.code!r}, status={self.status.value if self.status else None!r}, "
            f"usage={self.current_usage}/{self.max_usage})>"
        )
