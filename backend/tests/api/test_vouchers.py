"""Tests for the voucher API endpoints."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from boxoffice.clock import FixedClock, get_clock
from boxoffice.database import get_db
from boxoffice.models import DiscountScope, Voucher, VoucherStatus, VoucherType

NOW = datetime(2025, 7, 5, 12, 0, tzinfo=timezone.utc)


def make_execute_result(*, scalar_one_or_none: object = None, scalars_all: list | None = None) -> MagicMock:
    r = MagicMock()
    r.scalar_one_or_none.return_value = scalar_one_or_none
    r.scalars.return_value.all.return_value = scalars_all if scalars_all is not None else []
    return r


def make_voucher(
    id: int = 1,
    code: str = "SAVE10",
    max_usage: int | None = None,
    current_usage: int = 0,
    status: VoucherStatus = VoucherStatus.ACTIVE,
) -> Voucher:
    return Voucher(
        id=id,
        code=code,
        title="Ten percent off",
        description="Ten percent off any screening",
        voucher_type=VoucherType.PERCENTAGE,
        status=status,
        discount_scope=DiscountScope.ALL_MOVIES,
        discount_percent=Decimal("10"),
        max_discount_amount=Decimal("5"),
        valid_from=NOW - timedelta(days=1),
        valid_until=NOW + timedelta(days=30),
        max_usage=max_usage,
        current_usage=current_usage,
        priority=0,
        is_active=True,
        is_first_time_user_only=False,
        is_stackable=False,
        requires_code=False,
        auto_apply=False,
    )


def make_db(get_result: object = None) -> AsyncMock:
    def assign_id(obj) -> None:
        if getattr(obj, "id", None) is None:
            obj.id = 1

    db = AsyncMock()
    db.add = MagicMock()
    db.get = AsyncMock(return_value=get_result)
    db.refresh = AsyncMock(side_effect=assign_id)
    return db


async def call(test_app: FastAPI, db: AsyncMock, method: str, url: str, **kwargs):
    async def override():
        yield db

    test_app.dependency_overrides[get_db] = override
    test_app.dependency_overrides[get_clock] = lambda: FixedClock(NOW)
    try:
        async with AsyncClient(
            transport=ASGITransport(app=test_app), base_url="http://test"
        ) as client:
            return await client.request(method, url, **kwargs)
    finally:
        test_app.dependency_overrides.clear()


async def test_validate_reports_capped_discount(test_app: FastAPI) -> None:
    db = make_db()
    db.execute = AsyncMock(return_value=make_execute_result(scalar_one_or_none=make_voucher()))

    response = await call(
        test_app,
        db,
        "POST",
        "/api/vouchers/validate/SAVE10",
        json={"movie_id": 1, "order_amount": 100},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["is_valid"] is True
    assert data["error"] is None
    assert data["discount_amount"] == 5.0
    assert data["voucher"]["code"] == "SAVE10"


async def test_validate_unknown_code_is_not_an_http_error(test_app: FastAPI) -> None:
    db = make_db()
    db.execute = AsyncMock(return_value=make_execute_result(scalar_one_or_none=None))

    response = await call(test_app, db, "POST", "/api/vouchers/validate/NOPE", json={})

    assert response.status_code == 200
    assert response.json() == {
        "is_valid": False,
        "voucher": None,
        "error": "Invalid voucher code",
        "discount_amount": None,
    }


async def test_validate_rejects_negative_order_amount(test_app: FastAPI) -> None:
    response = await call(
        test_app,
        make_db(),
        "POST",
        "/api/vouchers/validate/SAVE10",
        json={"order_amount": -1},
    )

    assert response.status_code == 422


async def test_apply_increments_usage(test_app: FastAPI) -> None:
    db = make_db()
    db.execute = AsyncMock(
        side_effect=[
            make_execute_result(scalar_one_or_none=1),
            make_execute_result(
                scalar_one_or_none=make_voucher(
                    max_usage=1, current_usage=1, status=VoucherStatus.USED_UP
                )
            ),
        ]
    )

    response = await call(test_app, db, "POST", "/api/vouchers/apply/SAVE10")

    assert response.status_code == 200
    data = response.json()
    assert data["current_usage"] == 1
    assert data["status"] == "used_up"


async def test_apply_at_limit_returns_400(test_app: FastAPI) -> None:
    db = make_db(get_result=make_voucher(max_usage=1, current_usage=1, status=VoucherStatus.USED_UP))
    db.execute = AsyncMock(
        side_effect=[
            make_execute_result(scalar_one_or_none=1),
            make_execute_result(scalar_one_or_none=None),
        ]
    )

    response = await call(test_app, db, "POST", "/api/vouchers/apply/SAVE10")

    assert response.status_code == 400
    assert response.json() == {"detail": "Voucher usage limit exceeded", "code": "BAD_REQUEST"}


async def test_apply_unknown_code_returns_404(test_app: FastAPI) -> None:
    db = make_db()
    db.execute = AsyncMock(return_value=make_execute_result(scalar_one_or_none=None))

    response = await call(test_app, db, "POST", "/api/vouchers/apply/NOPE")

    assert response.status_code == 404
    assert response.json()["detail"] == "Voucher with code NOPE not found"


async def test_create_voucher_returns_201(test_app: FastAPI) -> None:
    db = make_db()
    db.execute = AsyncMock(return_value=make_execute_result(scalar_one_or_none=None))

    response = await call(
        test_app,
        db,
        "POST",
        "/api/vouchers",
        json={
            "code": "SUMMER25",
            "title": "Summer special",
            "description": "Twenty five percent off in July",
            "voucher_type": "percentage",
            "discount_percent": 25,
            "valid_from": "2025-07-01T00:00:00Z",
            "valid_until": "2025-07-31T23:59:59Z",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["code"] == "SUMMER25"
    assert data["status"] == "active"
    assert data["discount_scope"] == "all_movies"
    assert data["current_usage"] == 0
    assert data["discount_percent"] == 25.0


async def test_create_voucher_rejects_lowercase_code(test_app: FastAPI) -> None:
    response = await call(
        test_app,
        make_db(),
        "POST",
        "/api/vouchers",
        json={
            "code": "summer",
            "title": "Summer special",
            "description": "Twenty five percent off in July",
            "voucher_type": "percentage",
            "valid_from": "2025-07-01T00:00:00Z",
            "valid_until": "2025-07-31T23:59:59Z",
        },
    )

    assert response.status_code == 422


async def test_create_voucher_rejects_inverted_window(test_app: FastAPI) -> None:
    response = await call(
        test_app,
        make_db(),
        "POST",
        "/api/vouchers",
        json={
            "code": "BACKWARDS",
            "title": "Backwards window",
            "description": "Ends before it starts",
            "voucher_type": "fixed_amount",
            "valid_from": "2025-07-31T00:00:00Z",
            "valid_until": "2025-07-01T00:00:00Z",
        },
    )

    assert response.status_code == 422


async def test_create_duplicate_code_returns_409(test_app: FastAPI) -> None:
    db = make_db()
    db.execute = AsyncMock(return_value=make_execute_result(scalar_one_or_none=make_voucher()))

    response = await call(
        test_app,
        db,
        "POST",
        "/api/vouchers",
        json={
            "code": "SAVE10",
            "title": "Ten percent off",
            "description": "Ten percent off any screening",
            "voucher_type": "percentage",
            "valid_from": "2025-07-01T00:00:00Z",
            "valid_until": "2025-07-31T23:59:59Z",
        },
    )

    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


async def test_vouchers_for_movie(test_app: FastAPI) -> None:
    db = make_db()
    db.execute = AsyncMock(
        return_value=make_execute_result(
            scalars_all=[make_voucher(id=1, code="FIRST"), make_voucher(id=2, code="SECOND")]
        )
    )

    response = await call(test_app, db, "GET", "/api/vouchers/movie/1")

    assert response.status_code == 200
    assert [v["code"] for v in response.json()] == ["FIRST", "SECOND"]


async def test_active_route_is_not_shadowed_by_id(test_app: FastAPI) -> None:
    db = make_db()
    db.execute = AsyncMock(return_value=make_execute_result(scalars_all=[make_voucher()]))

    response = await call(test_app, db, "GET", "/api/vouchers/active")

    assert response.status_code == 200
    assert len(response.json()) == 1


async def test_usage_stats(test_app: FastAPI) -> None:
    results = []
    for count in (4, 2, 1):
        r = MagicMock()
        r.scalar_one.return_value = count
        results.append(r)
    db = make_db()
    db.execute = AsyncMock(side_effect=results)

    response = await call(test_app, db, "GET", "/api/vouchers/stats")

    assert response.status_code == 200
    assert response.json() == {"total_vouchers": 4, "active_vouchers": 2, "used_vouchers": 1}


async def test_deactivate(test_app: FastAPI) -> None:
    db = make_db(get_result=make_voucher())

    response = await call(test_app, db, "PATCH", "/api/vouchers/1/deactivate")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "inactive"
    assert data["is_active"] is False


async def test_update_only_touches_sent_fields(test_app: FastAPI) -> None:
    voucher = make_voucher()
    db = make_db(get_result=voucher)

    response = await call(test_app, db, "PATCH", "/api/vouchers/1", json={"priority": 5})

    assert response.status_code == 200
    data = response.json()
    assert data["priority"] == 5
    assert data["title"] == "Ten percent off"


async def test_update_with_nulls_keeps_required_fields(test_app: FastAPI) -> None:
    db = make_db(get_result=make_voucher(max_usage=10, current_usage=3))

    response = await call(
        test_app,
        db,
        "PATCH",
        "/api/vouchers/1",
        json={"title": None, "voucher_type": None, "is_active": None},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Ten percent off"
    assert data["voucher_type"] == "percentage"
    assert data["is_active"] is True


async def test_update_max_usage_below_usage_returns_400(test_app: FastAPI) -> None:
    db = make_db(get_result=make_voucher(max_usage=10, current_usage=3))

    response = await call(test_app, db, "PATCH", "/api/vouchers/1", json={"max_usage": 2})

    assert response.status_code == 400
    assert response.json() == {
        "detail": "max_usage cannot be below current usage (3)",
        "code": "BAD_REQUEST",
    }


async def test_update_max_usage_to_usage_marks_used_up(test_app: FastAPI) -> None:
    db = make_db(get_result=make_voucher(max_usage=10, current_usage=3))

    response = await call(test_app, db, "PATCH", "/api/vouchers/1", json={"max_usage": 3})

    assert response.status_code == 200
    assert response.json()["status"] == "used_up"


async def test_delete_missing_voucher_returns_404(test_app: FastAPI) -> None:
    response = await call(test_app, make_db(get_result=None), "DELETE", "/api/vouchers/9")

    assert response.status_code == 404
    assert response.json() == {"detail": "Voucher with ID 9 not found", "code": "NOT_FOUND"}
