"""Unit tests for the scheduled voucher expiry job."""

from unittest.mock import AsyncMock, MagicMock, patch

from boxoffice.config import Settings
from boxoffice.tasks import voucher_expiry


def make_session_factory(db: AsyncMock) -> MagicMock:
    """Mimic ``AsyncSessionLocal()`` used as an async context manager."""
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=db)
    ctx.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=ctx)


async def test_commits_and_returns_expired_count() -> None:
    db = AsyncMock()
    factory = make_session_factory(db)

    with (
        patch.object(voucher_expiry, "AsyncSessionLocal", factory),
        patch.object(voucher_expiry.VoucherService, "expire_overdue", AsyncMock(return_value=4)),
    ):
        expired = await voucher_expiry.run_expire_vouchers()

    assert expired == 4
    db.commit.assert_awaited_once()
    db.rollback.assert_not_awaited()


async def test_failure_is_logged_and_rolled_back() -> None:
    db = AsyncMock()
    factory = make_session_factory(db)

    with (
        patch.object(voucher_expiry, "AsyncSessionLocal", factory),
        patch.object(
            voucher_expiry.VoucherService,
            "expire_overdue",
            AsyncMock(side_effect=RuntimeError("connection lost")),
        ),
    ):
        expired = await voucher_expiry.run_expire_vouchers()

    assert expired == 0
    db.commit.assert_not_awaited()
    db.rollback.assert_awaited_once()


def test_sweep_is_off_unless_configured(monkeypatch) -> None:
    monkeypatch.delenv("VOUCHER_EXPIRY_SWEEP_MINUTES", raising=False)

    assert Settings(_env_file=None).voucher_expiry_sweep_minutes == 0
