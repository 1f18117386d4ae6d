"""Scheduled job that marks vouchers past their validity window as expired."""

import logging

from boxoffice.clock import Clock, utcnow
from boxoffice.database import AsyncSessionLocal
from boxoffice.services.vouchers import VoucherService

logger = logging.getLogger(__name__)


async def run_expire_vouchers(clock: Clock = utcnow) -> int:
    """Expire overdue vouchers in their own transaction.

    Creates its own DB session so it can be called from the scheduler
    without depending on a request context. Errors are logged, not raised,
    so one failed run does not stop the schedule.

    Returns:
        Number of vouchers marked EXPIRED
    """
    async with AsyncSessionLocal() as db:
        try:
            expired = await VoucherService(db, clock=clock).expire_overdue()
            await db.commit()
        except Exception as e:
            logger.error(f"Voucher expiry sweep failed: {e}", exc_info=True)
            await db.rollback()
            return 0

    if expired:
        logger.info(f"Voucher expiry sweep: {expired} voucher(s) marked expired")
    else:
        logger.debug("Voucher expiry sweep: nothing to expire")
    return expired
