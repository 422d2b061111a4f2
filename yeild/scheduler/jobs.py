"""
Background job definitions using APScheduler.

Jobs include:
- Commission reconciliation (retry credits that failed to persist)
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from yeild.config import settings
from yeild.db import get_db_context
from yeild.services.commission import retry_pending_reconciliations

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler()


async def commission_reconciliation_job():
    """Retry queued commission credits."""
    logger.debug("Running commission reconciliation job")
    try:
        async with get_db_context() as db:
            resolved = await retry_pending_reconciliations(db)
            if resolved:
                logger.info(f"Commission reconciliation job: resolved {resolved} entries")
    except Exception:
        logger.exception("Commission reconciliation job error")


def setup_scheduler():
    """
    Configure and add all scheduled jobs.

    Called during application startup.
    """
    scheduler.add_job(
        commission_reconciliation_job,
        trigger=IntervalTrigger(minutes=settings.reconciliation_interval_minutes),
        id="commission_reconciliation",
        name="Retry failed referral commissions",
        replace_existing=True,
    )

    logger.info("Scheduler configured with jobs")
