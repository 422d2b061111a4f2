"""
Referral commission.

Rules:
- When a referred user earns points, their referrer gets a flat commission
  (10 points by default), not a share of the points earned
- Only active referrals qualify
- At most one commission per triggering event: the event id is stored as
  commission_transactions.source_event_id under a unique constraint
- Best-effort: a failed credit never rolls back the award that triggered it.
  The failure is logged and queued in commission_reconciliations.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from yeild.config import settings
from yeild.models import (
    CommissionReconciliation,
    CommissionTransaction,
    PointTransaction,
    PointTransactionType,
    Profile,
    ReconciliationStatus,
    Referral,
)
from yeild.services.errors import ProfileNotFoundError, YeildError

logger = logging.getLogger(__name__)


class CommissionStatus(str, Enum):
    CREDITED = "credited"
    DUPLICATE = "duplicate"
    NO_REFERRAL = "no_referral"
    INACTIVE_REFERRAL = "inactive_referral"
    FAILED = "failed"


@dataclass
class PointsEarnedEvent:
    """A referred user earned points. event_id is the idempotency key."""

    event_id: str
    user_id: int
    points: int
    referrer_user_id: Optional[int] = None


@dataclass(frozen=True)
class CommissionResult:
    status: CommissionStatus
    transaction: Optional[CommissionTransaction] = None
    error: Optional[str] = None

    @property
    def credited(self) -> bool:
        return self.status == CommissionStatus.CREDITED


def commission_description(event: PointsEarnedEvent) -> str:
    return f"Referral commission: referred user {event.user_id} earned {event.points} points"


async def _find_commission(db: AsyncSession, event_id: str) -> Optional[CommissionTransaction]:
    return await db.scalar(
        select(CommissionTransaction).where(
            CommissionTransaction.source_event_id == event_id
        )
    )


async def _write_commission(
    db: AsyncSession,
    event: PointsEarnedEvent,
    amount: int,
) -> CommissionTransaction:
    """Credit the referrer and append the ledger rows. Runs inside a SAVEPOINT."""
    result = await db.execute(
        update(Profile)
        .where(Profile.id == event.referrer_user_id)
        .values(points=Profile.points + amount)
    )
    if result.rowcount == 0:
        raise ProfileNotFoundError(event.referrer_user_id)

    description = commission_description(event)
    commission = CommissionTransaction(
        referrer_user_id=event.referrer_user_id,
        referred_user_id=event.user_id,
        points=amount,
        description=description,
        source_event_id=event.event_id,
    )
    db.add(commission)
    db.add(
        PointTransaction(
            user_id=event.referrer_user_id,
            points=amount,
            transaction_type=PointTransactionType.REFERRAL_COMMISSION,
            reference_id=event.event_id,
            description=description,
        )
    )
    await db.flush()
    return commission


async def queue_reconciliation(
    db: AsyncSession,
    event: PointsEarnedEvent,
    error: str,
) -> Optional[CommissionReconciliation]:
    """
    Record a failed commission for a later retry.

    Returns None if even the queue write fails; that failure is logged
    so the event can be reconciled from the logs.
    """
    entry = CommissionReconciliation(
        source_event_id=event.event_id,
        referrer_user_id=event.referrer_user_id,
        referred_user_id=event.user_id,
        points_earned=event.points,
        status=ReconciliationStatus.PENDING,
        attempts=0,
        error_message=error[:2000],
    )
    try:
        async with db.begin_nested():
            db.add(entry)
            await db.flush()
    except SQLAlchemyError:
        logger.exception(
            f"Could not queue commission reconciliation for event {event.event_id} "
            f"(referrer={event.referrer_user_id})"
        )
        return None

    logger.warning(f"Commission for event {event.event_id} queued for reconciliation")
    return entry


async def credit_referral_commission(
    db: AsyncSession,
    event: PointsEarnedEvent,
    amount: Optional[int] = None,
    queue_on_failure: bool = True,
) -> CommissionResult:
    """
    Credit the flat referral commission for a point-earning event.

    Args:
        db: Database session with the triggering award already flushed
        event: The point-earning event of the referred user
        amount: Commission points (defaults to settings.referral_commission_points)
        queue_on_failure: Queue a reconciliation row if the credit fails

    Returns:
        CommissionResult. Never raises for database failures.
    """
    if amount is None:
        amount = settings.referral_commission_points

    if event.referrer_user_id is None:
        logger.debug(f"Event {event.event_id}: no referrer, no commission")
        return CommissionResult(CommissionStatus.NO_REFERRAL)

    referral = await db.scalar(
        select(Referral).where(
            Referral.referrer_id == event.referrer_user_id,
            Referral.referred_id == event.user_id,
        )
    )
    if referral is None:
        logger.debug(
            f"Event {event.event_id}: user {event.user_id} was not referred "
            f"by {event.referrer_user_id}"
        )
        return CommissionResult(CommissionStatus.NO_REFERRAL)

    if not referral.is_active:
        logger.debug(f"Event {event.event_id}: referral {referral.id} not active yet")
        return CommissionResult(CommissionStatus.INACTIVE_REFERRAL)

    existing = await _find_commission(db, event.event_id)
    if existing is not None:
        logger.info(f"Commission for event {event.event_id} already credited (id={existing.id})")
        return CommissionResult(CommissionStatus.DUPLICATE, transaction=existing)

    try:
        async with db.begin_nested():
            commission = await _write_commission(db, event, amount)
    except IntegrityError as e:
        # Another worker credited the same event between our check and insert
        existing = await _find_commission(db, event.event_id)
        if existing is not None:
            logger.info(f"Commission for event {event.event_id} credited concurrently")
            return CommissionResult(CommissionStatus.DUPLICATE, transaction=existing)
        return await _handle_failure(db, event, e, queue_on_failure)
    except (SQLAlchemyError, YeildError) as e:
        return await _handle_failure(db, event, e, queue_on_failure)

    logger.info(
        f"Credited {amount} commission points to referrer {event.referrer_user_id} "
        f"for event {event.event_id}"
    )
    return CommissionResult(CommissionStatus.CREDITED, transaction=commission)


async def _handle_failure(
    db: AsyncSession,
    event: PointsEarnedEvent,
    error: Exception,
    queue_on_failure: bool,
) -> CommissionResult:
    logger.error(
        f"Commission credit failed for event {event.event_id} "
        f"(referrer={event.referrer_user_id}): {error}",
        exc_info=error,
    )
    if queue_on_failure:
        await queue_reconciliation(db, event, str(error))
    return CommissionResult(CommissionStatus.FAILED, error=str(error))


async def retry_pending_reconciliations(
    db: AsyncSession,
    max_attempts: Optional[int] = None,
    batch_size: int = 100,
) -> int:
    """
    Retry queued commission credits.

    Returns:
        Number of entries resolved in this run
    """
    if max_attempts is None:
        max_attempts = settings.reconciliation_max_attempts

    result = await db.execute(
        select(CommissionReconciliation)
        .where(CommissionReconciliation.status == ReconciliationStatus.PENDING)
        .order_by(CommissionReconciliation.created_at)
        .limit(batch_size)
    )
    entries = result.scalars().all()

    resolved = 0
    for entry in entries:
        entry.attempts += 1
        await db.flush()
        event = PointsEarnedEvent(
            event_id=entry.source_event_id,
            user_id=entry.referred_user_id,
            points=entry.points_earned,
            referrer_user_id=entry.referrer_user_id,
        )
        outcome = await credit_referral_commission(db, event, queue_on_failure=False)

        if outcome.status in (CommissionStatus.CREDITED, CommissionStatus.DUPLICATE):
            entry.status = ReconciliationStatus.RESOLVED
            entry.resolved_at = datetime.now(timezone.utc)
            entry.error_message = None
            resolved += 1
        elif outcome.status == CommissionStatus.FAILED:
            entry.error_message = outcome.error
            if entry.attempts >= max_attempts:
                entry.status = ReconciliationStatus.ABANDONED
                logger.error(
                    f"Commission for event {entry.source_event_id} abandoned "
                    f"after {entry.attempts} attempts"
                )
        else:
            # Referral vanished or was deactivated since the failure
            entry.status = ReconciliationStatus.ABANDONED
            entry.error_message = f"Not eligible on retry: {outcome.status.value}"

    await db.flush()
    return resolved


async def get_commission_earnings(
    db: AsyncSession,
    referrer_id: int,
    limit: int = 50,
) -> list[CommissionTransaction]:
    """Latest commission transactions credited to a referrer."""
    result = await db.execute(
        select(CommissionTransaction)
        .where(CommissionTransaction.referrer_user_id == referrer_id)
        .order_by(CommissionTransaction.created_at.desc(), CommissionTransaction.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_total_commission(db: AsyncSession, referrer_id: int) -> int:
    """Sum of all commission points a referrer has earned."""
    total = await db.scalar(
        select(func.coalesce(func.sum(CommissionTransaction.points), 0)).where(
            CommissionTransaction.referrer_user_id == referrer_id
        )
    )
    return int(total or 0)
