"""
Point award workflows.

Every award appends a PointTransaction and updates the profile counters.
Awards earned by a referred user then:
1. activate the user's pending referral if they now qualify
2. credit the referrer's commission (best-effort, see services.commission),
   keyed on the id of the awarding ledger row
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yeild.models import PointTransaction, PointTransactionType, Profile
from yeild.services.commission import (
    CommissionResult,
    PointsEarnedEvent,
    credit_referral_commission,
)
from yeild.services.errors import ProfileNotFoundError
from yeild.services.progression import UserStats, find_current_tier
from yeild.services.referrals import check_referral_activation, get_referral_for
from yeild.services.task_points import TaskPointFactors, TaskPointResult, calculate_task_points
from yeild.services.tiers import get_tiers

logger = logging.getLogger(__name__)


@dataclass
class AwardResult:
    transaction: PointTransaction
    referral_activated: bool = False
    commission: Optional[CommissionResult] = None
    duplicate: bool = False


@dataclass
class TaskApprovalResult:
    award: AwardResult
    # None when the submission was already rewarded
    calculation: Optional[TaskPointResult] = None


async def find_transaction(
    db: AsyncSession,
    reference_id: str,
    transaction_type: PointTransactionType,
    user_id: Optional[int] = None,
) -> Optional[PointTransaction]:
    query = select(PointTransaction).where(
        PointTransaction.reference_id == reference_id,
        PointTransaction.transaction_type == transaction_type,
    )
    if user_id is not None:
        query = query.where(PointTransaction.user_id == user_id)
    return await db.scalar(query)


def commission_event(
    transaction: PointTransaction,
    referrer_user_id: Optional[int],
) -> PointsEarnedEvent:
    """
    Commission trigger for an award.

    Keyed on the ledger row id, so inbound event ids and task submission
    ids can never claim each other's commission.
    """
    return PointsEarnedEvent(
        event_id=f"point_transaction:{transaction.id}",
        user_id=transaction.user_id,
        points=transaction.points,
        referrer_user_id=referrer_user_id,
    )


async def award_points(
    db: AsyncSession,
    user_id: int,
    points: int,
    transaction_type: PointTransactionType,
    reference_id: Optional[str] = None,
    description: Optional[str] = None,
    task_completed: bool = False,
) -> PointTransaction:
    """
    Credit points to a profile and append the ledger row.

    The balance never goes below zero; the ledger records the delta
    actually applied, so the ledger sum always equals the balance.

    Raises:
        ProfileNotFoundError: no profile for user_id
    """
    profile = await db.get(Profile, user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)

    new_balance = max(profile.points + points, 0)
    applied = new_balance - profile.points
    profile.points = new_balance
    if task_completed:
        profile.tasks_completed += 1

    transaction = PointTransaction(
        user_id=user_id,
        points=applied,
        transaction_type=transaction_type,
        reference_id=reference_id,
        description=description,
    )
    db.add(transaction)
    await db.flush()

    logger.info(f"Awarded {applied} points to {user_id} ({transaction_type.value}, ref={reference_id})")
    return transaction


async def record_points_earned(
    db: AsyncSession,
    event: PointsEarnedEvent,
    description: Optional[str] = None,
) -> AwardResult:
    """
    Apply an inbound points_earned event.

    Replaying the same event_id returns the original transaction without
    awarding again. Commission is only attempted when the event names a
    referrer.
    """
    existing = await find_transaction(db, event.event_id, PointTransactionType.EXTERNAL)
    if existing is not None:
        logger.info(f"Event {event.event_id} already applied (transaction {existing.id})")
        return AwardResult(transaction=existing, duplicate=True)

    transaction = await award_points(
        db,
        user_id=event.user_id,
        points=event.points,
        transaction_type=PointTransactionType.EXTERNAL,
        reference_id=event.event_id,
        description=description or f"Points earned ({event.event_id})",
    )
    activated = await check_referral_activation(db, event.user_id)

    commission = None
    if event.referrer_user_id is not None and event.points > 0:
        commission = await credit_referral_commission(
            db, commission_event(transaction, event.referrer_user_id)
        )

    return AwardResult(
        transaction=transaction,
        referral_activated=activated,
        commission=commission,
    )


async def approve_task_submission(
    db: AsyncSession,
    submission_id: str,
    user_id: int,
    factors: TaskPointFactors,
) -> TaskApprovalResult:
    """
    Award the points of an approved task with the user's bird level bonus.

    The task submission id is the ledger reference, so approving the same
    submission for the same user twice is a no-op. The duplicate result
    carries the stored transaction and no fresh calculation.
    """
    profile = await db.get(Profile, user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)

    reference_id = f"task_submission:{submission_id}"
    existing = await find_transaction(
        db, reference_id, PointTransactionType.TASK_REWARD, user_id=user_id
    )
    if existing is not None:
        logger.info(f"Task submission {submission_id} already rewarded for {user_id}")
        return TaskApprovalResult(award=AwardResult(transaction=existing, duplicate=True))

    tier = find_current_tier(UserStats.from_profile(profile), get_tiers())
    calculation = calculate_task_points(factors, tier)

    transaction = await award_points(
        db,
        user_id=user_id,
        points=calculation.final_points,
        transaction_type=PointTransactionType.TASK_REWARD,
        reference_id=reference_id,
        description=f"Task approved ({tier.name} level)",
        task_completed=True,
    )
    activated = await check_referral_activation(db, user_id)

    commission = None
    referral = await get_referral_for(db, user_id)
    if referral is not None and calculation.final_points > 0:
        commission = await credit_referral_commission(
            db, commission_event(transaction, referral.referrer_id)
        )

    return TaskApprovalResult(
        award=AwardResult(
            transaction=transaction,
            referral_activated=activated,
            commission=commission,
        ),
        calculation=calculation,
    )
