"""
Referral signup and activation.

A referral is created inactive when the new user signs up with a code.
It activates once the referred user completes a task or reaches the
activation points threshold. On activation the referrer gets a one-off
bonus that grows with their active referral count:

- fewer than 5 active referrals: 10 points
- fewer than 15: 20 points
- otherwise: 30 points
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from yeild.config import settings
from yeild.models import PointTransaction, PointTransactionType, Profile, Referral
from yeild.services.errors import ProfileNotFoundError, ReferralError

logger = logging.getLogger(__name__)


def calculate_referral_bonus_points(active_referrals_count: int) -> int:
    """Activation bonus for the referrer's next active referral."""
    if active_referrals_count < 5:
        return 10
    if active_referrals_count < 15:
        return 20
    return 30


def meets_activation_criteria(tasks_completed: int, points: int) -> bool:
    return (
        tasks_completed >= settings.activation_min_tasks
        or points >= settings.activation_min_points
    )


async def process_referral_signup(
    db: AsyncSession,
    referral_code: str,
    new_user_id: int,
) -> Referral:
    """
    Link a newly signed-up user to the owner of a referral code.

    Raises:
        ReferralError: unknown code, self-referral or user already referred
        ProfileNotFoundError: the new user has no profile
    """
    code = referral_code.strip().upper()
    referrer = await db.scalar(select(Profile).where(Profile.referral_code == code))
    if referrer is None:
        raise ReferralError("Invalid referral code")

    if referrer.id == new_user_id:
        raise ReferralError("You cannot refer yourself")

    if await db.get(Profile, new_user_id) is None:
        raise ProfileNotFoundError(new_user_id)

    existing = await db.scalar(select(Referral).where(Referral.referred_id == new_user_id))
    if existing is not None:
        raise ReferralError("User already referred by someone else")

    referral = Referral(
        referrer_id=referrer.id,
        referred_id=new_user_id,
        referral_code=code,
        is_active=False,
    )
    db.add(referral)
    referrer.total_referrals_count += 1
    await db.flush()
    await db.refresh(referral)

    logger.info(f"User {new_user_id} referred by {referrer.id} (referral {referral.id})")
    return referral


async def get_referral_for(db: AsyncSession, referred_id: int) -> Optional[Referral]:
    """The referral that brought this user in, if any."""
    return await db.scalar(select(Referral).where(Referral.referred_id == referred_id))


async def activate_referral(db: AsyncSession, referral: Referral) -> int:
    """
    Mark a referral active and pay the referrer's activation bonus.

    Returns:
        Points awarded to the referrer
    """
    referrer = await db.get(Profile, referral.referrer_id)
    if referrer is None:
        raise ProfileNotFoundError(referral.referrer_id)

    bonus = calculate_referral_bonus_points(referrer.active_referrals_count)

    referral.is_active = True
    referral.activated_at = datetime.now(timezone.utc)
    referral.points_awarded = bonus

    await db.execute(
        update(Profile)
        .where(Profile.id == referrer.id)
        .values(
            points=Profile.points + bonus,
            active_referrals_count=Profile.active_referrals_count + 1,
        )
    )
    db.add(
        PointTransaction(
            user_id=referrer.id,
            points=bonus,
            transaction_type=PointTransactionType.REFERRAL_BONUS,
            reference_id=f"referral:{referral.id}",
            description=f"Referral bonus: {bonus} points",
        )
    )
    await db.flush()

    logger.info(f"Referral {referral.id} activated, awarded {bonus} points to {referrer.id}")
    return bonus


async def check_referral_activation(db: AsyncSession, user_id: int) -> bool:
    """
    Activate the user's pending referral if they now qualify.

    Returns:
        True if a referral was activated by this call
    """
    profile = await db.get(Profile, user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)

    referral = await db.scalar(
        select(Referral).where(
            Referral.referred_id == user_id,
            Referral.is_active.is_(False),
        )
    )
    if referral is None:
        return False

    if not meets_activation_criteria(profile.tasks_completed, profile.points):
        return False

    await activate_referral(db, referral)
    return True


async def list_referrals(db: AsyncSession, referrer_id: int) -> list[Referral]:
    result = await db.execute(
        select(Referral)
        .where(Referral.referrer_id == referrer_id)
        .order_by(Referral.created_at.desc(), Referral.id.desc())
    )
    return list(result.scalars().all())
