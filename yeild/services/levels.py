"""
Bird level reads for a stored profile.

Wraps the pure progression rules with the per-profile display cache:
last_tier_id remembers the tier shown on the previous read so a level-up
notification fires exactly once, and phoenix_welcome_shown gates the
one-time max level welcome.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from yeild.config import settings
from yeild.models import Profile
from yeild.services.errors import ProfileNotFoundError
from yeild.services.progression import ProgressResult, UserStats, compute_progress, detect_level_up
from yeild.services.tiers import TierDefinition, get_tier_by_id, get_tiers

logger = logging.getLogger(__name__)


@dataclass
class LevelStatus:
    stats: UserStats
    progress: ProgressResult
    level_up: bool
    show_phoenix_welcome: bool


def evaluate_profile(
    profile: Profile,
    tiers: Optional[Sequence[TierDefinition]] = None,
    update_cache: bool = True,
) -> LevelStatus:
    """
    Compute progress for a profile and compare against the cached tier.

    With update_cache the profile's last_tier_id is moved to the current
    tier; the caller's session commits it.
    """
    tiers = tiers if tiers is not None else get_tiers()
    stats = UserStats.from_profile(profile)
    progress = compute_progress(
        stats,
        tiers,
        bonus_step=settings.referral_bonus_step_percent,
        bonus_cap=settings.referral_bonus_cap_percent,
    )

    previous = None
    if profile.last_tier_id is not None:
        previous = get_tier_by_id(profile.last_tier_id, tiers)
    level_up = detect_level_up(previous, progress.current_tier)

    if update_cache and profile.last_tier_id != progress.current_tier.id:
        if level_up:
            logger.info(
                f"Profile {profile.id} leveled up to {progress.current_tier.name}"
            )
        profile.last_tier_id = progress.current_tier.id

    show_welcome = progress.is_max_level and not profile.phoenix_welcome_shown

    return LevelStatus(
        stats=stats,
        progress=progress,
        level_up=level_up,
        show_phoenix_welcome=show_welcome,
    )


async def get_level_status(
    db: AsyncSession,
    user_id: int,
    update_cache: bool = True,
) -> LevelStatus:
    profile = await db.get(Profile, user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)
    status = evaluate_profile(profile, update_cache=update_cache)
    if update_cache:
        await db.flush()
    return status


async def mark_phoenix_welcome_shown(db: AsyncSession, user_id: int) -> Profile:
    profile = await db.get(Profile, user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)
    profile.phoenix_welcome_shown = True
    await db.flush()
    return profile
