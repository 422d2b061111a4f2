"""Bird level and progress schemas."""

from typing import List, Optional

from pydantic import BaseModel

from yeild.services.levels import LevelStatus
from yeild.services.tiers import TierDefinition


class TierResponse(BaseModel):
    """One bird level."""

    id: int
    name: str
    icon: str
    color: str
    description: str
    min_referrals: int
    min_points: int
    min_tasks: int
    benefits: List[str]
    earning_bonus_percent: float

    @classmethod
    def from_tier(cls, tier: TierDefinition) -> "TierResponse":
        return cls(
            id=tier.id,
            name=tier.name,
            icon=tier.icon,
            color=tier.color,
            description=tier.description,
            min_referrals=tier.min_referrals,
            min_points=tier.min_points,
            min_tasks=tier.min_tasks,
            benefits=list(tier.benefits),
            earning_bonus_percent=round(tier.earning_bonus * 100, 2),
        )


class UserStatsResponse(BaseModel):
    points: int
    tasks_completed: int
    active_referrals_count: int


class ProgressResponse(BaseModel):
    """Derived bird level for display. Never stored."""

    user_id: int
    stats: UserStatsResponse
    current_tier: TierResponse
    next_tier: Optional[TierResponse] = None
    progress_percent: float
    task_progress: float
    points_progress: float
    # Display-only badge, not part of progress_percent
    referral_bonus_percent: Optional[float] = None
    tasks_needed: int = 0
    points_needed: int = 0
    referrals_needed: int = 0
    is_max_level: bool = False
    level_up: bool = False
    show_phoenix_welcome: bool = False

    @classmethod
    def from_status(cls, user_id: int, status: LevelStatus) -> "ProgressResponse":
        progress = status.progress
        return cls(
            user_id=user_id,
            stats=UserStatsResponse(
                points=status.stats.points,
                tasks_completed=status.stats.tasks_completed,
                active_referrals_count=status.stats.active_referrals_count,
            ),
            current_tier=TierResponse.from_tier(progress.current_tier),
            next_tier=TierResponse.from_tier(progress.next_tier) if progress.next_tier else None,
            progress_percent=round(progress.progress_percent, 2),
            task_progress=round(progress.task_progress, 2),
            points_progress=round(progress.points_progress, 2),
            referral_bonus_percent=progress.referral_bonus_percent,
            tasks_needed=progress.tasks_needed,
            points_needed=progress.points_needed,
            referrals_needed=progress.referrals_needed,
            is_max_level=progress.is_max_level,
            level_up=status.level_up,
            show_phoenix_welcome=status.show_phoenix_welcome,
        )
