"""
Bird level progression.

Rules:
- Current tier: highest tier whose task AND points thresholds are met
- Progress to the next tier: tasks weigh 60%, points weigh 40%
- Referral speed bonus: 5% per active referral, capped at 50%.
  Shown as a separate badge, never added to progress.
- Level-up fires only on a strict increase over a known previous tier
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from yeild.services.tiers import TierDefinition

TASK_WEIGHT = 0.6
POINTS_WEIGHT = 0.4

REFERRAL_BONUS_STEP = 5   # percent per active referral
REFERRAL_BONUS_CAP = 50   # percent


def _non_negative(value) -> int:
    """Coerce a counter to a non-negative int. Junk and infinities become 0."""
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


@dataclass
class UserStats:
    user_id: Optional[int] = None
    points: int = 0
    tasks_completed: int = 0
    active_referrals_count: int = 0

    def __post_init__(self):
        self.points = _non_negative(self.points)
        self.tasks_completed = _non_negative(self.tasks_completed)
        self.active_referrals_count = _non_negative(self.active_referrals_count)

    @classmethod
    def from_profile(cls, profile) -> "UserStats":
        return cls(
            user_id=profile.id,
            points=profile.points,
            tasks_completed=profile.tasks_completed,
            active_referrals_count=profile.active_referrals_count,
        )


@dataclass(frozen=True)
class ProgressResult:
    current_tier: TierDefinition
    next_tier: Optional[TierDefinition]
    progress_percent: float
    referral_bonus_percent: Optional[float]
    task_progress: float = 100.0
    points_progress: float = 100.0
    tasks_needed: int = 0
    points_needed: int = 0
    referrals_needed: int = 0

    @property
    def is_max_level(self) -> bool:
        return self.next_tier is None


def _ratio_percent(value: int, target: int) -> float:
    """Share of target reached, as a percentage in [0, 100]."""
    if target <= 0 or value >= target:
        return 100.0
    return value / target * 100


def find_current_tier(stats: UserStats, tiers: Sequence[TierDefinition]) -> TierDefinition:
    """
    Walk tiers in ascending order and return the last one fully satisfied.

    The walk stops at the first unmet tier, so a user never skips a level.
    """
    current = tiers[0]
    for tier in tiers:
        if stats.tasks_completed >= tier.min_tasks and stats.points >= tier.min_points:
            current = tier
        else:
            break
    return current


def referral_bonus_percent(
    active_referrals: int,
    step: int = REFERRAL_BONUS_STEP,
    cap: int = REFERRAL_BONUS_CAP,
) -> Optional[float]:
    """Referral speed bonus badge value, or None when there is nothing to show."""
    active_referrals = _non_negative(active_referrals)
    if active_referrals == 0:
        return None
    return float(min(active_referrals * step, cap))


def compute_progress(
    stats: UserStats,
    tiers: Sequence[TierDefinition],
    bonus_step: int = REFERRAL_BONUS_STEP,
    bonus_cap: int = REFERRAL_BONUS_CAP,
) -> ProgressResult:
    """
    Derive the user's bird level and progress toward the next one.

    Args:
        stats: User counters (already clamped to non-negative)
        tiers: Validated tier table, ascending by id
        bonus_step: Referral bonus percent per active referral
        bonus_cap: Maximum referral bonus percent

    Returns:
        ProgressResult. At max level progress is 100 and no bonus is shown.
    """
    current = find_current_tier(stats, tiers)
    index = tiers.index(current)
    next_tier = tiers[index + 1] if index + 1 < len(tiers) else None

    if next_tier is None:
        return ProgressResult(
            current_tier=current,
            next_tier=None,
            progress_percent=100.0,
            referral_bonus_percent=None,
        )

    task_progress = _ratio_percent(stats.tasks_completed, next_tier.min_tasks)
    points_progress = _ratio_percent(stats.points, next_tier.min_points)
    progress = task_progress * TASK_WEIGHT + points_progress * POINTS_WEIGHT

    return ProgressResult(
        current_tier=current,
        next_tier=next_tier,
        progress_percent=round(min(max(progress, 0.0), 100.0), 4),
        referral_bonus_percent=referral_bonus_percent(
            stats.active_referrals_count, bonus_step, bonus_cap
        ),
        task_progress=task_progress,
        points_progress=points_progress,
        tasks_needed=max(0, next_tier.min_tasks - stats.tasks_completed),
        points_needed=max(0, next_tier.min_points - stats.points),
        referrals_needed=max(0, next_tier.min_referrals - stats.active_referrals_count),
    )


def detect_level_up(
    previous: Optional[TierDefinition],
    current: Optional[TierDefinition],
) -> bool:
    """
    True only when the level strictly increased since the previous read.

    A missing previous tier (first computation) never celebrates, and
    neither does a downgrade.
    """
    if previous is None or current is None:
        return False
    return current.id > previous.id
