"""
Bird level tier table.

One ordered table holds every threshold (referrals, points, tasks) so the
progress calculator and the point bonus calculator read the same numbers.

Levels:
- Dove: floor level, every user starts here
- Sparrow, Hawk, Eagle, Falcon
- Phoenix: max level
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from yeild.services.errors import TierConfigurationError


@dataclass(frozen=True)
class TierDefinition:
    id: int
    name: str
    min_referrals: int
    min_points: int
    min_tasks: int
    icon: str
    color: str
    description: str = ""
    benefits: tuple[str, ...] = field(default_factory=tuple)
    # Extra share of base points added to every task reward
    earning_bonus: float = 0.0


DEFAULT_TIERS: tuple[TierDefinition, ...] = (
    TierDefinition(
        id=0,
        name="Dove",
        min_referrals=0,
        min_points=0,
        min_tasks=0,
        icon="🕊️",
        color="#94A3B8",
        description="Starting your journey",
        benefits=("Basic community access",),
        earning_bonus=0.0,
    ),
    TierDefinition(
        id=1,
        name="Sparrow",
        min_referrals=5,
        min_points=250,
        min_tasks=5,
        icon="🐦",
        color="#A78BFA",
        description="Building momentum",
        benefits=("Enhanced task visibility", "+10% task points"),
        earning_bonus=0.10,
    ),
    TierDefinition(
        id=2,
        name="Hawk",
        min_referrals=20,
        min_points=1000,
        min_tasks=20,
        icon="🦅",
        color="#34D399",
        description="Active community builder",
        benefits=("Priority task queue", "+15% task points"),
        earning_bonus=0.15,
    ),
    TierDefinition(
        id=3,
        name="Eagle",
        min_referrals=50,
        min_points=2500,
        min_tasks=50,
        icon="🦅",
        color="#F59E0B",
        description="Skilled referral expert",
        benefits=("Exclusive task access", "+20% task points"),
        earning_bonus=0.20,
    ),
    TierDefinition(
        id=4,
        name="Falcon",
        min_referrals=100,
        min_points=5000,
        min_tasks=100,
        icon="🦅",
        color="#8B5CF6",
        description="Master of networking",
        benefits=("Elite task access", "+25% task points", "Dedicated support"),
        earning_bonus=0.25,
    ),
    TierDefinition(
        id=5,
        name="Phoenix",
        min_referrals=500,
        min_points=25000,
        min_tasks=250,
        icon="🔥",
        color="#F97316",
        description="Legendary champion",
        benefits=("VIP access", "+30% task points", "Priority support"),
        earning_bonus=0.30,
    ),
)


def get_tiers() -> tuple[TierDefinition, ...]:
    """Return the tier table ordered by ascending id."""
    return DEFAULT_TIERS


def validate_tiers(tiers: Sequence[TierDefinition]) -> None:
    """
    Check the tier table invariants.

    Raises:
        TierConfigurationError: empty table, missing zero floor tier,
            ids not strictly ascending or a threshold that decreases.
    """
    if not tiers:
        raise TierConfigurationError("Tier table is empty")

    floor = tiers[0]
    if floor.id != 0:
        raise TierConfigurationError(f"First tier must have id 0, got {floor.id}")
    if floor.min_referrals or floor.min_points or floor.min_tasks:
        raise TierConfigurationError(f"Floor tier {floor.name} must have zero thresholds")

    for prev, tier in zip(tiers, tiers[1:]):
        if tier.id <= prev.id:
            raise TierConfigurationError(
                f"Tier ids must be strictly ascending: {prev.id} then {tier.id}"
            )
        for attr in ("min_referrals", "min_points", "min_tasks"):
            if getattr(tier, attr) < getattr(prev, attr):
                raise TierConfigurationError(
                    f"{attr} decreases from {prev.name} to {tier.name}"
                )


def get_tier_by_id(
    tier_id: int,
    tiers: Optional[Sequence[TierDefinition]] = None,
) -> Optional[TierDefinition]:
    """Look up a tier by id. Returns None for unknown ids."""
    for tier in tiers if tiers is not None else get_tiers():
        if tier.id == tier_id:
            return tier
    return None
