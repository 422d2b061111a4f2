"""Reward rules and workflows."""

from yeild.services.commission import (
    CommissionResult,
    CommissionStatus,
    PointsEarnedEvent,
    credit_referral_commission,
)
from yeild.services.errors import (
    ProfileNotFoundError,
    ReferralError,
    TierConfigurationError,
    YeildError,
)
from yeild.services.progression import (
    ProgressResult,
    UserStats,
    compute_progress,
    detect_level_up,
)
from yeild.services.tiers import TierDefinition, get_tiers, validate_tiers

__all__ = [
    "CommissionResult",
    "CommissionStatus",
    "PointsEarnedEvent",
    "credit_referral_commission",
    "ProfileNotFoundError",
    "ReferralError",
    "TierConfigurationError",
    "YeildError",
    "ProgressResult",
    "UserStats",
    "compute_progress",
    "detect_level_up",
    "TierDefinition",
    "get_tiers",
    "validate_tiers",
]
