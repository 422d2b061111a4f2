"""Pydantic schemas for request/response validation."""

from yeild.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from yeild.schemas.events import (
    AwardResponse,
    CommissionOutcome,
    PointsEarnedRequest,
)
from yeild.schemas.progress import ProgressResponse, TierResponse, UserStatsResponse
from yeild.schemas.referral import (
    CommissionDashboardResponse,
    CommissionTransactionResponse,
    ReferralResponse,
    ReferralSignupRequest,
    ReferralSummaryResponse,
)
from yeild.schemas.task import (
    TaskApprovalRequest,
    TaskApprovalResponse,
    TaskPointPreviewRequest,
    TaskPointPreviewResponse,
)

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    # Events
    "PointsEarnedRequest",
    "AwardResponse",
    "CommissionOutcome",
    # Progress
    "ProgressResponse",
    "TierResponse",
    "UserStatsResponse",
    # Referral
    "ReferralSignupRequest",
    "ReferralResponse",
    "ReferralSummaryResponse",
    "CommissionTransactionResponse",
    "CommissionDashboardResponse",
    # Task
    "TaskApprovalRequest",
    "TaskApprovalResponse",
    "TaskPointPreviewRequest",
    "TaskPointPreviewResponse",
]
