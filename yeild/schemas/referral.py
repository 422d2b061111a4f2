"""Referral and commission schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ReferralSignupRequest(BaseModel):
    referral_code: str = Field(..., min_length=4, max_length=16)


class ReferralResponse(BaseModel):
    id: int
    referrer_id: int
    referred_id: int
    referral_code: str
    is_active: bool
    activated_at: Optional[datetime] = None
    points_awarded: int = 0
    created_at: datetime

    model_config = {"from_attributes": True}


class ReferralSummaryResponse(BaseModel):
    referral_code: str
    total_referrals_count: int
    active_referrals_count: int
    referrals: List[ReferralResponse]


class CommissionTransactionResponse(BaseModel):
    id: int
    referred_user_id: int
    points: int
    description: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CommissionDashboardResponse(BaseModel):
    total_commission: int
    transactions: List[CommissionTransactionResponse]
