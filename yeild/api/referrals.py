"""Referral and commission API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from yeild.auth.dependencies import get_current_user
from yeild.db import get_db
from yeild.models import Profile, User
from yeild.schemas.referral import (
    CommissionDashboardResponse,
    CommissionTransactionResponse,
    ReferralResponse,
    ReferralSignupRequest,
    ReferralSummaryResponse,
)
from yeild.services.commission import get_commission_earnings, get_total_commission
from yeild.services.errors import ProfileNotFoundError, ReferralError
from yeild.services.referrals import list_referrals, process_referral_signup

router = APIRouter(tags=["Referrals"])


async def _get_profile(db: AsyncSession, user: User) -> Profile:
    profile = await db.get(Profile, user.id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return profile


@router.post("/referrals/signup", response_model=ReferralResponse, status_code=201)
async def referral_signup(
    data: ReferralSignupRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Attach the current user to the owner of a referral code."""
    try:
        referral = await process_referral_signup(db, data.referral_code, current_user.id)
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    except ReferralError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return referral


@router.get("/referrals/me", response_model=ReferralSummaryResponse)
async def my_referrals(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Referral code and everyone the current user has referred."""
    profile = await _get_profile(db, current_user)
    referrals = await list_referrals(db, profile.id)
    return ReferralSummaryResponse(
        referral_code=profile.referral_code,
        total_referrals_count=profile.total_referrals_count,
        active_referrals_count=profile.active_referrals_count,
        referrals=[ReferralResponse.model_validate(r) for r in referrals],
    )


@router.get("/commissions/me", response_model=CommissionDashboardResponse)
async def my_commissions(
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Commission earned from referred users."""
    profile = await _get_profile(db, current_user)
    earnings = await get_commission_earnings(db, profile.id, limit=limit)
    total = await get_total_commission(db, profile.id)
    return CommissionDashboardResponse(
        total_commission=total,
        transactions=[CommissionTransactionResponse.model_validate(e) for e in earnings],
    )
