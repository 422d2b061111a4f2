"""Inbound point events from the data backend."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from yeild.auth.dependencies import require_admin
from yeild.db import get_db
from yeild.models import User
from yeild.schemas.events import AwardResponse, CommissionOutcome, PointsEarnedRequest
from yeild.services.errors import ProfileNotFoundError
from yeild.services.points import record_points_earned

router = APIRouter(prefix="/events")


@router.post("/points-earned", response_model=AwardResponse)
async def points_earned(
    data: PointsEarnedRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Apply a points_earned event.

    Replays of the same event_id are acknowledged without a second award
    or a second commission.
    """
    try:
        result = await record_points_earned(db, data.to_event(), description=data.description)
    except ProfileNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    return AwardResponse(
        transaction_id=result.transaction.id,
        points=result.transaction.points,
        duplicate=result.duplicate,
        referral_activated=result.referral_activated,
        commission=CommissionOutcome.from_result(result.commission),
    )
