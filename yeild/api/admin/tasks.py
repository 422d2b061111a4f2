"""Task approval endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from yeild.auth.dependencies import require_admin
from yeild.db import get_db
from yeild.models import User
from yeild.schemas.events import CommissionOutcome
from yeild.schemas.progress import ProgressResponse
from yeild.schemas.task import TaskApprovalRequest, TaskApprovalResponse
from yeild.services.errors import ProfileNotFoundError
from yeild.services.levels import get_level_status
from yeild.services.points import approve_task_submission

router = APIRouter()


@router.post("/tasks/approve", response_model=TaskApprovalResponse)
async def approve_task(
    data: TaskApprovalRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Approve a task submission and pay its bird-boosted points."""
    try:
        result = await approve_task_submission(
            db,
            submission_id=data.submission_id,
            user_id=data.user_id,
            factors=data.to_factors(),
        )
    except ProfileNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    award = result.award
    calculation = result.calculation
    return TaskApprovalResponse(
        transaction_id=award.transaction.id,
        final_points=award.transaction.points,
        bird_level=calculation.bird_level if calculation else None,
        bird_bonus_points=calculation.bird_bonus_points if calculation else None,
        explanation=calculation.explanation if calculation else [],
        duplicate=award.duplicate,
        referral_activated=award.referral_activated,
        commission=CommissionOutcome.from_result(award.commission),
    )


@router.get("/progress/{user_id}", response_model=ProgressResponse)
async def get_user_progress(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Any user's progress. Does not touch their level-up cache."""
    try:
        level = await get_level_status(db, user_id, update_cache=False)
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return ProgressResponse.from_status(user_id, level)
