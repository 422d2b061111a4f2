"""Bird level progress API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from yeild.auth.dependencies import get_current_user
from yeild.db import get_db
from yeild.models import User
from yeild.schemas.progress import ProgressResponse, TierResponse
from yeild.schemas.task import TaskPointPreviewRequest, TaskPointPreviewResponse
from yeild.services.errors import ProfileNotFoundError
from yeild.services.levels import get_level_status, mark_phoenix_welcome_shown
from yeild.services.task_points import preview_points_for_tiers
from yeild.services.tiers import get_tiers

router = APIRouter(tags=["Progress"])


@router.get("/tiers", response_model=List[TierResponse])
async def list_tiers():
    """All bird levels in ascending order."""
    return [TierResponse.from_tier(tier) for tier in get_tiers()]


@router.post("/tiers/preview", response_model=TaskPointPreviewResponse)
async def preview_task_points(data: TaskPointPreviewRequest):
    """Points a task would pay at each bird level."""
    return TaskPointPreviewResponse(
        points_by_level=preview_points_for_tiers(data.to_factors()),
    )


@router.get("/progress/me", response_model=ProgressResponse)
async def get_my_progress(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Current user's bird level and progress.

    Also reports whether the level went up since the previous read.
    """
    try:
        level = await get_level_status(db, current_user.id)
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return ProgressResponse.from_status(current_user.id, level)


@router.post("/progress/phoenix-welcome")
async def dismiss_phoenix_welcome(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Mark the one-time Phoenix welcome as shown."""
    try:
        await mark_phoenix_welcome_shown(db, current_user.id)
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return {"success": True}
