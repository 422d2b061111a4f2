"""Task approval schemas."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from yeild.schemas.events import CommissionOutcome
from yeild.services.task_points import TaskPointFactors


class TaskApprovalRequest(BaseModel):
    submission_id: str = Field(..., min_length=1, max_length=40)
    user_id: int = Field(..., gt=0)
    base_points: int = Field(..., gt=0, le=100000)
    difficulty: str = Field(default="medium", pattern="^(easy|medium|hard)$")
    category: str = Field(default="survey", max_length=50)
    quality_score: Optional[float] = Field(None, ge=0, le=100)
    time_spent_minutes: Optional[float] = Field(None, gt=0)

    def to_factors(self) -> TaskPointFactors:
        return TaskPointFactors(
            base_points=self.base_points,
            difficulty=self.difficulty,
            category=self.category,
            time_spent_minutes=self.time_spent_minutes,
            quality_score=self.quality_score,
        )


class TaskPointPreviewRequest(BaseModel):
    base_points: int = Field(..., gt=0, le=100000)
    difficulty: str = Field(default="medium", pattern="^(easy|medium|hard)$")
    category: str = Field(default="survey", max_length=50)
    quality_score: Optional[float] = Field(None, ge=0, le=100)
    time_spent_minutes: Optional[float] = Field(None, gt=0)

    def to_factors(self) -> TaskPointFactors:
        return TaskPointFactors(
            base_points=self.base_points,
            difficulty=self.difficulty,
            category=self.category,
            time_spent_minutes=self.time_spent_minutes,
            quality_score=self.quality_score,
        )


class TaskApprovalResponse(BaseModel):
    transaction_id: int
    final_points: int
    # Empty on duplicate approvals
    bird_level: Optional[str] = None
    bird_bonus_points: Optional[int] = None
    explanation: List[str] = Field(default_factory=list)
    duplicate: bool = False
    referral_activated: bool = False
    commission: Optional[CommissionOutcome] = None


class TaskPointPreviewResponse(BaseModel):
    points_by_level: Dict[str, int]
