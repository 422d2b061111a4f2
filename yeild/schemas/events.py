"""Inbound event and point award schemas."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from yeild.services.commission import CommissionResult, PointsEarnedEvent


class PointsEarnedRequest(BaseModel):
    """Inbound points_earned event from the data backend."""

    type: Literal["points_earned"] = "points_earned"
    event_id: str = Field(..., min_length=1, max_length=64)
    user_id: int = Field(..., gt=0)
    points: int = Field(..., gt=0)
    referrer_user_id: Optional[int] = Field(None, gt=0)
    description: Optional[str] = Field(None, max_length=500)

    def to_event(self) -> PointsEarnedEvent:
        return PointsEarnedEvent(
            event_id=self.event_id,
            user_id=self.user_id,
            points=self.points,
            referrer_user_id=self.referrer_user_id,
        )


class CommissionOutcome(BaseModel):
    status: str
    commission_id: Optional[int] = None
    points: Optional[int] = None

    @classmethod
    def from_result(cls, result: Optional[CommissionResult]) -> Optional["CommissionOutcome"]:
        if result is None:
            return None
        return cls(
            status=result.status.value,
            commission_id=result.transaction.id if result.transaction else None,
            points=result.transaction.points if result.transaction else None,
        )


class AwardResponse(BaseModel):
    transaction_id: int
    points: int
    duplicate: bool = False
    referral_activated: bool = False
    commission: Optional[CommissionOutcome] = None
