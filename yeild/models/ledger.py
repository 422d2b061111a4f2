"""
Ledger models for point tracking.

Both tables are append-only: rows are inserted, never updated.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from yeild.models.base import Base, CreatedAtMixin

if TYPE_CHECKING:
    from yeild.models.user import Profile


class PointTransactionType(str, Enum):
    """Why points moved."""
    TASK_REWARD = "task_reward"
    REFERRAL_BONUS = "referral_bonus"
    REFERRAL_COMMISSION = "referral_commission"
    EXTERNAL = "external"
    ADJUSTMENT = "adjustment"


class PointTransaction(Base, CreatedAtMixin):
    """Every change to a profile's point balance."""

    __tablename__ = "point_transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    points: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    transaction_type: Mapped[PointTransactionType] = mapped_column(
        SQLAlchemyEnum(
            PointTransactionType,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
        index=True,
    )
    reference_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        comment="Task submission, referral or external event that caused the change",
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    profile: Mapped["Profile"] = relationship("Profile", back_populates="transactions")

    def __repr__(self) -> str:
        return (
            f"<PointTransaction(id={self.id}, user_id={self.user_id}, "
            f"points={self.points}, type={self.transaction_type})>"
        )


class CommissionTransaction(Base, CreatedAtMixin):
    """
    Commission credited to a referrer when a referred user earns points.

    source_event_id is the id of the point-earning event that triggered the
    commission. The unique constraint makes crediting at-most-once per event
    even when several workers handle the same event.
    """

    __tablename__ = "commission_transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    referrer_user_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    referred_user_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    points: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    source_event_id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<CommissionTransaction(id={self.id}, referrer={self.referrer_user_id}, "
            f"event={self.source_event_id})>"
        )
