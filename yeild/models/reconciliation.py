"""
Queue of commission credits that failed to persist.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from yeild.models.base import Base


class ReconciliationStatus(str, Enum):
    """Status of a queued commission retry."""
    PENDING = "pending"      # Waiting to be retried
    RESOLVED = "resolved"    # Credited (or found already credited)
    ABANDONED = "abandoned"  # Gave up after max attempts


class CommissionReconciliation(Base):
    """
    Failed commission credit waiting for a retry.

    Rows are added by the commission service when the credit write fails
    and are processed by the reconciliation scheduler job.
    No foreign keys: the row must be insertable even when the failure
    was caused by a missing profile.
    """

    __tablename__ = "commission_reconciliations"

    id: Mapped[int] = mapped_column(primary_key=True)
    source_event_id: Mapped[str] = mapped_column(
        String(64),
        index=True,
        nullable=False,
    )
    referrer_user_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    referred_user_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    points_earned: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Points of the triggering event",
    )
    status: Mapped[ReconciliationStatus] = mapped_column(
        SQLAlchemyEnum(
            ReconciliationStatus,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=ReconciliationStatus.PENDING,
        nullable=False,
        index=True,
    )
    attempts: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    error_message: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Error details of the last failed attempt",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    resolved_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<CommissionReconciliation(id={self.id}, event={self.source_event_id}, status={self.status})>"
