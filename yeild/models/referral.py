"""
Referral relationship model.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from yeild.models.base import Base, TimestampMixin


class Referral(Base, TimestampMixin):
    """
    A referrer -> referred link.

    Created inactive at signup. Becomes active once the referred user
    completes a task or reaches the activation points threshold.
    A user can be referred only once.
    """

    __tablename__ = "referrals"

    id: Mapped[int] = mapped_column(primary_key=True)
    referrer_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    referred_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"),
        unique=True,
        index=True,
        nullable=False,
    )
    referral_code: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default="false",
        nullable=False,
        index=True,
    )
    activated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    points_awarded: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        comment="Activation bonus paid to the referrer",
    )

    def __repr__(self) -> str:
        return (
            f"<Referral(id={self.id}, referrer={self.referrer_id}, "
            f"referred={self.referred_id}, active={self.is_active})>"
        )
