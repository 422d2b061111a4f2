"""
User account and reward profile models.
"""

import secrets
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from yeild.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from yeild.models.ledger import PointTransaction


class UserRole(str, Enum):
    """User roles for access control."""
    USER = "user"
    BRAND = "brand"
    ADMIN = "admin"


def generate_referral_code() -> str:
    """Generate a short shareable referral code."""
    return secrets.token_hex(4).upper()


class User(Base, TimestampMixin):
    """
    Login account.

    - user: earns points, refers others
    - brand: funds campaigns, no reward profile required
    - admin: approves tasks and posts inbound point events
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    role: Mapped[UserRole] = mapped_column(
        SQLAlchemyEnum(
            UserRole,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=UserRole.USER,
        nullable=False,
    )
    display_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    last_active_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    profile: Mapped[Optional["Profile"]] = relationship(
        "Profile",
        back_populates="user",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role={self.role})>"


class Profile(Base, TimestampMixin):
    """
    Reward counters for a user.

    points, tasks_completed and active_referrals_count feed the bird level
    calculation. last_tier_id is a display cache used only to detect level-ups.
    """

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    referral_code: Mapped[str] = mapped_column(
        String(16),
        unique=True,
        index=True,
        nullable=False,
        default=generate_referral_code,
    )
    points: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )
    tasks_completed: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )
    active_referrals_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )
    total_referrals_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )
    last_tier_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Tier id seen on the previous progress read",
    )
    phoenix_welcome_shown: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default="false",
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="profile")
    transactions: Mapped[List["PointTransaction"]] = relationship(
        "PointTransaction",
        back_populates="profile",
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, points={self.points}, tasks={self.tasks_completed})>"
