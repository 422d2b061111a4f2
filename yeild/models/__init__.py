"""
Database models for YEILD.

All models are exported here for convenient imports:
    from yeild.models import Profile, Referral, CommissionTransaction, etc.
"""

from yeild.models.base import Base, CreatedAtMixin, TimestampMixin
from yeild.models.ledger import CommissionTransaction, PointTransaction, PointTransactionType
from yeild.models.reconciliation import CommissionReconciliation, ReconciliationStatus
from yeild.models.referral import Referral
from yeild.models.user import Profile, User, UserRole

__all__ = [
    # Base
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    # User
    "User",
    "UserRole",
    "Profile",
    # Referral
    "Referral",
    # Ledger
    "PointTransaction",
    "PointTransactionType",
    "CommissionTransaction",
    # Reconciliation
    "CommissionReconciliation",
    "ReconciliationStatus",
]
