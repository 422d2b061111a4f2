"""Initial database schema

Revision ID: 000_initial_schema
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "000_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all initial tables."""

    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.Enum("user", "brand", "admin", name="userrole"), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), default=True, nullable=False),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # Reward profiles (one per user)
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("referral_code", sa.String(16), nullable=False),
        sa.Column("points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("tasks_completed", sa.Integer(), server_default="0", nullable=False),
        sa.Column("active_referrals_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_referrals_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("last_tier_id", sa.Integer(), nullable=True,
                  comment="Tier id seen on the previous progress read"),
        sa.Column("phoenix_welcome_shown", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
    )
    op.create_index("ix_profiles_referral_code", "profiles", ["referral_code"], unique=True)

    # Referrals
    op.create_table(
        "referrals",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("referrer_id", sa.Integer(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("referred_id", sa.Integer(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("referral_code", sa.String(16), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("activated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("points_awarded", sa.Integer(), server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
    )
    op.create_index("ix_referrals_referrer_id", "referrals", ["referrer_id"])
    op.create_index("ix_referrals_referred_id", "referrals", ["referred_id"], unique=True)
    op.create_index("ix_referrals_is_active", "referrals", ["is_active"])

    # Point ledger
    op.create_table(
        "point_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column(
            "transaction_type",
            sa.Enum(
                "task_reward", "referral_bonus", "referral_commission", "external", "adjustment",
                name="pointtransactiontype",
            ),
            nullable=False,
        ),
        sa.Column("reference_id", sa.String(64), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_point_transactions_user_id", "point_transactions", ["user_id"])
    op.create_index("ix_point_transactions_transaction_type", "point_transactions", ["transaction_type"])

    # Commission ledger
    op.create_table(
        "commission_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("referrer_user_id", sa.Integer(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("referred_user_id", sa.Integer(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("source_event_id", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("source_event_id", name="uq_commission_transactions_source_event_id"),
    )
    op.create_index("ix_commission_transactions_referrer_user_id", "commission_transactions", ["referrer_user_id"])

    # Failed commission retry queue
    op.create_table(
        "commission_reconciliations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("source_event_id", sa.String(64), nullable=False),
        sa.Column("referrer_user_id", sa.Integer(), nullable=False),
        sa.Column("referred_user_id", sa.Integer(), nullable=False),
        sa.Column("points_earned", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "resolved", "abandoned", name="reconciliationstatus"),
            nullable=False,
        ),
        sa.Column("attempts", sa.Integer(), default=0, nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_commission_reconciliations_source_event_id", "commission_reconciliations", ["source_event_id"])
    op.create_index("ix_commission_reconciliations_status", "commission_reconciliations", ["status"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("commission_reconciliations")
    op.drop_table("commission_transactions")
    op.drop_table("point_transactions")
    op.drop_table("referrals")
    op.drop_table("profiles")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS reconciliationstatus")
    op.execute("DROP TYPE IF EXISTS pointtransactiontype")
    op.execute("DROP TYPE IF EXISTS userrole")
