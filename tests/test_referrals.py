"""
Tests for referral signup and activation.

Covers:
- Signup validation (unknown code, self-referral, already referred)
- Activation criteria (first task or points threshold)
- Activation bonus scaling with the referrer's active referral count
"""

import pytest
from sqlalchemy import select

from yeild.models import PointTransaction, PointTransactionType, Profile, Referral
from yeild.services.errors import ProfileNotFoundError, ReferralError
from yeild.services.referrals import (
    calculate_referral_bonus_points,
    check_referral_activation,
    get_referral_for,
    list_referrals,
    meets_activation_criteria,
    process_referral_signup,
)


# ── Pure rules ────────────────────────────────────────────


class TestReferralBonusPoints:
    @pytest.mark.parametrize(
        "active,expected",
        [(0, 10), (4, 10), (5, 20), (14, 20), (15, 30), (200, 30)],
    )
    def test_bonus_scales_with_active_referrals(self, active, expected):
        assert calculate_referral_bonus_points(active) == expected


class TestActivationCriteria:
    def test_first_task_activates(self):
        assert meets_activation_criteria(tasks_completed=1, points=0)

    def test_points_threshold_activates(self):
        assert meets_activation_criteria(tasks_completed=0, points=50)

    def test_below_both_thresholds(self):
        assert not meets_activation_criteria(tasks_completed=0, points=49)


# ── Signup ────────────────────────────────────────────────


class TestReferralSignup:
    @pytest.mark.asyncio
    async def test_signup_links_users(self, db_session, make_profile):
        referrer = await make_profile("alice")
        referred = await make_profile("bob")

        referral = await process_referral_signup(
            db_session, referrer.referral_code.lower(), referred.id
        )

        assert referral.referrer_id == referrer.id
        assert referral.referred_id == referred.id
        assert referral.is_active is False
        assert referral.referral_code == referrer.referral_code
        assert referrer.total_referrals_count == 1
        assert (await get_referral_for(db_session, referred.id)).id == referral.id

    @pytest.mark.asyncio
    async def test_unknown_code(self, db_session, make_profile):
        referred = await make_profile("bob")
        with pytest.raises(ReferralError, match="Invalid referral code"):
            await process_referral_signup(db_session, "NOPE0000", referred.id)

    @pytest.mark.asyncio
    async def test_self_referral(self, db_session, make_profile):
        user = await make_profile("alice")
        with pytest.raises(ReferralError, match="cannot refer yourself"):
            await process_referral_signup(db_session, user.referral_code, user.id)

    @pytest.mark.asyncio
    async def test_already_referred(self, db_session, make_profile):
        first = await make_profile("alice")
        second = await make_profile("carol")
        referred = await make_profile("bob")
        await process_referral_signup(db_session, first.referral_code, referred.id)

        with pytest.raises(ReferralError, match="already referred"):
            await process_referral_signup(db_session, second.referral_code, referred.id)

    @pytest.mark.asyncio
    async def test_missing_profile(self, db_session, make_profile):
        referrer = await make_profile("alice")
        with pytest.raises(ProfileNotFoundError):
            await process_referral_signup(db_session, referrer.referral_code, 9999)

    @pytest.mark.asyncio
    async def test_list_referrals(self, db_session, make_profile):
        referrer = await make_profile("alice")
        for name in ("bob", "carol", "dave"):
            user = await make_profile(name)
            await process_referral_signup(db_session, referrer.referral_code, user.id)

        referrals = await list_referrals(db_session, referrer.id)
        assert len(referrals) == 3
        assert await list_referrals(db_session, referrals[0].referred_id) == []


# ── Activation ────────────────────────────────────────────


class TestReferralActivation:
    @pytest.mark.asyncio
    async def test_not_activated_below_threshold(self, db_session, make_profile, make_referral):
        referrer = await make_profile("alice")
        referred = await make_profile("bob", points=49)
        await make_referral(referrer, referred)

        assert await check_referral_activation(db_session, referred.id) is False

    @pytest.mark.asyncio
    async def test_activated_by_points(self, db_session, make_profile, make_referral):
        referrer = await make_profile("alice")
        referred = await make_profile("bob", points=50)
        referral = await make_referral(referrer, referred)
        referrer_id, referral_id = referrer.id, referral.id

        assert await check_referral_activation(db_session, referred.id) is True

        referral = await db_session.get(Referral, referral_id)
        assert referral.is_active is True
        assert referral.points_awarded == 10
        assert referral.activated_at is not None

        referrer = await db_session.get(Profile, referrer_id)
        await db_session.refresh(referrer)
        assert referrer.points == 10
        assert referrer.active_referrals_count == 1

        bonus = await db_session.scalar(
            select(PointTransaction).where(
                PointTransaction.transaction_type == PointTransactionType.REFERRAL_BONUS
            )
        )
        assert bonus.user_id == referrer_id
        assert bonus.reference_id == f"referral:{referral_id}"

    @pytest.mark.asyncio
    async def test_activated_by_first_task(self, db_session, make_profile, make_referral):
        referrer = await make_profile("alice")
        referred = await make_profile("bob", tasks_completed=1)
        await make_referral(referrer, referred)

        assert await check_referral_activation(db_session, referred.id) is True

    @pytest.mark.asyncio
    async def test_activates_only_once(self, db_session, make_profile, make_referral):
        referrer = await make_profile("alice")
        referred = await make_profile("bob", tasks_completed=3)
        await make_referral(referrer, referred)

        assert await check_referral_activation(db_session, referred.id) is True
        assert await check_referral_activation(db_session, referred.id) is False

    @pytest.mark.asyncio
    async def test_bonus_uses_referrer_active_count(self, db_session, make_profile, make_referral):
        referrer = await make_profile("alice", active_referrals_count=15)
        referred = await make_profile("bob", tasks_completed=1)
        referral = await make_referral(referrer, referred)
        referral_id = referral.id

        await check_referral_activation(db_session, referred.id)

        referral = await db_session.get(Referral, referral_id)
        assert referral.points_awarded == 30

    @pytest.mark.asyncio
    async def test_user_without_referral(self, db_session, make_profile):
        user = await make_profile("alice", tasks_completed=10)
        assert await check_referral_activation(db_session, user.id) is False

    @pytest.mark.asyncio
    async def test_missing_profile(self, db_session):
        with pytest.raises(ProfileNotFoundError):
            await check_referral_activation(db_session, 12345)
