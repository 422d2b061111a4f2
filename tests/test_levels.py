"""
Tests for per-profile level reads (level-up cache and Phoenix welcome).
"""

from types import SimpleNamespace

import pytest

from yeild.services.errors import ProfileNotFoundError
from yeild.services.levels import evaluate_profile, get_level_status, mark_phoenix_welcome_shown


def _make_profile(**kwargs):
    defaults = {
        "id": 1,
        "points": 0,
        "tasks_completed": 0,
        "active_referrals_count": 0,
        "last_tier_id": None,
        "phoenix_welcome_shown": False,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


# ── evaluate_profile ──────────────────────────────────────


class TestEvaluateProfile:
    def test_first_read_never_levels_up(self):
        profile = _make_profile(tasks_completed=5, points=250)
        status = evaluate_profile(profile)

        assert status.level_up is False
        assert status.progress.current_tier.name == "Sparrow"
        assert profile.last_tier_id == 1

    def test_level_up_fires_once(self):
        profile = _make_profile(tasks_completed=5, points=250, last_tier_id=0)

        assert evaluate_profile(profile).level_up is True
        assert profile.last_tier_id == 1
        assert evaluate_profile(profile).level_up is False

    def test_downgrade_updates_cache_silently(self):
        profile = _make_profile(points=10, last_tier_id=3)
        status = evaluate_profile(profile)

        assert status.level_up is False
        assert profile.last_tier_id == 0

    def test_read_without_cache_update(self):
        profile = _make_profile(tasks_completed=5, points=250, last_tier_id=0)

        assert evaluate_profile(profile, update_cache=False).level_up is True
        assert profile.last_tier_id == 0

    def test_unknown_cached_tier_treated_as_first_read(self):
        profile = _make_profile(tasks_completed=5, points=250, last_tier_id=42)
        assert evaluate_profile(profile).level_up is False

    def test_referral_bonus_from_settings(self):
        profile = _make_profile(active_referrals_count=20)
        assert evaluate_profile(profile).progress.referral_bonus_percent == 50

    def test_phoenix_welcome(self):
        profile = _make_profile(tasks_completed=250, points=25000, last_tier_id=4)
        status = evaluate_profile(profile)

        assert status.level_up is True
        assert status.progress.is_max_level
        assert status.show_phoenix_welcome is True

        profile.phoenix_welcome_shown = True
        assert evaluate_profile(profile).show_phoenix_welcome is False

    def test_no_welcome_below_max_level(self):
        profile = _make_profile(tasks_completed=100, points=5000)
        assert evaluate_profile(profile).show_phoenix_welcome is False


# ── Stored profiles ───────────────────────────────────────


class TestLevelStatus:
    @pytest.mark.asyncio
    async def test_get_level_status_caches_tier(self, db_session, make_profile):
        profile = await make_profile("alice", tasks_completed=20, points=1000)

        status = await get_level_status(db_session, profile.id)

        assert status.progress.current_tier.name == "Hawk"
        assert status.level_up is False
        assert profile.last_tier_id == 2

    @pytest.mark.asyncio
    async def test_level_up_after_new_points(self, db_session, make_profile):
        profile = await make_profile("alice", tasks_completed=5, points=200)
        await get_level_status(db_session, profile.id)

        profile.points = 250
        status = await get_level_status(db_session, profile.id)

        assert status.level_up is True
        assert status.progress.current_tier.name == "Sparrow"

    @pytest.mark.asyncio
    async def test_mark_phoenix_welcome_shown(self, db_session, make_profile):
        profile = await make_profile("alice", tasks_completed=250, points=25000)

        assert (await get_level_status(db_session, profile.id)).show_phoenix_welcome
        await mark_phoenix_welcome_shown(db_session, profile.id)
        assert not (await get_level_status(db_session, profile.id)).show_phoenix_welcome

    @pytest.mark.asyncio
    async def test_missing_profile(self, db_session):
        with pytest.raises(ProfileNotFoundError):
            await get_level_status(db_session, 404)
