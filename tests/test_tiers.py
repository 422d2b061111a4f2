"""
Tests for the bird level tier table.

Covers:
- Shipped table invariants (floor tier, ascending ids, monotonic thresholds)
- validate_tiers rejecting broken tables
- get_tier_by_id lookups
"""

from dataclasses import replace

import pytest

from yeild.services.errors import TierConfigurationError
from yeild.services.tiers import (
    DEFAULT_TIERS,
    TierDefinition,
    get_tier_by_id,
    get_tiers,
    validate_tiers,
)


def _tier(tier_id, tasks=0, points=0, referrals=0, name=None):
    return TierDefinition(
        id=tier_id,
        name=name or f"T{tier_id}",
        min_referrals=referrals,
        min_points=points,
        min_tasks=tasks,
        icon="*",
        color="#000000",
    )


# ── Shipped table ─────────────────────────────────────────


class TestDefaultTiers:
    def test_shipped_table_is_valid(self):
        validate_tiers(get_tiers())

    def test_floor_tier_is_dove(self):
        floor = get_tiers()[0]
        assert floor.id == 0
        assert floor.name == "Dove"
        assert (floor.min_tasks, floor.min_points, floor.min_referrals) == (0, 0, 0)

    def test_max_tier_is_phoenix(self):
        top = get_tiers()[-1]
        assert top.name == "Phoenix"
        assert top.min_tasks == 250
        assert top.min_points == 25000

    @pytest.mark.parametrize("attr", ["min_tasks", "min_points", "min_referrals"])
    def test_thresholds_non_decreasing(self, attr):
        values = [getattr(t, attr) for t in get_tiers()]
        assert values == sorted(values)

    def test_ids_strictly_ascending(self):
        ids = [t.id for t in get_tiers()]
        assert ids == sorted(set(ids))

    def test_earning_bonus_grows_with_level(self):
        bonuses = [t.earning_bonus for t in DEFAULT_TIERS]
        assert bonuses == sorted(bonuses)
        assert bonuses[0] == 0.0


# ── validate_tiers ────────────────────────────────────────


class TestValidateTiers:
    def test_empty_table(self):
        with pytest.raises(TierConfigurationError):
            validate_tiers([])

    def test_first_tier_must_be_zero(self):
        with pytest.raises(TierConfigurationError):
            validate_tiers([_tier(1), _tier(2, tasks=5)])

    def test_floor_must_have_zero_thresholds(self):
        with pytest.raises(TierConfigurationError):
            validate_tiers([_tier(0, points=10), _tier(1, points=20)])

    def test_duplicate_ids_rejected(self):
        with pytest.raises(TierConfigurationError):
            validate_tiers([_tier(0), _tier(1, tasks=5), _tier(1, tasks=10)])

    def test_unordered_ids_rejected(self):
        with pytest.raises(TierConfigurationError):
            validate_tiers([_tier(0), _tier(2, tasks=5), _tier(1, tasks=10)])

    @pytest.mark.parametrize(
        "second,third",
        [
            ({"tasks": 10}, {"tasks": 5}),
            ({"points": 500}, {"points": 100}),
            ({"referrals": 20}, {"referrals": 5}),
        ],
    )
    def test_decreasing_threshold_rejected(self, second, third):
        with pytest.raises(TierConfigurationError):
            validate_tiers([_tier(0), _tier(1, **second), _tier(2, **third)])

    def test_equal_thresholds_allowed(self):
        validate_tiers([_tier(0), _tier(1, tasks=5), _tier(2, tasks=5, points=10)])

    def test_configuration_error_is_domain_error(self):
        from yeild.services.errors import YeildError

        assert issubclass(TierConfigurationError, YeildError)


# ── get_tier_by_id ────────────────────────────────────────


class TestGetTierById:
    def test_known_id(self):
        assert get_tier_by_id(2).name == "Hawk"

    def test_unknown_id(self):
        assert get_tier_by_id(99) is None

    def test_custom_table(self):
        tiers = [_tier(0), _tier(7, tasks=1, name="Custom")]
        assert get_tier_by_id(7, tiers).name == "Custom"
        assert get_tier_by_id(1, tiers) is None

    def test_tiers_are_immutable(self):
        tier = get_tier_by_id(1)
        with pytest.raises(Exception):
            tier.min_tasks = 0
        assert replace(tier, min_tasks=0).min_tasks == 0
