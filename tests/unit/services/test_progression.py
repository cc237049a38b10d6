"""Unit tests for experience and level math."""

import pytest

from domain.entities.profile import Profile
from domain.services.progression import (
    BASE_XP,
    XpResult,
    apply_xp,
    settle,
    threshold,
    xp_to_next_level,
)


def _profile(experience: int = 0, level: int = 1, level_points: int = 0) -> Profile:
    return Profile(
        user_id="u1", experience=experience, level=level, level_points=level_points
    )


def _as_profile(result: XpResult) -> Profile:
    return _profile(result.experience, result.level, result.level_points)


# --- threshold ---


class TestThreshold:
    def test_level_one_uses_base(self):
        assert threshold(1) == BASE_XP == 100

    @pytest.mark.parametrize("level, expected", [(2, 120), (3, 140), (10, 280)])
    def test_grows_by_scaling_per_level(self, level: int, expected: int):
        assert threshold(level) == expected

    def test_levels_below_one_clamp(self):
        assert threshold(0) == threshold(1)
        assert threshold(-5) == threshold(1)

    def test_custom_curve(self):
        assert threshold(3, base_xp=50, scaling=5) == 60

    def test_monotonic(self):
        values = [threshold(level) for level in range(1, 50)]
        assert values == sorted(values)
        assert len(set(values)) == len(values)


# --- apply_xp ---


class TestApplyXp:
    @pytest.mark.parametrize("amount", [0, -1, -500])
    def test_non_positive_grant_is_noop(self, amount: int):
        profile = _profile(experience=40, level=2, level_points=1)

        result = apply_xp(profile, amount)

        assert (result.experience, result.level, result.level_points) == (40, 2, 1)
        assert result.levels_gained == 0

    def test_partial_grant_stays_in_level(self):
        result = apply_xp(_profile(experience=10), 50)

        assert (result.experience, result.level, result.level_points) == (60, 1, 0)

    def test_exact_need_levels_up_once(self):
        profile = _profile(experience=70, level=2, level_points=3)
        need = threshold(2) - 70

        result = apply_xp(profile, need)

        assert result.experience == 0
        assert result.level == 3
        assert result.level_points == 4
        assert result.levels_gained == 1

    def test_one_short_of_need_does_not_level(self):
        result = apply_xp(_profile(), 99)

        assert (result.experience, result.level, result.level_points) == (99, 1, 0)

    def test_multi_level_overflow(self):
        # 100 for level 1, 120 for level 2, 30 left toward level 3's 140
        result = apply_xp(_profile(), 250)

        assert result.level == 3
        assert result.experience == 30
        assert result.level_points == 2
        assert result.levels_gained == 2

    def test_large_grant_crosses_every_threshold(self):
        # 100 + 120 + 140 = 360, leaving 140 of level 4's 160
        result = apply_xp(_profile(), 500)

        assert result.level == 4
        assert result.experience == 140
        assert result.level_points == 3

    def test_does_not_mutate_profile(self):
        profile = _profile(experience=5)

        apply_xp(profile, 1000)

        assert (profile.experience, profile.level, profile.level_points) == (5, 1, 0)

    def test_experience_stays_below_threshold(self):
        profile = _profile()
        for amount in [1, 7, 99, 100, 101, 250, 1234, 5000]:
            result = apply_xp(profile, amount)
            assert 0 <= result.experience < threshold(result.level)
            profile = _as_profile(result)

    @pytest.mark.parametrize("a, b", [(0, 0), (30, 70), (99, 1), (250, 250), (13, 987)])
    def test_sequential_grants_equal_combined_grant(self, a: int, b: int):
        start = _profile(experience=20, level=2, level_points=1)

        two_step = apply_xp(_as_profile(apply_xp(start, a)), b)
        one_step = apply_xp(start, a + b)

        assert (two_step.experience, two_step.level, two_step.level_points) == (
            one_step.experience,
            one_step.level,
            one_step.level_points,
        )

    def test_experience_above_lowered_threshold_finishes_level(self):
        # Stored under a steeper curve, now over the current threshold
        profile = _profile(experience=150, level=1)

        result = apply_xp(profile, 1)

        assert result.level == 2
        assert result.experience == 0
        assert result.level_points == 1

    def test_custom_curve_is_respected(self):
        result = apply_xp(_profile(), 25, base_xp=10, scaling=0)

        assert (result.experience, result.level, result.level_points) == (5, 3, 2)


# --- xp_to_next_level ---


class TestXpToNextLevel:
    def test_fresh_profile(self):
        assert xp_to_next_level(_profile()) == 100

    def test_mid_level(self):
        assert xp_to_next_level(_profile(experience=30, level=3)) == threshold(3) - 30 == 110

    def test_never_negative(self):
        assert xp_to_next_level(_profile(experience=500)) == 0


# --- settle ---


class TestSettle:
    def test_profile_below_threshold_is_unchanged(self):
        result = settle(_profile(experience=99, level=1, level_points=4))

        assert result == XpResult(99, 1, 4, levels_gained=0)

    def test_overflow_after_lowered_curve_carries(self):
        result = settle(_profile(experience=130, level=2), base_xp=50, scaling=10)

        # Level 2 needs 60, level 3 needs 70
        assert result == XpResult(0, 4, 2, levels_gained=2)

    def test_result_satisfies_threshold_invariant(self):
        result = settle(_profile(experience=1000), base_xp=30, scaling=5)

        assert 0 <= result.experience < threshold(result.level, 30, 5)
        assert result.level_points == result.level - 1
