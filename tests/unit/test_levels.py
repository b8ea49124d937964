"""Level computation: linear levels of 100 XP, starting at level 1."""

import pytest

from peerlearn.progression.levels import compute_level, level_for_xp


class TestLevelForXP:
    def test_level_1_at_zero_xp(self):
        assert level_for_xp(0) == 1

    def test_level_boundary_99_xp(self):
        """99 XP is still level 1."""
        assert level_for_xp(99) == 1

    def test_level_2_at_100_xp(self):
        assert level_for_xp(100) == 2

    def test_130_xp_is_level_2(self):
        assert level_for_xp(130) == 2

    def test_never_below_level_1(self):
        assert level_for_xp(-50) == 1

    def test_custom_xp_per_level(self):
        assert level_for_xp(250, xp_per_level=50) == 6

    @pytest.mark.parametrize("xp", [0, 1, 99, 100, 101, 199, 200, 999, 1000, 12345])
    def test_matches_floor_formula(self, xp):
        assert level_for_xp(xp) == max(1, xp // 100 + 1)


class TestComputeLevel:
    def test_progress_within_level(self):
        result = compute_level(150)
        assert result["level"] == 2
        assert result["xp_into_level"] == 50
        assert result["xp_for_level"] == 100
        assert result["xp_to_next_level"] == 50
        assert result["next_level"] == 3

    def test_exactly_on_boundary(self):
        result = compute_level(200)
        assert result["level"] == 3
        assert result["xp_into_level"] == 0
        assert result["xp_to_next_level"] == 100

    def test_fresh_user(self):
        result = compute_level(0)
        assert result == {
            "level": 1,
            "xp_points": 0,
            "xp_into_level": 0,
            "xp_for_level": 100,
            "xp_to_next_level": 100,
            "next_level": 2,
        }
