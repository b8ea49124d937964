"""Level computation.

Levels are linear: every 100 XP is one level, starting at level 1.
The dashboard's progress bar uses the same numbers.
"""

from __future__ import annotations

XP_PER_LEVEL = 100
MIN_LEVEL = 1


def level_for_xp(xp_points: int, xp_per_level: int = XP_PER_LEVEL) -> int:
    """floor(xp / xp_per_level) + 1, never below level 1."""
    return max(MIN_LEVEL, xp_points // xp_per_level + 1)


def compute_level(xp_points: int, xp_per_level: int = XP_PER_LEVEL) -> dict:
    """Compute level info from total XP."""
    level = level_for_xp(xp_points, xp_per_level)
    xp = max(xp_points, 0)
    return {
        "level": level,
        "xp_points": xp,
        "xp_into_level": xp % xp_per_level,
        "xp_for_level": xp_per_level,
        "xp_to_next_level": level * xp_per_level - xp,
        "next_level": level + 1,
    }
