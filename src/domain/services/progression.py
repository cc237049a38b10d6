"""Experience and level math.

Everything here is pure: functions take a profile (or plain numbers) and
return new values without touching the input.
"""

from dataclasses import dataclass

from domain.entities.profile import Profile

BASE_XP = 100
SCALING = 20


@dataclass(frozen=True)
class XpResult:
    """Outcome of applying an XP grant."""

    experience: int
    level: int
    level_points: int
    levels_gained: int = 0


def threshold(level: int, base_xp: int = BASE_XP, scaling: int = SCALING) -> int:
    """XP required to complete ``level``. Levels below 1 count as level 1."""
    return base_xp + (max(1, level) - 1) * scaling


def apply_xp(
    profile: Profile,
    amount: int,
    base_xp: int = BASE_XP,
    scaling: int = SCALING,
) -> XpResult:
    """Resolve an XP grant into a new (experience, level, level_points) triple.

    A single grant may cross several thresholds; each one crossed is worth
    one level point. Zero or negative grants leave the triple unchanged.
    """
    experience = profile.experience
    level = profile.level
    level_points = profile.level_points

    if amount <= 0:
        return XpResult(experience, level, level_points)

    remaining = amount
    gained = 0
    while remaining > 0:
        # Stored experience can only reach the threshold if the curve was
        # reconfigured downwards; the next point of XP then finishes the level.
        need = max(threshold(level, base_xp, scaling) - experience, 1)
        if remaining >= need:
            remaining -= need
            experience = 0
            level += 1
            level_points += 1
            gained += 1
        else:
            experience += remaining
            remaining = 0

    return XpResult(experience, level, level_points, levels_gained=gained)


def xp_to_next_level(profile: Profile, base_xp: int = BASE_XP, scaling: int = SCALING) -> int:
    """XP still needed before the profile's next level-up."""
    return max(threshold(profile.level, base_xp, scaling) - profile.experience, 0)


def settle(profile: Profile, base_xp: int = BASE_XP, scaling: int = SCALING) -> XpResult:
    """Carry stored experience that already meets the threshold into level-ups.

    Only happens after the curve is lowered. Experience above the threshold
    carries over into the next level, as it would for a fresh grant.
    """
    experience = profile.experience
    level = profile.level
    level_points = profile.level_points
    gained = 0
    while experience >= threshold(level, base_xp, scaling):
        experience -= threshold(level, base_xp, scaling)
        level += 1
        level_points += 1
        gained += 1
    return XpResult(experience, level, level_points, levels_gained=gained)
