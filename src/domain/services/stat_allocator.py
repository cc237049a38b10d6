"""Spending level points on character stats."""

from core.exceptions import InsufficientPointsError, InvalidStatError
from domain.entities.profile import Profile, Stat


def parse_stat(stat_name: str) -> Stat:
    """Map a raw stat name onto the closed ``Stat`` set."""
    try:
        return Stat(stat_name)
    except ValueError:
        raise InvalidStatError(stat_name, Stat.values()) from None


def upgrade(profile: Profile, stat_name: str) -> Profile:
    """Spend exactly one level point to raise one stat by one.

    The stat name is validated before the point balance, so an unknown stat
    is rejected even when points are available.
    """
    stat = parse_stat(stat_name)
    if profile.level_points <= 0:
        raise InsufficientPointsError(profile.level_points)

    updated = profile.copy()
    updated.stats[stat] = updated.stats.get(stat, 0) + 1
    updated.level_points -= 1
    updated.touch()
    return updated
