"""Profile domain entity."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum

DEFAULT_STAT_VALUE = 10

# Width of the user id column; longer ids are rejected at authentication
MAX_USER_ID_LENGTH = 64


class Stat(StrEnum):
    """Character stats a level point can be spent on."""

    STRENGTH = "strength"
    STAMINA = "stamina"
    AGILITY = "agility"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


def default_stats() -> dict[Stat, int]:
    """Starting value for every stat."""
    return {stat: DEFAULT_STAT_VALUE for stat in Stat}


@dataclass
class TaskCompletion:
    """Per-profile completion record for a catalog task."""

    task_id: int
    name: str = ""
    xp: int = 0
    done: bool = False


@dataclass
class Profile:
    """Domain entity for a user's progression profile.

    ``version`` is the optimistic concurrency token. It is the version the
    profile was loaded at; repositories bump it on every successful write.
    """

    user_id: str
    experience: int = 0
    level: int = 1
    level_points: int = 0
    stats: dict[Stat, int] = field(default_factory=default_stats)
    tasks: list[TaskCompletion] = field(default_factory=list)
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def find_task(self, task_id: int) -> TaskCompletion | None:
        """Return the completion record for a task, if the profile knows it."""
        for task in self.tasks:
            if task.task_id == task_id:
                return task
        return None

    def copy(self) -> "Profile":
        """Return an independent copy that can be mutated safely."""
        return replace(
            self,
            stats=dict(self.stats),
            tasks=[replace(task) for task in self.tasks],
        )

    def touch(self) -> None:
        """Record a mutation."""
        self.updated_at = datetime.utcnow()
