"""Task definition domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TaskDefinition:
    """A completable fitness task and the XP it rewards."""

    id: int
    name: str
    xp_reward: int

    def __post_init__(self) -> None:
        if self.xp_reward <= 0:
            raise ValueError(f"Task {self.id} must reward positive XP")
