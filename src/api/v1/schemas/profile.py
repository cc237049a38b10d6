"""Pydantic schemas for Profile API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import Profile, Stat, TaskCompletion
from domain.services.progression import threshold, xp_to_next_level


class GrantXpRequest(BaseModel):
    """Schema for completing a task."""

    task_id: int = Field(..., ge=1)


class UpgradeStatRequest(BaseModel):
    """Schema for spending a level point.

    ``stat`` is validated by the service so unknown names produce the
    ``INVALID_STAT`` error rather than a generic validation failure.
    """

    stat: str = Field(..., min_length=1, max_length=32)


class StatsResponse(BaseModel):
    """Character stats."""

    strength: int
    stamina: int
    agility: int


class TaskResponse(BaseModel):
    """Schema for a task and its completion state."""

    model_config = ConfigDict(from_attributes=True)

    task_id: int
    name: str
    xp: int
    done: bool

    @classmethod
    def from_entity(cls, task: TaskCompletion) -> "TaskResponse":
        return cls(task_id=task.task_id, name=task.name, xp=task.xp, done=task.done)


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "66f1c0ffee0000000000abcd",
                "experience": 30,
                "level": 3,
                "level_points": 2,
                "threshold": 140,
                "xp_to_next_level": 110,
                "stats": {"strength": 10, "stamina": 10, "agility": 10},
                "tasks": [
                    {"task_id": 1, "name": "Complete 10 push-ups", "xp": 50, "done": True},
                ],
                "version": 4,
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:05:00",
            }
        },
    )

    user_id: str
    experience: int
    level: int
    level_points: int
    threshold: int
    xp_to_next_level: int
    stats: StatsResponse
    tasks: list[TaskResponse]
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile, base_xp: int, scaling: int) -> "ProfileResponse":
        return cls(
            user_id=profile.user_id,
            experience=profile.experience,
            level=profile.level,
            level_points=profile.level_points,
            threshold=threshold(profile.level, base_xp, scaling),
            xp_to_next_level=xp_to_next_level(profile, base_xp, scaling),
            stats=StatsResponse(
                strength=profile.stats[Stat.STRENGTH],
                stamina=profile.stats[Stat.STAMINA],
                agility=profile.stats[Stat.AGILITY],
            ),
            tasks=[TaskResponse.from_entity(task) for task in profile.tasks],
            version=profile.version,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse


class TaskListResponse(BaseModel):
    """Schema for list of Tasks."""

    data: list[TaskResponse]
