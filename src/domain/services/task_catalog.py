"""Catalog of completable tasks and the completion gate."""

from collections.abc import Iterable

import structlog

from core.exceptions import TaskAlreadyCompletedError, TaskNotFoundError
from domain.entities.profile import Profile, TaskCompletion
from domain.entities.task import TaskDefinition
from domain.services.progression import BASE_XP, SCALING, apply_xp

logger = structlog.get_logger()

DEFAULT_TASKS: tuple[TaskDefinition, ...] = (
    TaskDefinition(id=1, name="Complete 10 push-ups", xp_reward=50),
    TaskDefinition(id=2, name="Run for 15 minutes", xp_reward=50),
    TaskDefinition(id=3, name="Stretch for 5 minutes", xp_reward=30),
)


class TaskCatalog:
    """Read-only set of task definitions shared by every profile."""

    def __init__(self, tasks: Iterable[TaskDefinition] = DEFAULT_TASKS) -> None:
        self._tasks = tuple(tasks)
        ids = [task.id for task in self._tasks]
        if len(ids) != len(set(ids)):
            raise ValueError("Task ids must be unique")
        self._by_id = {task.id: task for task in self._tasks}

    def default_tasks(self) -> tuple[TaskDefinition, ...]:
        """Canonical starter tasks, in display order."""
        return self._tasks

    def get(self, task_id: int) -> TaskDefinition | None:
        return self._by_id.get(task_id)

    def initial_completions(self) -> list[TaskCompletion]:
        """Fresh, incomplete records for seeding a new profile."""
        return [
            TaskCompletion(task_id=task.id, name=task.name, xp=task.xp_reward, done=False)
            for task in self._tasks
        ]

    def reward_for(self, record: TaskCompletion) -> int:
        """XP reward for a record, preferring the catalog's current value."""
        definition = self._by_id.get(record.task_id)
        if definition is not None:
            return definition.xp_reward
        return record.xp

    def complete_task(
        self,
        profile: Profile,
        task_id: int,
        base_xp: int = BASE_XP,
        scaling: int = SCALING,
    ) -> tuple[Profile, int]:
        """Mark a task done and grant its reward.

        Returns a new profile together with the XP granted; ``profile`` is
        left untouched, so the caller persists both changes or neither.

        Raises:
            TaskNotFoundError: The profile has no record for ``task_id``.
            TaskAlreadyCompletedError: The reward was already claimed.
        """
        record = profile.find_task(task_id)
        if record is None:
            raise TaskNotFoundError(task_id)
        if record.done:
            raise TaskAlreadyCompletedError(task_id)

        reward = self.reward_for(record)
        updated = profile.copy()
        for task in updated.tasks:
            if task.task_id == task_id:
                task.done = True

        result = apply_xp(updated, reward, base_xp=base_xp, scaling=scaling)
        updated.experience = result.experience
        updated.level = result.level
        updated.level_points = result.level_points
        updated.touch()

        if result.levels_gained:
            logger.info(
                "level_up",
                user_id=profile.user_id,
                from_level=profile.level,
                to_level=result.level,
                level_points=result.level_points,
            )

        return updated, reward
