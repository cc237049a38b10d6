"""Profile service layer: progression orchestration."""

import asyncio
from collections.abc import Callable
from typing import Optional

import structlog

from core.exceptions import ConcurrentModificationError, RepositoryUnavailableError
from domain.entities.profile import Profile, TaskCompletion
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services import stat_allocator
from domain.services.progression import BASE_XP, SCALING, settle
from domain.services.task_catalog import TaskCatalog

logger = structlog.get_logger()

ProfileMutation = Callable[[Profile], Profile]


class ProfileService:
    """Service layer for profile progression.

    Each public operation is a read-modify-write against a single unit of
    work. Writes are conditional on the profile version, and the whole
    sequence is retried in a fresh unit of work when storage reports a
    conflict or is briefly unavailable.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        catalog: Optional[TaskCatalog] = None,
        base_xp: int = BASE_XP,
        scaling: int = SCALING,
        max_retries: int = 3,
        retry_backoff: float = 0.0,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._uow_factory = uow_factory
        self._catalog = catalog or TaskCatalog()
        self._base_xp = base_xp
        self._scaling = scaling
        self._max_retries = max_retries
        self._retry_backoff = retry_backoff

    @property
    def catalog(self) -> TaskCatalog:
        return self._catalog

    @property
    def base_xp(self) -> int:
        return self._base_xp

    @property
    def scaling(self) -> int:
        return self._scaling

    async def get_or_create(self, user_id: str) -> Profile:
        """Load a user's profile, creating or repairing it on first access."""
        return await self._with_retry(user_id, "get_or_create", None)

    async def grant_task_completion(self, user_id: str, task_id: int) -> Profile:
        """Complete a task and apply its XP reward.

        Raises:
            TaskNotFoundError: The task is not among the profile's tasks.
            TaskAlreadyCompletedError: The reward was already claimed.
        """

        def complete(profile: Profile) -> Profile:
            updated, granted = self._catalog.complete_task(
                profile, task_id, base_xp=self._base_xp, scaling=self._scaling
            )
            logger.info(
                "task_completed",
                user_id=user_id,
                task_id=task_id,
                xp_granted=granted,
                level=updated.level,
                experience=updated.experience,
            )
            return updated

        return await self._with_retry(user_id, "grant_task_completion", complete)

    async def spend_level_point(self, user_id: str, stat_name: str) -> Profile:
        """Spend one level point on a stat.

        Raises:
            InvalidStatError: ``stat_name`` is not a known stat.
            InsufficientPointsError: The profile has no level points.
        """

        def spend(profile: Profile) -> Profile:
            updated = stat_allocator.upgrade(profile, stat_name)
            logger.info(
                "stat_upgraded",
                user_id=user_id,
                stat=stat_name,
                value=updated.stats[stat_allocator.parse_stat(stat_name)],
                level_points=updated.level_points,
            )
            return updated

        return await self._with_retry(user_id, "spend_level_point", spend)

    async def list_tasks(self, user_id: str) -> list[TaskCompletion]:
        """Get the user's task records in display order."""
        profile = await self.get_or_create(user_id)
        return profile.tasks

    async def _with_retry(
        self,
        user_id: str,
        operation: str,
        mutate: Optional[ProfileMutation],
    ) -> Profile:
        """Run one read-modify-write, retrying transient storage failures.

        Domain errors raised by ``mutate`` are deterministic and propagate
        immediately.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._run_once(user_id, mutate)
            except (ConcurrentModificationError, RepositoryUnavailableError) as exc:
                if attempt >= self._max_retries:
                    logger.warning(
                        "profile_retry_exhausted",
                        user_id=user_id,
                        operation=operation,
                        attempts=attempt,
                        error_code=exc.error_code.value,
                    )
                    raise
                logger.info(
                    "profile_write_conflict",
                    user_id=user_id,
                    operation=operation,
                    attempt=attempt,
                    error_code=exc.error_code.value,
                )
                if self._retry_backoff:
                    await asyncio.sleep(self._retry_backoff * attempt)

    async def _run_once(self, user_id: str, mutate: Optional[ProfileMutation]) -> Profile:
        async with self._uow_factory() as uow:
            profile = await self._load_or_create(uow, user_id)
            if mutate is not None:
                profile = await uow.profiles.update(mutate(profile))
            await uow.commit()
            return profile

    async def _load_or_create(self, uow: IUnitOfWork, user_id: str) -> Profile:
        profile = await uow.profiles.get(user_id)

        if profile is None:
            profile = Profile(user_id=user_id, tasks=self._catalog.initial_completions())
            profile = await uow.profiles.create(profile)
            logger.info("profile_created", user_id=user_id)
            return profile

        repaired = self._repair(profile)
        if repaired is not None:
            profile = await uow.profiles.update(repaired)
        return profile

    def _repair(self, profile: Profile) -> Optional[Profile]:
        """Fix up a stored profile, or return None when it needs nothing."""
        repaired = profile.copy()
        changed = False

        if not repaired.tasks:
            repaired.tasks = self._catalog.initial_completions()
            changed = True
            logger.info("profile_tasks_backfilled", user_id=profile.user_id)

        result = settle(repaired, self._base_xp, self._scaling)
        if result.levels_gained:
            repaired.experience = result.experience
            repaired.level = result.level
            repaired.level_points = result.level_points
            changed = True
            logger.info(
                "profile_levels_settled",
                user_id=profile.user_id,
                levels_gained=result.levels_gained,
                level=result.level,
            )

        if not changed:
            return None
        repaired.touch()
        return repaired
