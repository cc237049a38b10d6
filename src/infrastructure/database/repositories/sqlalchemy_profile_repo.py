"""SQLAlchemy implementation of Profile repository."""

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConcurrentModificationError, RepositoryUnavailableError
from domain.entities.profile import Profile, Stat, TaskCompletion, default_stats
from infrastructure.database.models import ProfileModel

logger = structlog.get_logger()

# Failures that may succeed on a later attempt. Anything else (bad SQL,
# data that does not fit a column) is a bug and propagates unchanged.
TRANSIENT_ERRORS = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
    OSError,
    asyncio.TimeoutError,
)


@contextmanager
def translate_storage_errors(user_id: str) -> Iterator[None]:
    """Map key clashes and transient driver or pool failures onto repository errors."""
    try:
        yield
    except IntegrityError as e:
        logger.info("profile_insert_conflict", user_id=user_id, error=str(e.orig))
        raise ConcurrentModificationError(user_id) from e
    except TRANSIENT_ERRORS as e:
        logger.warning(
            "profile_storage_error",
            user_id=user_id,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise RepositoryUnavailableError() from e


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str) -> Profile | None:
        """Get the profile for a user."""
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        with translate_storage_errors(user_id):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Insert a new profile at version 1."""
        model = self._to_model(profile)
        model.version = 1
        with translate_storage_errors(profile.user_id):
            self._session.add(model)
            await self._session.flush()
        return self._to_entity(model)

    async def update(self, profile: Profile) -> Profile:
        """Write the full document if nobody else has written since it was read."""
        new_version = profile.version + 1
        stmt = (
            update(ProfileModel)
            .where(
                ProfileModel.user_id == profile.user_id,
                ProfileModel.version == profile.version,
            )
            .values(
                experience=profile.experience,
                level=profile.level,
                level_points=profile.level_points,
                stats=self._dump_stats(profile.stats),
                tasks=self._dump_tasks(profile.tasks),
                version=new_version,
                updated_at=profile.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        with translate_storage_errors(profile.user_id):
            result = await self._session.execute(stmt)

        if result.rowcount != 1:
            raise ConcurrentModificationError(profile.user_id, profile.version)

        saved = profile.copy()
        saved.version = new_version
        return saved

    @staticmethod
    def _dump_stats(stats: dict[Stat, int]) -> dict[str, int]:
        return {str(stat): value for stat, value in stats.items()}

    @staticmethod
    def _dump_tasks(tasks: list[TaskCompletion]) -> list[dict[str, Any]]:
        return [
            {"id": task.task_id, "name": task.name, "xp": task.xp, "done": task.done}
            for task in tasks
        ]

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        stats = default_stats()
        for name, value in (model.stats or {}).items():
            if name in Stat.values():
                stats[Stat(name)] = int(value)

        tasks = [
            TaskCompletion(
                task_id=int(item["id"]),
                name=item.get("name", ""),
                xp=int(item.get("xp", 0)),
                done=bool(item.get("done", False)),
            )
            for item in (model.tasks or [])
        ]

        return Profile(
            user_id=model.user_id,
            experience=model.experience,
            level=model.level,
            level_points=model.level_points,
            stats=stats,
            tasks=tasks,
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            user_id=entity.user_id,
            experience=entity.experience,
            level=entity.level,
            level_points=entity.level_points,
            stats=self._dump_stats(entity.stats),
            tasks=self._dump_tasks(entity.tasks),
            version=entity.version,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
