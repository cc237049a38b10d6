"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.profile_service import ProfileService
from domain.services.task_catalog import TaskCatalog
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_task_catalog() -> TaskCatalog:
    """Get the shared task catalog."""
    return TaskCatalog()


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(
        get_uow_factory(),
        catalog=get_task_catalog(),
        base_xp=settings.progression_base_xp,
        scaling=settings.progression_scaling,
        max_retries=settings.profile_max_retries,
        retry_backoff=settings.profile_retry_backoff_seconds,
    )
