"""Shared fixtures for unit tests."""

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from core.exceptions import ConcurrentModificationError
from domain.entities.profile import Profile


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked profile repository."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class ProfileStore:
    """Shared in-memory storage behind InMemoryUnitOfWork instances.

    ``injected_errors`` are raised, in order, by the next ``update`` calls.
    """

    def __init__(self) -> None:
        self.profiles: dict[str, Profile] = {}
        self.commits = 0
        self.injected_errors: list[Exception] = []


class InMemoryProfileRepository:
    """Version-checked profile repository over a ProfileStore."""

    def __init__(self, store: ProfileStore) -> None:
        self._store = store

    async def get(self, user_id: str) -> Profile | None:
        profile = self._store.profiles.get(user_id)
        snapshot = profile.copy() if profile else None
        # Yield so concurrent callers interleave between read and write
        await asyncio.sleep(0)
        return snapshot

    async def create(self, profile: Profile) -> Profile:
        if profile.user_id in self._store.profiles:
            raise ConcurrentModificationError(profile.user_id)
        saved = profile.copy()
        saved.version = 1
        self._store.profiles[profile.user_id] = saved
        return saved.copy()

    async def update(self, profile: Profile) -> Profile:
        if self._store.injected_errors:
            raise self._store.injected_errors.pop(0)
        current = self._store.profiles.get(profile.user_id)
        if current is None or current.version != profile.version:
            raise ConcurrentModificationError(profile.user_id, profile.version)
        saved = profile.copy()
        saved.version = profile.version + 1
        self._store.profiles[profile.user_id] = saved
        return saved.copy()


class InMemoryUnitOfWork:
    """Unit of Work over a ProfileStore."""

    def __init__(self, store: ProfileStore) -> None:
        self._store = store
        self.profiles = InMemoryProfileRepository(store)

    async def commit(self) -> None:
        self._store.commits += 1

    async def rollback(self) -> None:
        pass

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def store() -> ProfileStore:
    """Create an empty in-memory profile store."""
    return ProfileStore()


@pytest.fixture
def user_id() -> str:
    """A user ID."""
    return "user-123"
