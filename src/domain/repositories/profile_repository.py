"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile aggregates.

    Writes are conditional on the version the profile was loaded at.
    Implementations raise ``ConcurrentModificationError`` when that version
    is stale and ``RepositoryUnavailableError`` when storage fails.
    """

    async def get(self, user_id: str) -> Profile | None:
        """Get the profile for a user."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Insert a new profile. Fails with a conflict if one already exists."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Replace the stored document if its version still matches.

        Returns the profile with its new version.
        """
        ...
