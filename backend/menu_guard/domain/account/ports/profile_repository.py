"""Profile repository port (interface)."""

from abc import ABC, abstractmethod
from typing import Optional

from menu_guard.domain.account.entities.user_profile import UserProfile


class IProfileRepository(ABC):
    """Repository interface for UserProfile rows (`profiles`).

    Profiles are stored without their history; history lives in its own
    repository and is joined by the application layer.

    Examples:
        >>> # Implementation example (not actual usage)
        >>> class MongoProfileRepository(IProfileRepository):
        ...     async def get_or_create(self, profile): ...
    """

    @abstractmethod
    async def get_or_create(self, default: UserProfile) -> UserProfile:
        """Insert `default` unless a profile with the same id exists.

        Must be a single atomic operation: concurrent first reads for the
        same identity end up with exactly one stored row, and every caller
        receives that row.

        Args:
            default: Profile to insert when none exists

        Returns:
            The stored profile (existing or newly inserted)
        """
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[UserProfile]:
        """Find profile by identity id."""
        pass

    @abstractmethod
    async def save(self, profile: UserProfile) -> None:
        """Persist profile fields (create or update).

        Raises:
            ProfileNotFoundError: Implementations may refuse to update
                a missing row
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """Delete profile; True if a row was removed."""
        pass
