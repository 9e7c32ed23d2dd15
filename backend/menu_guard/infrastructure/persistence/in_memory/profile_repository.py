"""In-memory implementation of IProfileRepository for testing."""

from copy import deepcopy
from typing import Dict, Optional

from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.account.exceptions import ProfileNotFoundError
from menu_guard.domain.account.ports.profile_repository import IProfileRepository


class InMemoryProfileRepository(IProfileRepository):
    """
    In-memory implementation of profile repository.

    Uses a dictionary to store profiles in memory. Suitable for testing
    and development. Data is lost when the application stops.

    `get_or_create` does its lookup and insert without awaiting in between,
    so concurrent coroutines on one event loop cannot both insert.
    """

    def __init__(self) -> None:
        self._profiles: Dict[str, UserProfile] = {}

    async def get_or_create(self, default: UserProfile) -> UserProfile:
        stored = self._profiles.setdefault(
            default.id, deepcopy(default.with_history([]))
        )
        return deepcopy(stored)

    async def find_by_id(self, user_id: str) -> Optional[UserProfile]:
        profile = self._profiles.get(user_id)
        return deepcopy(profile) if profile else None

    async def save(self, profile: UserProfile) -> None:
        """
        Update a stored profile.

        Raises:
            ProfileNotFoundError: No row for profile.id
        """
        if profile.id not in self._profiles:
            raise ProfileNotFoundError(profile.id)
        # Deep copy to prevent external mutations
        self._profiles[profile.id] = deepcopy(profile.with_history([]))

    async def delete(self, user_id: str) -> bool:
        return self._profiles.pop(user_id, None) is not None

    def clear(self) -> None:
        """Clear all profiles (for testing)."""
        self._profiles.clear()

    def count(self) -> int:
        """Number of stored profiles (for testing)."""
        return len(self._profiles)
