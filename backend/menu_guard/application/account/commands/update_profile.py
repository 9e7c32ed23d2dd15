"""Update profile command."""

from dataclasses import dataclass
from typing import Optional

from menu_guard.application.account.queries.get_profile import GetProfileQuery
from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.account.ports.history_repository import IHistoryRepository
from menu_guard.domain.account.ports.profile_repository import IProfileRepository
from menu_guard.domain.account.value_objects.auth import AuthIdentity


@dataclass
class UpdateProfileCommand:
    """Partial update of username, allergies and preferences.

    Examples:
        >>> command = UpdateProfileCommand(profiles, history)
        >>> profile = await command.execute(identity, allergies="Tree nuts")
    """

    profiles: IProfileRepository
    history: IHistoryRepository

    async def execute(
        self,
        identity: AuthIdentity,
        username: Optional[str] = None,
        allergies: Optional[str] = None,
        preferences: Optional[str] = None,
    ) -> UserProfile:
        """Returns the refreshed profile with history."""
        query = GetProfileQuery(self.profiles, self.history)
        profile = await query.execute(identity)
        profile.update(username=username, allergies=allergies, preferences=preferences)
        await self.profiles.save(profile)
        return await query.execute(identity)
