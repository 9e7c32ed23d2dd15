"""Get profile query."""

import logging
from dataclasses import dataclass

from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.account.exceptions import ProfileCreationError
from menu_guard.domain.account.ports.history_repository import IHistoryRepository
from menu_guard.domain.account.ports.profile_repository import IProfileRepository
from menu_guard.domain.account.value_objects.auth import AuthIdentity

logger = logging.getLogger(__name__)


@dataclass
class GetProfileQuery:
    """Query to load the signed-in user's profile with history.

    Self-healing: the first authenticated read creates the default profile.
    Creation is a single idempotent upsert, so concurrent first reads
    (e.g. two tabs) never produce a duplicate row or a conflict error.

    Examples:
        >>> query = GetProfileQuery(profiles, history)
        >>> profile = await query.execute(AuthIdentity(id="u1", email="ada@example.com"))
        >>> profile.username
        'ada'
    """

    profiles: IProfileRepository
    history: IHistoryRepository

    async def execute(self, identity: AuthIdentity) -> UserProfile:
        """Execute query.

        Returns:
            Profile with history joined, newest first. A history load
            failure yields an empty history instead of an error.

        Raises:
            ProfileCreationError: Profile could not be read or created
        """
        try:
            profile = await self.profiles.get_or_create(UserProfile.default_for(identity))
        except Exception as e:
            logger.error(
                "Error creating profile",
                extra={"user_id": identity.id, "error": str(e)},
            )
            raise ProfileCreationError() from e

        try:
            entries = await self.history.list_for_user(identity.id)
        except Exception as e:
            logger.error(
                "Error loading analysis history",
                extra={"user_id": identity.id, "error": str(e)},
            )
            entries = []

        return profile.with_history(entries)
