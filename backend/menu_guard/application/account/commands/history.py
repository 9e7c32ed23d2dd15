"""Analysis history commands."""

import logging
from dataclasses import dataclass, field
from typing import List

from menu_guard.application.account.queries.get_profile import GetProfileQuery
from menu_guard.domain.account.entities.history_entry import NewHistoryEntry
from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.account.exceptions import HistoryEntryNotFoundError
from menu_guard.domain.account.ports.history_repository import IHistoryRepository
from menu_guard.domain.account.ports.profile_repository import IProfileRepository
from menu_guard.domain.account.services.quota import MonthlyQuota
from menu_guard.domain.account.value_objects.auth import AuthIdentity
from menu_guard.domain.analysis.entities.analysis_result import AnalysisResultItem

logger = logging.getLogger(__name__)


@dataclass
class AddAnalysisToHistoryCommand:
    """Store a completed analysis for the signed-in user.

    The monthly quota is enforced here, on the server, before the row is
    written.

    Examples:
        >>> command = AddAnalysisToHistoryCommand(profiles, history)
        >>> profile = await command.execute(identity, items, "Peanuts", "", "Pasted Text")
        >>> profile.analysis_history[0].input_text
        'Pasted Text'
    """

    profiles: IProfileRepository
    history: IHistoryRepository
    quota: MonthlyQuota = field(default_factory=MonthlyQuota)

    async def execute(
        self,
        identity: AuthIdentity,
        results: List[AnalysisResultItem],
        allergies: str,
        preferences: str,
        input_text: str,
    ) -> UserProfile:
        """
        Raises:
            AnalysisLimitExceededError: Monthly limit reached
            QuotaUnknownError: Non-Pro profile without a limit
        """
        profile = await GetProfileQuery(self.profiles, self.history).execute(identity)
        self.quota.ensure_can_analyze(profile)

        entry = await self.history.add(
            NewHistoryEntry(
                user_id=identity.id,
                input_text=input_text,
                result=list(results),
                allergies=allergies,
                preferences=preferences,
            )
        )
        logger.info(
            "Analysis added to history",
            extra={"user_id": identity.id, "history_id": entry.id, "items": len(results)},
        )
        return profile.with_history([entry, *profile.analysis_history])


@dataclass
class DeleteAnalysisFromHistoryCommand:
    """Delete one of the caller's own history rows."""

    profiles: IProfileRepository
    history: IHistoryRepository

    async def execute(self, identity: AuthIdentity, history_id: int) -> UserProfile:
        """
        Returns:
            Refreshed profile without the deleted row

        Raises:
            HistoryEntryNotFoundError: No such row owned by the caller
        """
        deleted = await self.history.delete(identity.id, history_id)
        if not deleted:
            raise HistoryEntryNotFoundError(history_id)
        return await GetProfileQuery(self.profiles, self.history).execute(identity)
