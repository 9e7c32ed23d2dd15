"""Monthly analysis quota - the single authoritative check.

Used both by the server before persisting a history entry and by the client
as a pre-check before starting an analysis.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from menu_guard.domain.account.entities.history_entry import HistoryEntry
from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.account.exceptions import (
    AnalysisLimitExceededError,
    QuotaUnknownError,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MonthlyQuota:
    """
    Domain service: monthly analysis limit for non-Pro users.

    Examples:
        >>> quota = MonthlyQuota()
        >>> quota.analyses_this_month(profile.analysis_history)
        3
        >>> quota.ensure_can_analyze(profile)  # raises when limit reached
    """

    clock: Callable[[], datetime] = _utcnow

    def analyses_this_month(
        self, history: Iterable[HistoryEntry], now: Optional[datetime] = None
    ) -> int:
        moment = now or self.clock()
        return sum(1 for entry in history if entry.is_in_month_of(moment))

    def remaining(self, profile: UserProfile) -> Optional[int]:
        """Analyses left this month; None means unlimited."""
        if profile.is_pro or profile.max_analyses_per_month is None:
            return None
        used = self.analyses_this_month(profile.analysis_history)
        return max(profile.max_analyses_per_month - used, 0)

    def ensure_can_analyze(self, profile: UserProfile) -> None:
        """
        Raise if the profile may not run another analysis this month.

        Raises:
            QuotaUnknownError: Non-Pro profile without a limit
            AnalysisLimitExceededError: Limit reached
        """
        if profile.is_pro:
            return

        limit = profile.max_analyses_per_month
        if limit is None:
            raise QuotaUnknownError(profile.id)

        if self.analyses_this_month(profile.analysis_history) >= limit:
            raise AnalysisLimitExceededError(limit)
