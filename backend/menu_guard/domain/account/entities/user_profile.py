"""UserProfile entity - aggregate root of the account domain."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Optional

from menu_guard.domain.account.entities.history_entry import HistoryEntry
from menu_guard.domain.account.value_objects.auth import AuthIdentity

DEFAULT_ALLERGIES = "Peanuts, Shellfish, Gluten"
DEFAULT_ANALYSIS_LIMIT = 5
FALLBACK_USERNAME = "New User"


@dataclass
class UserProfile:
    """User profile aggregate root.

    App-specific data attached to an authenticated identity. A profile is
    NOT guaranteed to exist at signup time; it is created with defaults on
    the first authenticated read.

    Invariants:
    - id equals the auth identity id and is immutable
    - Pro users have no monthly quota (max_analyses_per_month is None)

    Examples:
        >>> identity = AuthIdentity(id="0b6f...", email="ada@example.com")
        >>> profile = UserProfile.default_for(identity)
        >>> profile.username, profile.is_pro, profile.max_analyses_per_month
        ('ada', False, 5)

        >>> profile.upgrade_to_pro()
        >>> profile.max_analyses_per_month is None
        True
    """

    id: str
    email: str
    username: str
    allergies: Optional[str]
    preferences: Optional[str] = ""
    is_pro: bool = False
    max_analyses_per_month: Optional[int] = DEFAULT_ANALYSIS_LIMIT
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    analysis_history: List[HistoryEntry] = field(default_factory=list)

    @staticmethod
    def default_for(identity: AuthIdentity) -> "UserProfile":
        """Self-healing default profile for a first authenticated read."""
        local_part = identity.email.split("@")[0] if identity.email else ""
        return UserProfile(
            id=identity.id,
            email=identity.email or "",
            username=local_part or FALLBACK_USERNAME,
            allergies=DEFAULT_ALLERGIES,
            preferences="",
            is_pro=False,
            max_analyses_per_month=DEFAULT_ANALYSIS_LIMIT,
        )

    @property
    def effective_preferences(self) -> str:
        """Preferences are a Pro feature; free users analyze without them."""
        return (self.preferences or "") if self.is_pro else ""

    def update(
        self,
        username: Optional[str] = None,
        allergies: Optional[str] = None,
        preferences: Optional[str] = None,
    ) -> None:
        """Apply a partial profile update and touch updated_at."""
        if username is not None:
            self.username = username
        if allergies is not None:
            self.allergies = allergies
        if preferences is not None:
            self.preferences = preferences
        self.updated_at = datetime.now(timezone.utc)

    def upgrade_to_pro(self) -> None:
        self.is_pro = True
        self.max_analyses_per_month = None
        self.updated_at = datetime.now(timezone.utc)

    def with_history(self, history: List[HistoryEntry]) -> "UserProfile":
        return replace(self, analysis_history=list(history))
