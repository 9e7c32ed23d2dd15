"""GraphQL types for the account domain."""

from datetime import datetime
from typing import List, Optional

import strawberry

from menu_guard.domain.account.entities.history_entry import HistoryEntry
from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.account.services.quota import MonthlyQuota
from menu_guard.domain.account.value_objects.auth import AuthSession
from menu_guard.domain.analysis.entities.analysis_result import (
    AnalysisResultItem,
    SafetyLevel,
)

SafetyLevelEnum = strawberry.enum(SafetyLevel, name="SafetyLevel")


@strawberry.type
class AnalysisResultItemType:
    """One classified menu item."""

    item_name: str
    safety_level: SafetyLevelEnum  # type: ignore[valid-type]
    reasoning: str
    identified_allergens: List[str]

    @classmethod
    def from_domain(cls, item: AnalysisResultItem) -> "AnalysisResultItemType":
        return cls(
            item_name=item.item_name,
            safety_level=item.safety_level,
            reasoning=item.reasoning,
            identified_allergens=list(item.identified_allergens),
        )


@strawberry.input
class AnalysisResultItemInput:
    item_name: str
    safety_level: SafetyLevelEnum  # type: ignore[valid-type]
    reasoning: str
    identified_allergens: List[str] = strawberry.field(default_factory=list)

    def to_domain(self) -> AnalysisResultItem:
        return AnalysisResultItem(
            item_name=self.item_name,
            safety_level=self.safety_level,
            reasoning=self.reasoning,
            identified_allergens=list(self.identified_allergens),
        )


@strawberry.type
class HistoryEntryType:
    """A stored analysis.

    Examples:
        query {
          account {
            me { analysisHistory { id createdAt inputText result { itemName safetyLevel } } }
          }
        }
    """

    id: int
    created_at: datetime
    status: str
    analysis_type: str
    input_text: str
    result: List[AnalysisResultItemType]
    allergies: str
    preferences: str

    @classmethod
    def from_domain(cls, entry: HistoryEntry) -> "HistoryEntryType":
        return cls(
            id=entry.id,
            created_at=entry.created_at,
            status=entry.status.value,
            analysis_type=entry.analysis_type.value,
            input_text=entry.input_text,
            result=[AnalysisResultItemType.from_domain(item) for item in entry.result],
            allergies=entry.allergies,
            preferences=entry.preferences,
        )


@strawberry.type
class UserProfileType:
    """Signed-in user's profile with analysis history (newest first)."""

    id: str
    email: str
    username: str
    allergies: Optional[str]
    preferences: Optional[str]
    is_pro: bool
    max_analyses_per_month: Optional[int]
    analyses_remaining: Optional[int]
    updated_at: datetime
    analysis_history: List[HistoryEntryType]

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "UserProfileType":
        return cls(
            id=profile.id,
            email=profile.email,
            username=profile.username,
            allergies=profile.allergies,
            preferences=profile.preferences,
            is_pro=profile.is_pro,
            max_analyses_per_month=profile.max_analyses_per_month,
            analyses_remaining=MonthlyQuota().remaining(profile),
            updated_at=profile.updated_at,
            analysis_history=[
                HistoryEntryType.from_domain(entry) for entry in profile.analysis_history
            ],
        )


@strawberry.type
class AuthPayloadType:
    access_token: str
    token_type: str
    profile: UserProfileType

    @classmethod
    def from_domain(cls, session: AuthSession, profile: UserProfile) -> "AuthPayloadType":
        return cls(
            access_token=session.access_token,
            token_type=session.token_type,
            profile=UserProfileType.from_domain(profile),
        )


@strawberry.type
class CheckoutSessionType:
    checkout_url: str
