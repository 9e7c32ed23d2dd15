"""Shared test fixtures.

Every test runs against stub providers, in-memory repositories and the
local auth provider; factory singletons are reset around each test.
"""

from datetime import datetime, timezone
from typing import Callable, Iterator, List

import pytest

from menu_guard.domain.account.entities.history_entry import HistoryEntry
from menu_guard.domain.account.value_objects.auth import AuthIdentity
from menu_guard.domain.analysis.entities.analysis_result import (
    AnalysisResultItem,
    SafetyLevel,
)
from menu_guard.infrastructure.auth.factory import reset_auth_provider
from menu_guard.infrastructure.persistence.factory import reset_repositories
from menu_guard.infrastructure.persistence.in_memory.history_repository import (
    InMemoryHistoryRepository,
)
from menu_guard.infrastructure.persistence.in_memory.profile_repository import (
    InMemoryProfileRepository,
)
from menu_guard.infrastructure.providers.factory import reset_providers


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Stub adapters for every test; no real API keys or databases."""
    monkeypatch.setenv("MENU_AI_PROVIDER", "stub")
    monkeypatch.setenv("PLACES_PROVIDER", "stub")
    monkeypatch.setenv("REPOSITORY_BACKEND", "inmemory")
    monkeypatch.setenv("AUTH_PROVIDER", "local")
    monkeypatch.setenv("AUTH_JWT_SECRET", "test-secret")
    monkeypatch.delenv("AUTH_REQUIRED", raising=False)
    reset_providers()
    reset_repositories()
    reset_auth_provider()
    yield
    reset_providers()
    reset_repositories()
    reset_auth_provider()


@pytest.fixture
def identity() -> AuthIdentity:
    return AuthIdentity(id="user-1", email="ada@example.com")


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def history_repository() -> InMemoryHistoryRepository:
    return InMemoryHistoryRepository()


@pytest.fixture
def pad_thai_results() -> List[AnalysisResultItem]:
    return [
        AnalysisResultItem(
            item_name="Pad Thai",
            safety_level=SafetyLevel.UNSAFE,
            reasoning="Contains peanuts.",
            identified_allergens=["peanuts"],
        ),
        AnalysisResultItem(
            item_name="Green Salad",
            safety_level=SafetyLevel.SAFE,
            reasoning="No listed allergens.",
        ),
    ]


@pytest.fixture
def make_history_entry() -> Callable[..., HistoryEntry]:
    """Factory for history rows created at a given moment."""

    def _make(entry_id: int, created_at: datetime, user_id: str = "user-1") -> HistoryEntry:
        return HistoryEntry(
            id=entry_id,
            user_id=user_id,
            created_at=created_at,
            input_text="Pasted Text",
            result=[],
            allergies="Peanuts",
            preferences="",
        )

    return _make


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def pad_thai_menu() -> str:
    return (
        "Pad Thai - rice noodles, peanuts, egg, bean sprouts\n"
        "Green Salad - lettuce, cucumber, lemon dressing"
    )
