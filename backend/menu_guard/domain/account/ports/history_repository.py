"""Analysis history repository port (interface)."""

from abc import ABC, abstractmethod
from typing import List

from menu_guard.domain.account.entities.history_entry import (
    HistoryEntry,
    NewHistoryEntry,
)


class IHistoryRepository(ABC):
    """Repository interface for `analysis_history` rows.

    Stored results are opaque JSON; implementations decode them through
    `decode_result` so a malformed row never raises on read.
    """

    @abstractmethod
    async def add(self, entry: NewHistoryEntry) -> HistoryEntry:
        """Insert a row and return it with store-assigned id and created_at."""
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[HistoryEntry]:
        """All rows of a user, newest first."""
        pass

    @abstractmethod
    async def delete(self, user_id: str, history_id: int) -> bool:
        """Delete a row owned by `user_id`; False if no such row."""
        pass
