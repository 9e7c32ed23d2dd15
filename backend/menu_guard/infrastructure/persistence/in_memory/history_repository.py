"""In-memory implementation of IHistoryRepository for testing."""

from datetime import datetime, timezone
from itertools import count
from typing import Any, Dict, List

from menu_guard.domain.account.entities.history_entry import (
    AnalysisStatus,
    AnalysisType,
    HistoryEntry,
    NewHistoryEntry,
)
from menu_guard.domain.account.ports.history_repository import IHistoryRepository
from menu_guard.domain.analysis.entities.analysis_result import (
    SAVED_RESULT_UNREADABLE,
    STORED_RESULT_INVALID,
    decode_result,
)


class InMemoryHistoryRepository(IHistoryRepository):
    """
    In-memory implementation of history repository.

    Rows are kept in their stored shape (result as plain JSON) so reads go
    through the same decoding as the MongoDB store.
    """

    def __init__(self) -> None:
        self._rows: List[Dict[str, Any]] = []
        self._ids = count(1)

    async def add(self, entry: NewHistoryEntry) -> HistoryEntry:
        row = {
            "id": next(self._ids),
            "user_id": entry.user_id,
            "created_at": entry.created_at or datetime.now(timezone.utc),
            "status": entry.status.value,
            "analysis_type": entry.analysis_type.value,
            "input_text": entry.input_text,
            "result": [item.to_dict() for item in entry.result],
            "allergies": entry.allergies,
            "preferences": entry.preferences,
        }
        self._rows.append(row)
        return self._to_entry(row, SAVED_RESULT_UNREADABLE)

    async def list_for_user(self, user_id: str) -> List[HistoryEntry]:
        rows = [row for row in self._rows if row["user_id"] == user_id]
        rows.sort(key=lambda row: (row["created_at"], row["id"]), reverse=True)
        return [self._to_entry(row) for row in rows]

    async def delete(self, user_id: str, history_id: int) -> bool:
        for index, row in enumerate(self._rows):
            if row["id"] == history_id and row["user_id"] == user_id:
                del self._rows[index]
                return True
        return False

    def clear(self) -> None:
        """Clear all rows (for testing)."""
        self._rows.clear()

    @staticmethod
    def _to_entry(
        row: Dict[str, Any], result_reason: str = STORED_RESULT_INVALID
    ) -> HistoryEntry:
        return HistoryEntry(
            id=row["id"],
            user_id=row["user_id"],
            created_at=row["created_at"],
            input_text=row["input_text"],
            result=decode_result(row["result"], result_reason),
            allergies=row["allergies"],
            preferences=row["preferences"],
            status=AnalysisStatus(row["status"]),
            analysis_type=AnalysisType(row["analysis_type"]),
        )
