"""MongoDB implementation of IHistoryRepository."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from pymongo import DESCENDING

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

from .base import MongoBaseRepository

logger = logging.getLogger(__name__)


class MongoHistoryRepository(MongoBaseRepository[HistoryEntry], IHistoryRepository):
    """MongoDB implementation of analysis history repository.

    Integer ids come from an atomic counter in the `counters` collection.
    """

    COUNTER_ID = "analysis_history"

    @property
    def collection_name(self) -> str:
        return "analysis_history"

    def to_document(self, entity: HistoryEntry) -> Dict[str, Any]:
        return {
            "_id": entity.id,
            "user_id": entity.user_id,
            "created_at": entity.created_at,
            "status": entity.status.value,
            "analysis_type": entity.analysis_type.value,
            "input_text": entity.input_text,
            "result": [item.to_dict() for item in entity.result],
            "allergies": entity.allergies,
            "preferences": entity.preferences,
        }

    def from_document(
        self, doc: Dict[str, Any], result_reason: str = STORED_RESULT_INVALID
    ) -> HistoryEntry:
        return HistoryEntry(
            id=int(doc["_id"]),
            user_id=doc["user_id"],
            created_at=self.as_utc(doc["created_at"]),
            input_text=doc.get("input_text", ""),
            result=decode_result(doc.get("result"), result_reason),
            allergies=doc.get("allergies", ""),
            preferences=doc.get("preferences", ""),
            status=AnalysisStatus(doc.get("status", AnalysisStatus.COMPLETED.value)),
            analysis_type=AnalysisType(
                doc.get("analysis_type", AnalysisType.MENU_ANALYSIS.value)
            ),
        )

    async def add(self, entry: NewHistoryEntry) -> HistoryEntry:
        stored = HistoryEntry(
            id=await self.next_sequence(self.COUNTER_ID),
            user_id=entry.user_id,
            created_at=entry.created_at or datetime.now(timezone.utc),
            input_text=entry.input_text,
            result=list(entry.result),
            allergies=entry.allergies,
            preferences=entry.preferences,
            status=entry.status,
            analysis_type=entry.analysis_type,
        )
        document = self.to_document(stored)
        try:
            await self.collection.insert_one(document)
        except Exception:
            logger.error(
                "History insert failed",
                extra={"collection": self.collection_name, "user_id": stored.user_id},
            )
            raise
        return self.from_document(document, SAVED_RESULT_UNREADABLE)

    async def list_for_user(self, user_id: str) -> List[HistoryEntry]:
        cursor = self.collection.find({"user_id": user_id}).sort(
            [("created_at", DESCENDING), ("_id", DESCENDING)]
        )
        documents = await cursor.to_list(length=None)
        return [self.from_document(doc) for doc in documents]

    async def delete(self, user_id: str, history_id: int) -> bool:
        result = await self.collection.delete_one({"_id": history_id, "user_id": user_id})
        return result.deleted_count > 0
