"""MongoDB implementation of IProfileRepository."""

import logging
from typing import Any, Dict, Optional

from pymongo import ReturnDocument

from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.account.exceptions import ProfileNotFoundError
from menu_guard.domain.account.ports.profile_repository import IProfileRepository

from .base import MongoBaseRepository

logger = logging.getLogger(__name__)


class MongoProfileRepository(MongoBaseRepository[UserProfile], IProfileRepository):
    """MongoDB implementation of user profile repository.

    Documents are keyed by the identity id (`_id`).
    """

    @property
    def collection_name(self) -> str:
        return "profiles"

    def to_document(self, entity: UserProfile) -> Dict[str, Any]:
        return {
            "_id": entity.id,
            "email": entity.email,
            "username": entity.username,
            "allergies": entity.allergies,
            "preferences": entity.preferences,
            "is_pro": entity.is_pro,
            "max_analyses_per_month": entity.max_analyses_per_month,
            "updated_at": entity.updated_at,
        }

    def from_document(self, doc: Dict[str, Any]) -> UserProfile:
        return UserProfile(
            id=doc["_id"],
            email=doc.get("email", ""),
            username=doc.get("username", ""),
            allergies=doc.get("allergies"),
            preferences=doc.get("preferences"),
            is_pro=bool(doc.get("is_pro", False)),
            max_analyses_per_month=doc.get("max_analyses_per_month"),
            updated_at=self.as_utc(doc["updated_at"]),
        )

    async def get_or_create(self, default: UserProfile) -> UserProfile:
        """Single `$setOnInsert` upsert: concurrent callers share one row."""
        document = self.to_document(default)
        doc = await self.collection.find_one_and_update(
            {"_id": default.id},
            {"$setOnInsert": {k: v for k, v in document.items() if k != "_id"}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return self.from_document(doc)

    async def find_by_id(self, user_id: str) -> Optional[UserProfile]:
        doc = await self.collection.find_one({"_id": user_id})
        return self.from_document(doc) if doc else None

    async def save(self, profile: UserProfile) -> None:
        document = self.to_document(profile)
        document.pop("_id")
        result = await self.collection.update_one({"_id": profile.id}, {"$set": document})
        if result.matched_count == 0:
            raise ProfileNotFoundError(profile.id)

    async def delete(self, user_id: str) -> bool:
        result = await self.collection.delete_one({"_id": user_id})
        return result.deleted_count > 0
