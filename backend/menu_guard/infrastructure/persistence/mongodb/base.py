"""Shared plumbing for the Menu Guard MongoDB repositories.

Each repository owns one collection of the configured database and maps
between its documents and a domain entity. Integer ids (analysis history)
are allocated from the shared `counters` collection.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Generic, TypeVar

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ReturnDocument

from menu_guard.infrastructure.config import get_mongodb_database

TEntity = TypeVar("TEntity")

COUNTERS_COLLECTION = "counters"

logger = logging.getLogger(__name__)


class MongoBaseRepository(ABC, Generic[TEntity]):
    """Collection handle plus entity <-> document mapping hooks.

    The motor client is shared and owned by the persistence factory.
    """

    def __init__(self, client: AsyncIOMotorClient[Dict[str, Any]]):
        self._db = client[get_mongodb_database()]
        self._collection = self._db[self.collection_name]
        logger.debug(
            "Mongo repository ready",
            extra={"repository": type(self).__name__, "collection": self.collection_name},
        )

    @property
    @abstractmethod
    def collection_name(self) -> str:
        ...

    @abstractmethod
    def to_document(self, entity: TEntity) -> Dict[str, Any]:
        ...

    @abstractmethod
    def from_document(self, doc: Dict[str, Any]) -> TEntity:
        """
        Rebuild the entity from a stored document.

        Missing optional fields fall back to the entity defaults.
        """

    @property
    def collection(self) -> AsyncIOMotorCollection[Dict[str, Any]]:
        return self._collection

    async def next_sequence(self, counter_id: str) -> int:
        """Atomically increment and return the named counter (starts at 1)."""
        counter = await self._db[COUNTERS_COLLECTION].find_one_and_update(
            {"_id": counter_id},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(counter["seq"])

    @staticmethod
    def as_utc(dt: datetime) -> datetime:
        # BSON dates come back naive and are always UTC
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt
