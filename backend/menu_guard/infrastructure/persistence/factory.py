"""Factory for creating account repository instances."""

import logging
import os
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorClient

from menu_guard.domain.account.ports.history_repository import IHistoryRepository
from menu_guard.domain.account.ports.profile_repository import IProfileRepository
from menu_guard.infrastructure.config import get_mongodb_uri
from menu_guard.infrastructure.persistence.in_memory.history_repository import (
    InMemoryHistoryRepository,
)
from menu_guard.infrastructure.persistence.in_memory.profile_repository import (
    InMemoryProfileRepository,
)

logger = logging.getLogger(__name__)

# Singleton instances
_profile_repository: Optional[IProfileRepository] = None
_history_repository: Optional[IHistoryRepository] = None
_mongo_client: Optional[AsyncIOMotorClient[Dict[str, Any]]] = None


def _backend() -> str:
    return os.getenv("REPOSITORY_BACKEND", "inmemory").lower()


def _get_mongo_client() -> AsyncIOMotorClient[Dict[str, Any]]:
    global _mongo_client
    if _mongo_client is None:
        uri = get_mongodb_uri()
        if not uri:
            raise ValueError("REPOSITORY_BACKEND='mongodb' requires MONGODB_URI env var")
        _mongo_client = AsyncIOMotorClient(uri)
    return _mongo_client


def create_profile_repository() -> IProfileRepository:
    """
    Create profile repository based on REPOSITORY_BACKEND.

    Environment Variables:
        REPOSITORY_BACKEND: 'inmemory' (default) or 'mongodb'
        MONGODB_URI: MongoDB connection URI (required if 'mongodb')

    Raises:
        ValueError: If REPOSITORY_BACKEND='mongodb' but MONGODB_URI not set
    """
    if _backend() == "mongodb":
        from menu_guard.infrastructure.persistence.mongodb.profile_repository import (
            MongoProfileRepository,
        )

        return MongoProfileRepository(client=_get_mongo_client())

    return InMemoryProfileRepository()


def create_history_repository() -> IHistoryRepository:
    """Create history repository based on REPOSITORY_BACKEND."""
    if _backend() == "mongodb":
        from menu_guard.infrastructure.persistence.mongodb.history_repository import (
            MongoHistoryRepository,
        )

        return MongoHistoryRepository(client=_get_mongo_client())

    return InMemoryHistoryRepository()


def get_profile_repository() -> IProfileRepository:
    """Get singleton profile repository instance."""
    global _profile_repository
    if _profile_repository is None:
        _profile_repository = create_profile_repository()
        logger.info(
            "Profile repository created",
            extra={"backend": _backend(), "type": type(_profile_repository).__name__},
        )
    return _profile_repository


def get_history_repository() -> IHistoryRepository:
    """Get singleton history repository instance."""
    global _history_repository
    if _history_repository is None:
        _history_repository = create_history_repository()
    return _history_repository


def reset_repositories() -> None:
    """
    Reset singleton instances.

    Useful for testing to ensure clean state.
    """
    global _profile_repository, _history_repository, _mongo_client
    if _mongo_client is not None:
        _mongo_client.close()
    _profile_repository = None
    _history_repository = None
    _mongo_client = None
