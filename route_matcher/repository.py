"""
User repository abstraction for route matching.
Supports in-memory/JSON (dev) and MongoDB (production).
"""

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from .schemas.route import SwipeAction, SwipeRecord, UserProfile

logger = logging.getLogger(__name__)


class RepositoryError(RuntimeError):
    """Raised when users or swipes cannot be read from or written to storage."""


def parse_users(docs: Iterable[dict], source: str) -> List[UserProfile]:
    """Build profiles from stored documents, skipping the ones that fail validation."""
    users = []
    for doc in docs:
        try:
            users.append(UserProfile(**doc))
        except ValidationError as e:
            logger.warning(
                f"Skipping invalid user {doc.get('user_id', '?')!r} from {source}: "
                f"{e.error_count()} validation error(s)"
            )
    return users


class UserRepository(ABC):
    """Abstract base class for user and swipe access."""

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[UserProfile]:
        """Fetch one user, or None if unknown."""
        pass

    @abstractmethod
    def list_users(self) -> List[UserProfile]:
        """Fetch all users."""
        pass

    @abstractmethod
    def get_swipes(self, swiper_id: str) -> List[SwipeRecord]:
        """Fetch every decision made by a user."""
        pass

    @abstractmethod
    def record_swipe(self, swiper_id: str, swiped_id: str, action: SwipeAction) -> bool:
        """Store a decision unless one already exists for the pair."""
        pass

    @abstractmethod
    def reset_swipes(self, swiper_id: str) -> int:
        """Delete every decision made by a user and return how many."""
        pass

    @abstractmethod
    def get_data_version(self) -> str:
        """Get current data snapshot version for tracking."""
        pass


class InMemoryRepository(UserRepository):
    """Repository over in-process lists (tests and local development)."""

    def __init__(
        self,
        users: Optional[Iterable[UserProfile]] = None,
        swipes: Optional[Iterable[SwipeRecord]] = None,
    ):
        self._users: Dict[str, UserProfile] = {u.user_id: u for u in (users or [])}
        self._swipes: List[SwipeRecord] = list(swipes or [])
        self._lock = threading.Lock()
        self._version = datetime.now(timezone.utc).isoformat()

    def get_user(self, user_id: str) -> Optional[UserProfile]:
        return self._users.get(user_id)

    def list_users(self) -> List[UserProfile]:
        return list(self._users.values())

    def get_swipes(self, swiper_id: str) -> List[SwipeRecord]:
        with self._lock:
            return [s for s in self._swipes if s.swiper_id == swiper_id]

    def record_swipe(self, swiper_id: str, swiped_id: str, action: SwipeAction) -> bool:
        with self._lock:
            for s in self._swipes:
                if s.swiper_id == swiper_id and s.swiped_id == swiped_id:
                    return False
            self._swipes.append(
                SwipeRecord(swiper_id=swiper_id, swiped_id=swiped_id, action=action)
            )
            return True

    def reset_swipes(self, swiper_id: str) -> int:
        with self._lock:
            kept = [s for s in self._swipes if s.swiper_id != swiper_id]
            deleted = len(self._swipes) - len(kept)
            self._swipes = kept
            return deleted

    def get_data_version(self) -> str:
        return self._version


class JSONRepository(InMemoryRepository):
    """JSON-file repository (for development). Swipes live in memory only."""

    def __init__(self, data_path: str):
        """Initialize JSON repository."""
        self.data_path = self._resolve_path(data_path)

        try:
            with open(self.data_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            users = parse_users(payload.get("users", []), self.data_path)
            swipes = [SwipeRecord(**s) for s in payload.get("swipes", [])]
        except (OSError, ValueError, ValidationError) as e:
            raise RepositoryError(f"Failed to load users from {self.data_path}: {e}") from e

        super().__init__(users, swipes)
        self._version = datetime.fromtimestamp(
            os.path.getmtime(self.data_path), tz=timezone.utc
        ).isoformat()

        logger.info(f"JSON Repository loaded {len(users)} users from {self.data_path}")

    def _resolve_path(self, data_path: str) -> str:
        """Resolve the users file from multiple candidates."""
        candidates = []

        env_path = os.getenv("USERS_DATA_PATH")
        if env_path:
            candidates.append(env_path)

        candidates.append(data_path)
        candidates.append(os.path.abspath(data_path))

        module_dir = os.path.dirname(os.path.abspath(__file__))
        candidates.append(os.path.normpath(os.path.join(module_dir, "..", "data", "users.json")))

        for p in candidates:
            if os.path.isfile(p):
                return p

        raise RepositoryError(f"Could not locate users file in: {candidates}")


class MongoDBRepository(UserRepository):
    """MongoDB-based repository (for production)."""

    def __init__(
        self,
        mongo_uri: str = "mongodb://localhost:27017",
        db_name: str = "route_matcher",
        client=None,
    ):
        """
        Initialize MongoDB repository.

        Args:
            mongo_uri: MongoDB connection string
            db_name: Database name
            client: Pre-built MongoClient (skips connecting)
        """
        from pymongo import MongoClient
        from pymongo.errors import PyMongoError

        self.mongo_uri = mongo_uri
        self.db_name = db_name

        try:
            self.client = client or MongoClient(mongo_uri, serverSelectionTimeoutMS=5000)
            # Test connection
            self.client.admin.command("ping")
            self.db = self.client[db_name]
        except PyMongoError as e:
            raise RepositoryError(f"Failed to connect to MongoDB: {e}") from e

        logger.info(f"MongoDB Repository connected to {mongo_uri}/{db_name}")

    def _run(self, operation: str, fn):
        from pymongo.errors import PyMongoError

        try:
            return fn()
        except PyMongoError as e:
            logger.error(f"MongoDB {operation} failed: {e}")
            raise RepositoryError(f"MongoDB {operation} failed: {e}") from e

    def get_user(self, user_id: str) -> Optional[UserProfile]:
        doc = self._run(
            "user lookup",
            lambda: self.db.users.find_one({"user_id": user_id}, {"_id": 0}),
        )
        if not doc:
            return None
        users = parse_users([doc], "MongoDB")
        return users[0] if users else None

    def list_users(self) -> List[UserProfile]:
        docs = self._run("user scan", lambda: list(self.db.users.find({}, {"_id": 0})))
        return parse_users(docs, "MongoDB")

    def get_swipes(self, swiper_id: str) -> List[SwipeRecord]:
        docs = self._run(
            "swipe lookup",
            lambda: list(
                self.db.swipes.find({"swiper_id": swiper_id}, {"_id": 0}).sort("created_at", 1)
            ),
        )
        return [SwipeRecord(**d) for d in docs]

    def record_swipe(self, swiper_id: str, swiped_id: str, action: SwipeAction) -> bool:
        def _record():
            existing = self.db.swipes.find_one({"swiper_id": swiper_id, "swiped_id": swiped_id})
            if existing:
                return False
            record = SwipeRecord(swiper_id=swiper_id, swiped_id=swiped_id, action=action)
            doc = record.model_dump()
            doc["action"] = record.action.value
            self.db.swipes.insert_one(doc)
            return True

        return self._run("swipe insert", _record)

    def reset_swipes(self, swiper_id: str) -> int:
        result = self._run(
            "swipe reset",
            lambda: self.db.swipes.delete_many({"swiper_id": swiper_id}),
        )
        return result.deleted_count

    def get_data_version(self) -> str:
        """Get data version from metadata collection."""
        metadata = self._run(
            "metadata lookup",
            lambda: self.db.metadata.find_one({"type": "data_version"}),
        )
        if metadata:
            return metadata.get("version", "unknown")
        return "unknown"

    def close(self):
        """Close MongoDB connection."""
        if self.client:
            self.client.close()


def create_repository(
    use_mongo: bool = False,
    data_path: str = "data/users.json",
    mongo_uri: str = "mongodb://localhost:27017",
    db_name: str = "route_matcher",
) -> UserRepository:
    """
    Factory function to create the appropriate repository.

    Args:
        use_mongo: If True, use MongoDB; otherwise use the JSON file
        data_path: JSON users file for the development repository
        mongo_uri: MongoDB connection string
        db_name: MongoDB database name

    Returns:
        UserRepository instance
    """
    if use_mongo:
        try:
            return MongoDBRepository(mongo_uri, db_name)
        except RepositoryError as e:
            logger.warning(f"MongoDB init failed ({e}), falling back to JSON")
    return JSONRepository(data_path)
