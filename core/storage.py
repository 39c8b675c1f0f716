# core/storage.py
"""
Key/value stores scoped to one visitor session.

The durable mirror keeps the cart and the custom-order handoff across page
reloads; values are JSON strings, exactly what the browser would keep in
localStorage. `MemoryStorage` is also used for transient per-visitor state.
"""
import logging
import time
from typing import Callable, Dict, Optional, Tuple

from pymongo.errors import PyMongoError

from core.errors import StorageError

logger = logging.getLogger(__name__)


class Storage:
    async def get_item(self, session_id: str, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set_item(self, session_id: str, key: str, value: str) -> None:
        raise NotImplementedError

    async def remove_item(self, session_id: str, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(Storage):
    """Process-local store. With `ttl_seconds`, entries not written for that long are evicted."""

    def __init__(self, ttl_seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._items: Dict[Tuple[str, str], Tuple[str, float]] = {}

    def _expired(self, written_at: float, now: float) -> bool:
        return self.ttl_seconds is not None and now - written_at >= self.ttl_seconds

    def _evict_expired(self) -> None:
        now = self._clock()
        stale = [k for k, (_, written_at) in self._items.items() if self._expired(written_at, now)]
        for k in stale:
            del self._items[k]
        if stale:
            logger.debug("Evicted %d stale entries", len(stale))

    async def get_item(self, session_id: str, key: str) -> Optional[str]:
        entry = self._items.get((session_id, key))
        if entry is None:
            return None
        value, written_at = entry
        if self._expired(written_at, self._clock()):
            del self._items[(session_id, key)]
            return None
        return value

    async def set_item(self, session_id: str, key: str, value: str) -> None:
        if self.ttl_seconds is not None:
            self._evict_expired()
        self._items[(session_id, key)] = (value, self._clock())

    async def remove_item(self, session_id: str, key: str) -> None:
        self._items.pop((session_id, key), None)


class MongoStorage(Storage):
    """One document per (session_id, key) in the given motor collection."""

    def __init__(self, collection):
        self.collection = collection

    async def get_item(self, session_id: str, key: str) -> Optional[str]:
        try:
            doc = await self.collection.find_one({"session_id": session_id, "key": key})
        except PyMongoError as e:
            logger.error("Storage read failed for %s/%s: %s", session_id, key, e)
            raise StorageError(str(e)) from e
        return doc.get("value") if doc else None

    async def set_item(self, session_id: str, key: str, value: str) -> None:
        try:
            await self.collection.update_one(
                {"session_id": session_id, "key": key},
                {"$set": {"value": value}},
                upsert=True,
            )
        except PyMongoError as e:
            logger.error("Storage write failed for %s/%s: %s", session_id, key, e)
            raise StorageError(str(e)) from e

    async def remove_item(self, session_id: str, key: str) -> None:
        try:
            await self.collection.delete_one({"session_id": session_id, "key": key})
        except PyMongoError as e:
            logger.error("Storage delete failed for %s/%s: %s", session_id, key, e)
            raise StorageError(str(e)) from e


def create_storage(backend: str) -> Storage:
    if backend == "mongo":
        from db import db
        return MongoStorage(db.storage)
    if backend == "memory":
        return MemoryStorage()
    raise ValueError(f"Unknown storage backend: {backend}")
