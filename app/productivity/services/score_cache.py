"""
Month-keyed cache for computed scores, metrics and analytics.

Entries are JSON-compatible dicts keyed by (kind, monthId, userId), so
any backing store can hold them. Invalidation drops every kind cached
for a (monthId, userId) pair.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Type

from app.productivity.documents import ProductivityCacheEntry

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str, Optional[str]]


class ScoreCache(ABC):
    """
    Abstract cache interface for the productivity engine.
    """

    @abstractmethod
    async def get(
        self, kind: str, month_id: str, user_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Cached value, or None on miss."""
        pass

    @abstractmethod
    async def set(
        self, kind: str, month_id: str, user_id: Optional[str], value: Dict[str, Any]
    ) -> None:
        pass

    @abstractmethod
    async def invalidate(self, month_id: str, user_id: Optional[str] = None) -> None:
        """Drop every kind cached for the month and user."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass


@dataclass
class CachedEntry:
    """Cached value with insertion time."""
    value: Dict[str, Any]
    cached_at: float


class InMemoryScoreCache(ScoreCache):
    """
    Process-local cache with optional expiry.
    """

    def __init__(self, ttl_seconds: Optional[int] = None):
        """
        Initialize InMemoryScoreCache.

        Args:
            ttl_seconds: Entry lifetime; None or 0 keeps entries until invalidated
        """
        self._entries: Dict[CacheKey, CachedEntry] = {}
        self._ttl_seconds = ttl_seconds or None

    def _is_valid(self, entry: CachedEntry) -> bool:
        if self._ttl_seconds is None:
            return True
        return (time.time() - entry.cached_at) < self._ttl_seconds

    async def get(
        self, kind: str, month_id: str, user_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        key = (kind, month_id, user_id)
        entry = self._entries.get(key)

        if entry is None:
            return None

        if not self._is_valid(entry):
            logger.debug(f"Cache entry expired for {key}")
            del self._entries[key]
            return None

        return entry.value

    async def set(
        self, kind: str, month_id: str, user_id: Optional[str], value: Dict[str, Any]
    ) -> None:
        self._entries[(kind, month_id, user_id)] = CachedEntry(value=value, cached_at=time.time())

    async def invalidate(self, month_id: str, user_id: Optional[str] = None) -> None:
        stale = [key for key in self._entries if key[1] == month_id and key[2] == user_id]
        for key in stale:
            del self._entries[key]
        logger.debug(f"Invalidated {len(stale)} cache entries for {month_id} (user {user_id})")

    async def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class MongoScoreCache(ScoreCache):
    """
    Cache persisted as ProductivityCacheEntry documents, one per key.

    Requires init_beanie to have registered the document.
    """

    def __init__(self, document: Type[ProductivityCacheEntry] = ProductivityCacheEntry):
        """
        Initialize MongoScoreCache.

        Args:
            document: Document class holding cache entries
        """
        self._document = document

    async def get(
        self, kind: str, month_id: str, user_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        entry = await self._document.find_entry(kind, month_id, user_id)
        if entry is None:
            return None
        return entry.value

    async def set(
        self, kind: str, month_id: str, user_id: Optional[str], value: Dict[str, Any]
    ) -> None:
        await self._document.store(kind, month_id, user_id, value)

    async def invalidate(self, month_id: str, user_id: Optional[str] = None) -> None:
        deleted = await self._document.delete_for_month(month_id, user_id)
        logger.debug(f"Invalidated {deleted} cache documents for {month_id} (user {user_id})")

    async def clear(self) -> None:
        await self._document.delete_all()
