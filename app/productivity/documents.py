"""
Beanie documents owned by the productivity engine.

Registered with init_beanie at startup; the Mongo cache backend reads and
writes through these documents.
"""

from typing import Optional, Dict, Any
from beanie import Indexed

from common.database import BaseDocument


class ProductivityCacheEntry(BaseDocument):
    """
    Cached score, metrics or analytics record.

    One document per (kind, monthId, userId).
    """

    kind: str
    monthId: Indexed(str)  # type: ignore
    userId: Optional[str] = None
    value: Dict[str, Any] = {}

    class Settings:
        name = "productivityCache"
        use_state_management = True
        indexes = [
            [("kind", 1), ("monthId", 1), ("userId", 1)],  # Cache key lookup
        ]

    @classmethod
    async def find_entry(
        cls, kind: str, month_id: str, user_id: Optional[str] = None
    ) -> Optional["ProductivityCacheEntry"]:
        """Find the entry for a cache key."""
        return await cls.find_one({"kind": kind, "monthId": month_id, "userId": user_id})

    @classmethod
    async def store(
        cls, kind: str, month_id: str, user_id: Optional[str], value: Dict[str, Any]
    ) -> "ProductivityCacheEntry":
        """Create or replace the value stored under a cache key."""
        entry = await cls.find_entry(kind, month_id, user_id)
        if entry is None:
            entry = cls(kind=kind, monthId=month_id, userId=user_id, value=value)
        else:
            entry.value = value
        await entry.save()
        return entry

    @classmethod
    async def delete_for_month(cls, month_id: str, user_id: Optional[str] = None) -> int:
        """Delete every kind cached for a month and user. Returns the deleted count."""
        result = await cls.find({"monthId": month_id, "userId": user_id}).delete()
        return result.deleted_count if result else 0
