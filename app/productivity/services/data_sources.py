"""
Activity data sources consumed by the metric aggregator.

Defines the contract that every collaborator backend must implement,
plus a MongoDB implementation reading the application's collections.
Methods return raw documents; the aggregator validates them against the
typed contracts in app.productivity.models.

Example:
    from app.productivity.services.data_sources import MongoActivityDataSource

    source = MongoActivityDataSource(db)
    stats = await source.get_statistics("2026-10-01", "2026-10-31", user_id=user_id)
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, time, timezone, date
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


class ActivityDataSource(ABC):
    """
    Abstract read interface over the data-producing services.

    Date-string arguments are ISO "YYYY-MM-DD"; activity logs and quality
    metrics take datetimes.
    """

    @abstractmethod
    async def get_statistics(
        self, start_date: str, end_date: str, user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Focus statistics: {focusTime (minutes), sessions, tasksDone}."""
        pass

    @abstractmethod
    async def get_goals_history(
        self, start_date: str, end_date: str, user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Goals active in the range, each with a `completed` flag."""
        pass

    @abstractmethod
    async def get_habits(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Tracked habits, each with an `id`."""
        pass

    @abstractmethod
    async def get_habit_completions(
        self, start_date: str, end_date: str, user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Habit completion records: {habitId, date, completed}."""
        pass

    @abstractmethod
    async def get_mood_entries(
        self, start_date: str, end_date: str, user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get_journal_stats_for_period(
        self, start_date: str, end_date: str, user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Journal totals: {totalEntries, gratitudeEntries, collections}."""
        pass

    @abstractmethod
    async def get_activity_logs(
        self, start_date: datetime, end_date: datetime, user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Activity log entries: {activityType, action, timestamp, quality?, duration?}."""
        pass

    @abstractmethod
    async def get_quality_metrics(
        self, start_date: datetime, end_date: datetime, user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Quality samples: {activityType, qualityScore, timestamp}."""
        pass


class MongoActivityDataSource(ActivityDataSource):
    """
    Reads activity data from MongoDB collections.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize MongoActivityDataSource.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._focus_sessions_collection = db["focusSessions"]
        self._goals_collection = db["goals"]
        self._habits_collection = db["habits"]
        self._habit_completions_collection = db["habitCompletions"]
        self._mood_entries_collection = db["moodEntries"]
        self._journal_entries_collection = db["journalEntries"]
        self._activity_logs_collection = db["activityLogs"]
        self._quality_metrics_collection = db["qualityMetrics"]

    def _user_filter(self, user_id: Optional[str]) -> Dict[str, Any]:
        """Scope a query to a user; no user means single-user mode."""
        if not user_id:
            return {}
        if ObjectId.is_valid(user_id):
            return {"userId": ObjectId(user_id)}
        return {"userId": user_id}

    def _date_range_filter(self, start_date: str, end_date: str) -> Dict[str, Any]:
        return {"date": {"$gte": start_date, "$lte": end_date}}

    def _day_bounds(self, start_date: str, end_date: str):
        start = datetime.combine(date.fromisoformat(start_date), time.min, tzinfo=timezone.utc)
        end = datetime.combine(date.fromisoformat(end_date), time.max, tzinfo=timezone.utc)
        return start, end

    async def get_statistics(
        self, start_date: str, end_date: str, user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        cursor = self._focus_sessions_collection.find(
            {**self._user_filter(user_id), **self._date_range_filter(start_date, end_date)},
            {"durationMinutes": 1, "completed": 1, "tasksDone": 1}
        )
        sessions = await cursor.to_list(length=None)

        completed = [s for s in sessions if s.get("completed", True)]

        return {
            "focusTime": sum(s.get("durationMinutes", 0) or 0 for s in completed),
            "sessions": len(completed),
            "tasksDone": sum(s.get("tasksDone", 0) or 0 for s in completed),
        }

    async def get_goals_history(
        self, start_date: str, end_date: str, user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        start, end = self._day_bounds(start_date, end_date)
        in_range = {"$gte": start, "$lte": end}

        cursor = self._goals_collection.find({
            **self._user_filter(user_id),
            "$or": [{"createdAt": in_range}, {"completedAt": in_range}],
        })
        goals = await cursor.to_list(length=None)

        history = []
        for goal in goals:
            completed_at = goal.get("completedAt")
            completed_in_range = (
                bool(goal.get("completed"))
                and isinstance(completed_at, datetime)
                and start <= _as_utc(completed_at) <= end
            )
            history.append({"id": str(goal["_id"]), "completed": completed_in_range})

        return history

    async def get_habits(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        cursor = self._habits_collection.find(
            {**self._user_filter(user_id), "isActive": {"$ne": False}},
            {"name": 1}
        )
        habits = await cursor.to_list(length=None)
        return [{"id": str(h["_id"]), "name": h.get("name")} for h in habits]

    async def get_habit_completions(
        self, start_date: str, end_date: str, user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        cursor = self._habit_completions_collection.find(
            {**self._user_filter(user_id), **self._date_range_filter(start_date, end_date)},
            {"habitId": 1, "date": 1, "completed": 1}
        )
        completions = await cursor.to_list(length=None)
        return [
            {
                "habitId": str(c.get("habitId")),
                "date": c.get("date"),
                "completed": bool(c.get("completed")),
            }
            for c in completions
        ]

    async def get_mood_entries(
        self, start_date: str, end_date: str, user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        cursor = self._mood_entries_collection.find(
            {**self._user_filter(user_id), **self._date_range_filter(start_date, end_date)},
            {"date": 1}
        )
        entries = await cursor.to_list(length=None)
        return [{"date": e.get("date")} for e in entries]

    async def get_journal_stats_for_period(
        self, start_date: str, end_date: str, user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        cursor = self._journal_entries_collection.find(
            {**self._user_filter(user_id), **self._date_range_filter(start_date, end_date)},
            {"hasGratitude": 1, "collectionId": 1}
        )
        entries = await cursor.to_list(length=None)

        collections = {e.get("collectionId") for e in entries if e.get("collectionId")}

        return {
            "totalEntries": len(entries),
            "gratitudeEntries": sum(1 for e in entries if e.get("hasGratitude")),
            "collections": len(collections),
        }

    async def get_activity_logs(
        self, start_date: datetime, end_date: datetime, user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        cursor = self._activity_logs_collection.find({
            **self._user_filter(user_id),
            "timestamp": {"$gte": start_date, "$lte": end_date},
        })
        cursor = cursor.sort("timestamp", 1)
        logs = await cursor.to_list(length=None)

        entries = []
        for log in logs:
            metadata = log.get("metadata") or {}
            entries.append({
                "activityType": log.get("activityType"),
                "action": log.get("action", "log"),
                "timestamp": log.get("timestamp"),
                "quality": metadata.get("quality"),
                "duration": metadata.get("duration"),
                "metadata": metadata,
            })
        return entries

    async def get_quality_metrics(
        self, start_date: datetime, end_date: datetime, user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        cursor = self._quality_metrics_collection.find(
            {
                **self._user_filter(user_id),
                "timestamp": {"$gte": start_date, "$lte": end_date},
            },
            {"activityType": 1, "qualityScore": 1, "timestamp": 1}
        )
        metrics = await cursor.to_list(length=None)
        return [
            {
                "activityType": m.get("activityType"),
                "qualityScore": m.get("qualityScore"),
                "timestamp": m.get("timestamp"),
            }
            for m in metrics
        ]


def _as_utc(value: datetime) -> datetime:
    """Mongo returns naive UTC datetimes unless tz_aware is set."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
