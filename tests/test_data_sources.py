"""Tests for MongoActivityDataSource against mocked motor collections."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from app.productivity.services.data_sources import MongoActivityDataSource


def _cursor(documents):
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=documents)
    cursor.sort.return_value = cursor
    return cursor


@pytest.fixture
def collections():
    names = [
        "focusSessions", "goals", "habits", "habitCompletions",
        "moodEntries", "journalEntries", "activityLogs", "qualityMetrics",
    ]
    result = {}
    for name in names:
        collection = MagicMock()
        collection.find.return_value = _cursor([])
        result[name] = collection
    return result


@pytest.fixture
def data_source(collections):
    db = MagicMock()
    db.__getitem__.side_effect = lambda name: collections[name]
    return MongoActivityDataSource(db)


# ─────────────────────────────────────────────────────────────────
# Date-string collections
# ─────────────────────────────────────────────────────────────────


class TestDateRangeQueries:
    @pytest.mark.asyncio
    async def test_statistics_sum_completed_sessions(self, data_source, collections):
        collections["focusSessions"].find.return_value = _cursor([
            {"durationMinutes": 25, "completed": True, "tasksDone": 1},
            {"durationMinutes": 50, "tasksDone": 2},
            {"durationMinutes": 25, "completed": False},
        ])

        stats = await data_source.get_statistics("2026-09-01", "2026-09-30")

        assert stats == {"focusTime": 75, "sessions": 2, "tasksDone": 3}
        query = collections["focusSessions"].find.call_args.args[0]
        assert query == {"date": {"$gte": "2026-09-01", "$lte": "2026-09-30"}}

    @pytest.mark.asyncio
    async def test_object_id_users_are_converted(self, data_source, collections):
        user_id = str(ObjectId())

        await data_source.get_mood_entries("2026-09-01", "2026-09-30", user_id=user_id)

        query = collections["moodEntries"].find.call_args.args[0]
        assert query["userId"] == ObjectId(user_id)

    @pytest.mark.asyncio
    async def test_other_user_ids_are_used_as_is(self, data_source, collections):
        await data_source.get_mood_entries("2026-09-01", "2026-09-30", user_id="local-user")

        query = collections["moodEntries"].find.call_args.args[0]
        assert query["userId"] == "local-user"

    @pytest.mark.asyncio
    async def test_habit_completions_are_normalized(self, data_source, collections):
        habit_id = ObjectId()
        collections["habitCompletions"].find.return_value = _cursor([
            {"habitId": habit_id, "date": "2026-09-02", "completed": 1},
        ])

        completions = await data_source.get_habit_completions("2026-09-01", "2026-09-30")

        assert completions == [{"habitId": str(habit_id), "date": "2026-09-02", "completed": True}]

    @pytest.mark.asyncio
    async def test_journal_stats(self, data_source, collections):
        collections["journalEntries"].find.return_value = _cursor([
            {"hasGratitude": True, "collectionId": "c1"},
            {"hasGratitude": False, "collectionId": "c1"},
            {"collectionId": "c2"},
            {},
        ])

        stats = await data_source.get_journal_stats_for_period("2026-09-01", "2026-09-30")

        assert stats == {"totalEntries": 4, "gratitudeEntries": 1, "collections": 2}

    @pytest.mark.asyncio
    async def test_habits_exclude_inactive(self, data_source, collections):
        habit_id = ObjectId()
        collections["habits"].find.return_value = _cursor([{"_id": habit_id, "name": "Read"}])

        habits = await data_source.get_habits()

        assert habits == [{"id": str(habit_id), "name": "Read"}]
        query = collections["habits"].find.call_args.args[0]
        assert query == {"isActive": {"$ne": False}}


# ─────────────────────────────────────────────────────────────────
# Goals, activity logs and quality samples
# ─────────────────────────────────────────────────────────────────


class TestTimestampQueries:
    @pytest.mark.asyncio
    async def test_goal_counts_as_completed_only_within_range(self, data_source, collections):
        collections["goals"].find.return_value = _cursor([
            {"_id": "g1", "completed": True, "completedAt": datetime(2026, 9, 12)},
            {"_id": "g2", "completed": True, "completedAt": datetime(2026, 10, 2)},
            {"_id": "g3", "completed": False},
        ])

        goals = await data_source.get_goals_history("2026-09-01", "2026-09-30")

        assert goals == [
            {"id": "g1", "completed": True},
            {"id": "g2", "completed": False},
            {"id": "g3", "completed": False},
        ]

    @pytest.mark.asyncio
    async def test_activity_logs_lift_metadata(self, data_source, collections):
        timestamp = datetime(2026, 9, 3, 7, 0, tzinfo=timezone.utc)
        cursor = _cursor([
            {
                "activityType": "pomodoro",
                "action": "complete",
                "timestamp": timestamp,
                "metadata": {"quality": 8, "duration": 1500},
            },
            {"activityType": "app_open", "timestamp": timestamp},
        ])
        collections["activityLogs"].find.return_value = cursor
        start = datetime(2026, 9, 1, tzinfo=timezone.utc)
        end = datetime(2026, 9, 30, 23, 59, 59, tzinfo=timezone.utc)

        logs = await data_source.get_activity_logs(start, end)

        cursor.sort.assert_called_once_with("timestamp", 1)
        assert logs[0]["quality"] == 8
        assert logs[0]["duration"] == 1500
        assert logs[1]["action"] == "log"
        assert logs[1]["metadata"] == {}
        query = collections["activityLogs"].find.call_args.args[0]
        assert query == {"timestamp": {"$gte": start, "$lte": end}}

    @pytest.mark.asyncio
    async def test_quality_metrics(self, data_source, collections):
        timestamp = datetime(2026, 9, 3, tzinfo=timezone.utc)
        collections["qualityMetrics"].find.return_value = _cursor([
            {"_id": ObjectId(), "activityType": "journal", "qualityScore": 7, "timestamp": timestamp},
        ])

        samples = await data_source.get_quality_metrics(timestamp, timestamp)

        assert samples == [{"activityType": "journal", "qualityScore": 7, "timestamp": timestamp}]
