"""Shared test fixtures for Momentum backend tests."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from app.productivity.models import MonthlyMetrics
from app.productivity.services.productivity_service import ProductivityService
from app.productivity.services.score_cache import InMemoryScoreCache


FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

# September 2026 has 30 days
SCENARIO_MONTH = "2026-09"


def _make_log(
    day: int,
    activity_type: str = "app_open",
    month: str = SCENARIO_MONTH,
    hour: int = 9,
    **extra
):
    year, month_num = (int(p) for p in month.split("-"))
    entry = {
        "activityType": activity_type,
        "action": "complete",
        "timestamp": datetime(year, month_num, day, hour, 0, tzinfo=timezone.utc),
    }
    entry.update(extra)
    return entry


@pytest.fixture
def make_log():
    """Factory for raw activity log documents."""
    return _make_log


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def scenario_metrics():
    """20 of 30 days active, 6h focus, 3 journal entries, 3 of 5 habits."""
    return MonthlyMetrics(
        activeDays=20,
        pomodoroSessions=5,
        totalFocusTime=6,
        journalEntries=3,
        moodEntries=0,
        totalHabits=5,
        habitCompletions=3,
        meditationSessions=0,
    )


@pytest.fixture
def mock_data_source():
    """
    Collaborator returning data that reproduces scenario_metrics for
    September 2026.
    """
    source = AsyncMock()
    source.get_statistics.return_value = {"focusTime": 360, "sessions": 5, "tasksDone": 2}
    source.get_goals_history.return_value = [
        {"id": "g1", "completed": False},
    ]
    source.get_habits.return_value = [{"id": f"h{i}", "name": f"Habit {i}"} for i in range(1, 6)]
    source.get_habit_completions.return_value = [
        {"habitId": "h1", "date": "2026-09-01", "completed": True},
        {"habitId": "h1", "date": "2026-09-02", "completed": True},
        {"habitId": "h2", "date": "2026-09-03", "completed": True},
        {"habitId": "h3", "date": "2026-09-04", "completed": True},
        {"habitId": "h4", "date": "2026-09-05", "completed": False},
    ]
    source.get_mood_entries.return_value = []
    source.get_journal_stats_for_period.return_value = {
        "totalEntries": 3,
        "gratitudeEntries": 1,
        "collections": 1,
    }
    source.get_activity_logs.return_value = [_make_log(day) for day in range(1, 21)]
    source.get_quality_metrics.return_value = []
    return source


@pytest.fixture
def memory_cache():
    return InMemoryScoreCache()


@pytest.fixture
def fixed_clock():
    return MagicMock(return_value=FIXED_NOW)


@pytest.fixture
def productivity_service(mock_data_source, memory_cache, fixed_clock):
    return ProductivityService(
        data_source=mock_data_source,
        cache=memory_cache,
        clock=fixed_clock,
    )
