"""
Monthly metric aggregation.

Fetches one month of data from every collaborator concurrently and folds
it into a single MonthlyMetrics record. Each source is fetched and
validated independently; a failing source is logged and replaced by its
zero-valued default without affecting the others.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.productivity.constants import (
    ActivityType,
    CACHE_KIND_METRICS,
    MIN_QUALITY_SCORE,
    MAX_QUALITY_SCORE,
)
from app.productivity.models import (
    ActivityLogEntry,
    GoalRecord,
    HabitCompletionRecord,
    HabitRecord,
    JournalPeriodStats,
    MonthlyMetrics,
    MoodEntryRecord,
    QualityMetric,
    StatisticsSummary,
)
from app.productivity.months import month_date_range, month_datetime_range, to_utc_date
from app.productivity.services.data_sources import ActivityDataSource
from app.productivity.services.score_cache import ScoreCache
from app.productivity.services.score_validator import ScoreValidator

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class MetricAggregator:
    """
    Gathers and normalizes a month of activity data.
    """

    def __init__(self, data_source: ActivityDataSource, cache: ScoreCache):
        """
        Initialize MetricAggregator.

        Args:
            data_source: Collaborator services to read from
            cache: Cache receiving the aggregated records
        """
        self._data_source = data_source
        self._cache = cache

    async def gather_monthly_metrics(
        self,
        month_id: str,
        user_id: Optional[str] = None
    ) -> MonthlyMetrics:
        """
        Aggregate a month of data into MonthlyMetrics.

        Args:
            month_id: Month identifier (YYYY-MM)
            user_id: Optional user to scope the data to

        Returns:
            Best-effort MonthlyMetrics; failed sources contribute zeros
        """
        start, end = month_date_range(month_id)
        start_iso, end_iso = start.isoformat(), end.isoformat()
        ds = self._data_source

        (
            statistics,
            goals,
            habits,
            completions,
            mood_entries,
            journal_stats,
            activity_logs,
        ) = await asyncio.gather(
            self._fetch_one(
                "statistics", month_id, user_id, StatisticsSummary(),
                lambda: ds.get_statistics(start_iso, end_iso, user_id=user_id),
                StatisticsSummary,
            ),
            self._fetch_many(
                "goals", month_id, user_id,
                lambda: ds.get_goals_history(start_iso, end_iso, user_id=user_id),
                GoalRecord,
            ),
            self._fetch_many(
                "habits", month_id, user_id,
                lambda: ds.get_habits(user_id=user_id),
                HabitRecord,
            ),
            self._fetch_many(
                "habit completions", month_id, user_id,
                lambda: ds.get_habit_completions(start_iso, end_iso, user_id=user_id),
                HabitCompletionRecord,
            ),
            self._fetch_many(
                "mood entries", month_id, user_id,
                lambda: ds.get_mood_entries(start_iso, end_iso, user_id=user_id),
                MoodEntryRecord,
            ),
            self._fetch_one(
                "journal stats", month_id, user_id, JournalPeriodStats(),
                lambda: ds.get_journal_stats_for_period(start_iso, end_iso, user_id=user_id),
                JournalPeriodStats,
            ),
            self.gather_activity_logs(month_id, user_id),
        )

        habit_ids = {habit.id for habit in habits}
        completed_habit_ids = {
            c.habitId for c in completions if c.completed and c.habitId in habit_ids
        }

        metrics = MonthlyMetrics(
            activeDays=self.count_active_days(activity_logs, start, end),
            pomodoroSessions=statistics.sessions,
            totalFocusTime=round(statistics.focusTime / 60, 2),
            meditationSessions=self._count_type(activity_logs, ActivityType.MEDITATION),
            breathingExercises=self._count_type(activity_logs, ActivityType.BREATHING),
            journalEntries=journal_stats.totalEntries,
            gratitudeEntries=journal_stats.gratitudeEntries,
            completedGoals=sum(1 for goal in goals if goal.completed),
            habitCompletions=len(completed_habit_ids),
            totalHabits=len(habits),
            moodEntries=len(mood_entries),
        )

        validation = ScoreValidator.validate_monthly_metrics(metrics)
        for error in validation.errors:
            logger.error(f"Metrics validation error for {month_id} (user {user_id}): {error}")
        for warning in validation.warnings:
            logger.warning(f"Metrics validation warning for {month_id} (user {user_id}): {warning}")

        await self._cache_result(
            CACHE_KIND_METRICS, month_id, user_id, metrics.model_dump(mode="json")
        )

        logger.info(
            f"Gathered metrics for {month_id} (user {user_id}): "
            f"{metrics.activeDays} active days, {metrics.totalFocusTime}h focus"
        )
        return metrics

    async def gather_quality_metrics(
        self,
        month_id: str,
        user_id: Optional[str] = None
    ) -> List[QualityMetric]:
        """
        Fetch the month's quality samples.

        Invalid samples and samples outside the month are dropped; a failed
        fetch yields an empty list.
        """
        start_dt, end_dt = month_datetime_range(month_id)
        start, end = start_dt.date(), end_dt.date()

        samples = await self._fetch_many(
            "quality metrics", month_id, user_id,
            lambda: self._data_source.get_quality_metrics(start_dt, end_dt, user_id=user_id),
            QualityMetric,
        )

        in_month = [s for s in samples if start <= to_utc_date(s.timestamp) <= end]

        validation = ScoreValidator.validate_quality_metrics(in_month)
        for error in validation.errors:
            logger.warning(f"Dropping quality sample for {month_id}: {error}")
        for warning in validation.warnings:
            logger.warning(f"Quality metrics warning for {month_id} (user {user_id}): {warning}")

        return [
            s for s in in_month
            if s.activityType and MIN_QUALITY_SCORE <= s.qualityScore <= MAX_QUALITY_SCORE
        ]

    async def gather_activity_logs(
        self,
        month_id: str,
        user_id: Optional[str] = None
    ) -> List[ActivityLogEntry]:
        """Fetch the month's activity log, restricted to entries inside the month."""
        start_dt, end_dt = month_datetime_range(month_id)
        start, end = start_dt.date(), end_dt.date()

        logs = await self._fetch_many(
            "activity logs", month_id, user_id,
            lambda: self._data_source.get_activity_logs(start_dt, end_dt, user_id=user_id),
            ActivityLogEntry,
        )

        in_month = [log for log in logs if start <= to_utc_date(log.timestamp) <= end]

        validation = ScoreValidator.validate_activity_logs(in_month)
        for error in validation.errors:
            logger.warning(f"Activity log issue for {month_id} (user {user_id}): {error}")
        for warning in validation.warnings:
            logger.debug(f"Activity log warning for {month_id} (user {user_id}): {warning}")

        return in_month

    async def _cache_result(
        self, kind: str, month_id: str, user_id: Optional[str], value: Dict[str, Any]
    ) -> None:
        """Write to the cache; a cache failure never fails the aggregation."""
        try:
            await self._cache.set(kind, month_id, user_id, value)
        except Exception as e:
            logger.warning(f"Failed to cache {kind} for {month_id} (user {user_id}): {e}")

    @staticmethod
    def count_active_days(
        logs: Sequence[ActivityLogEntry],
        start: date,
        end: date
    ) -> int:
        """Distinct calendar days inside [start, end] with at least one entry."""
        days = {to_utc_date(log.timestamp) for log in logs}
        return sum(1 for day in days if start <= day <= end)

    @staticmethod
    def _count_type(logs: Sequence[ActivityLogEntry], activity_type: ActivityType) -> int:
        return sum(1 for log in logs if log.activityType == activity_type.value)

    async def _fetch_one(
        self,
        source: str,
        month_id: str,
        user_id: Optional[str],
        default: ModelT,
        fetch: Callable[[], Awaitable[Any]],
        model: Type[ModelT],
    ) -> ModelT:
        """Fetch and validate a single record, falling back to the default."""
        try:
            raw = await fetch()
            if raw is None:
                return default
            return model.model_validate(raw)
        except Exception as e:
            logger.error(
                f"Failed to fetch {source} for {month_id} (user {user_id}), using defaults: {e}"
            )
            return default

    async def _fetch_many(
        self,
        source: str,
        month_id: str,
        user_id: Optional[str],
        fetch: Callable[[], Awaitable[Any]],
        model: Type[ModelT],
    ) -> List[ModelT]:
        """
        Fetch a list and validate each item.

        A failed fetch yields []; items failing validation are skipped.
        """
        try:
            raw_items = await fetch()
        except Exception as e:
            logger.error(
                f"Failed to fetch {source} for {month_id} (user {user_id}), using defaults: {e}"
            )
            return []

        if not isinstance(raw_items, list):
            logger.error(
                f"Unexpected {source} payload for {month_id} (user {user_id}): "
                f"{type(raw_items).__name__}"
            )
            return []

        items = []
        for index, raw in enumerate(raw_items):
            try:
                items.append(model.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping invalid {source} item {index} for {month_id}: {e}")
        return items
