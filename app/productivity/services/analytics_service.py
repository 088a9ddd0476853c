"""
Monthly activity analytics.

Derives read-only activity views for a month: counts per activity type,
most frequent types, per-week activity and average quality per type.
"""

import logging
from collections import Counter, defaultdict
from typing import Dict, List, Optional, Sequence

from app.productivity.models import (
    ActivityLogEntry,
    ActivityTypeCount,
    MonthlyAnalytics,
    QualityMetric,
    WeeklyActivity,
)
from app.productivity.months import month_date_range, to_utc_date, week_ranges
from app.productivity.services.metric_aggregator import MetricAggregator

logger = logging.getLogger(__name__)


class MonthlyAnalyticsService:
    """
    Builds activity analytics for a month from the aggregator's raw data.
    """

    TOP_ACTIVITY_TYPES = 3

    def __init__(self, aggregator: MetricAggregator):
        """
        Initialize MonthlyAnalyticsService.

        Args:
            aggregator: For fetching activity logs and quality samples
        """
        self._aggregator = aggregator

    async def get_monthly_analytics(
        self,
        month_id: str,
        user_id: Optional[str] = None
    ) -> MonthlyAnalytics:
        """
        Fetch the month's logs and quality samples and derive analytics.

        Args:
            month_id: Month identifier (YYYY-MM)
            user_id: Optional user to scope the data to

        Returns:
            MonthlyAnalytics for the month
        """
        logs = await self._aggregator.gather_activity_logs(month_id, user_id)
        quality_metrics = await self._aggregator.gather_quality_metrics(month_id, user_id)

        analytics = self.build_analytics(month_id, logs, quality_metrics, user_id)
        logger.info(
            f"Built analytics for {month_id} (user {user_id}): "
            f"{analytics.totalActivities} activities over {analytics.activeDays} days"
        )
        return analytics

    @classmethod
    def build_analytics(
        cls,
        month_id: str,
        logs: Sequence[ActivityLogEntry],
        quality_metrics: Sequence[QualityMetric],
        user_id: Optional[str] = None
    ) -> MonthlyAnalytics:
        start, end = month_date_range(month_id)
        activity_counts = Counter(log.activityType for log in logs)

        return MonthlyAnalytics(
            month=month_id,
            userId=user_id,
            totalActivities=len(logs),
            activeDays=MetricAggregator.count_active_days(logs, start, end),
            activityCounts=dict(sorted(activity_counts.items())),
            topActivityTypes=cls._top_activity_types(activity_counts),
            weeklyBreakdown=cls._weekly_breakdown(month_id, logs),
            totalDurationMinutes=round(
                sum(log.duration or 0 for log in logs) / 60, 2
            ),
            averageQualityByType=cls._average_quality_by_type(quality_metrics),
        )

    @classmethod
    def _top_activity_types(cls, counts: Counter) -> List[ActivityTypeCount]:
        """Most frequent types, ties broken alphabetically."""
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [
            ActivityTypeCount(activityType=activity_type, count=count)
            for activity_type, count in ranked[:cls.TOP_ACTIVITY_TYPES]
        ]

    @staticmethod
    def _weekly_breakdown(
        month_id: str,
        logs: Sequence[ActivityLogEntry]
    ) -> List[WeeklyActivity]:
        log_days = [to_utc_date(log.timestamp) for log in logs]

        weeks = []
        for index, (week_start, week_end) in enumerate(week_ranges(month_id), start=1):
            days_in_week = [day for day in log_days if week_start <= day <= week_end]
            weeks.append(WeeklyActivity(
                week=index,
                startDate=week_start,
                endDate=week_end,
                activities=len(days_in_week),
                activeDays=len(set(days_in_week)),
            ))
        return weeks

    @staticmethod
    def _average_quality_by_type(
        quality_metrics: Sequence[QualityMetric]
    ) -> Dict[str, float]:
        scores: Dict[str, List[float]] = defaultdict(list)
        for metric in quality_metrics:
            scores[metric.activityType].append(metric.qualityScore)

        return {
            activity_type: round(sum(values) / len(values), 2)
            for activity_type, values in sorted(scores.items())
        }
