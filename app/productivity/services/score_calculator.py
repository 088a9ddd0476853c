"""
Monthly score calculator.

Turns a month's aggregated metrics and quality samples into a bounded
0-100 score, a tier and a four-part breakdown. Pure and synchronous:
no I/O, safe to call from concurrent tasks.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from app.productivity.constants import (
    ScoreTier,
    MAX_BASE_ENGAGEMENT,
    MAX_QUALITY_MULTIPLIERS,
    MAX_CONSISTENCY_BONUSES,
    MAX_EXCELLENCE_BONUSES,
    ENGAGEMENT_RATE_POINTS,
    POMODORO_PARTICIPATION_POINTS,
    FOCUS_TIME_MIN_HOURS,
    FOCUS_TIME_POINTS,
    JOURNAL_PARTICIPATION_POINTS,
    MOOD_PARTICIPATION_POINTS,
    HABIT_CONSISTENCY_POINTS,
    JOURNAL_CONSISTENCY_TARGET,
    JOURNAL_CONSISTENCY_POINTS,
    MEDITATION_CONSISTENCY_TARGET,
    MEDITATION_CONSISTENCY_POINTS,
    EXCELLENCE_MIN_HABITS,
    EXCELLENCE_HABIT_RATE,
    EXCELLENCE_HABIT_POINTS,
    EXCELLENCE_FOCUS_HOURS,
    EXCELLENCE_FOCUS_POINTS,
    EXCELLENCE_JOURNAL_ENTRIES,
    EXCELLENCE_JOURNAL_POINTS,
    EXCELLENCE_MEDITATION_SESSIONS,
    EXCELLENCE_MEDITATION_POINTS,
    QUALITY_NEUTRAL_SCORE,
    QUALITY_SCALE,
)
from app.productivity.models import (
    MonthlyMetrics,
    MonthlyRequirements,
    MonthlyScore,
    QualityMetric,
    ScoreBreakdown,
)
from app.productivity.months import days_in_month
from app.productivity.services.score_validator import ScoreValidator

logger = logging.getLogger(__name__)


def _highest_tier_points(value: float, tiers: List[Tuple[float, int]]) -> int:
    """Points of the first (highest) threshold the value reaches."""
    for threshold, points in tiers:
        if value >= threshold:
            return points
    return 0


class ScoreCalculator:
    """
    Computes monthly scores from metrics and quality samples.
    """

    @classmethod
    def calculate_monthly_score(
        cls,
        metrics: MonthlyMetrics,
        quality_metrics: Sequence[QualityMetric],
        month_id: str,
        user_id: Optional[str] = None
    ) -> MonthlyScore:
        """
        Calculate the score for one month.

        Args:
            metrics: Aggregated metrics for the month
            quality_metrics: Quality samples for the month (may be empty)
            month_id: Month identifier (YYYY-MM)
            user_id: Optional user the score belongs to

        Returns:
            MonthlyScore with tier, breakdown and requirements snapshot
        """
        breakdown = cls.calculate_breakdown(metrics, quality_metrics, days_in_month(month_id))
        score = round(breakdown.total(), 2)

        return MonthlyScore(
            score=score,
            tier=cls.tier_for_score(score).value,
            breakdown=breakdown,
            requirements=cls.extract_requirements(metrics),
            month=month_id,
            userId=user_id,
        )

    @classmethod
    def calculate_breakdown(
        cls,
        metrics: MonthlyMetrics,
        quality_metrics: Sequence[QualityMetric],
        month_days: int
    ) -> ScoreBreakdown:
        return ScoreBreakdown(
            baseEngagement=cls.base_engagement(metrics, month_days),
            qualityMultipliers=cls.quality_multipliers(quality_metrics),
            consistencyBonuses=cls.consistency_bonuses(metrics),
            excellenceBonuses=cls.excellence_bonuses(metrics),
        )

    @staticmethod
    def tier_for_score(score: float) -> ScoreTier:
        return ScoreValidator.expected_tier(score)

    @staticmethod
    def base_engagement(metrics: MonthlyMetrics, month_days: int) -> float:
        """
        Engagement rate plus participation points, capped at 50.

        Engagement thresholds stack: a 90% month earns 20 + 15 + 10.
        """
        engagement_rate = metrics.activeDays / month_days if month_days > 0 else 0
        points = 0

        for threshold, threshold_points in ENGAGEMENT_RATE_POINTS:
            if engagement_rate >= threshold:
                points += threshold_points

        if metrics.pomodoroSessions > 0:
            points += POMODORO_PARTICIPATION_POINTS

        if metrics.totalFocusTime >= FOCUS_TIME_MIN_HOURS:
            points += FOCUS_TIME_POINTS

        if metrics.journalEntries > 0:
            points += JOURNAL_PARTICIPATION_POINTS

        if metrics.moodEntries > 0:
            points += MOOD_PARTICIPATION_POINTS

        logger.debug(
            f"Base engagement: rate={engagement_rate:.2f} raw={points} "
            f"capped={min(MAX_BASE_ENGAGEMENT, points)}"
        )
        return min(MAX_BASE_ENGAGEMENT, points)

    @staticmethod
    def quality_multipliers(quality_metrics: Sequence[QualityMetric]) -> float:
        """
        Weighted mean of per-type adjusted quality, capped at 25.

        Each activity type contributes max(0, (avg - 5) * 2) weighted by
        its fixed weight.
        """
        if not quality_metrics:
            return 0

        scores_by_type: Dict[str, List[float]] = defaultdict(list)
        weights: Dict[str, float] = {}
        for metric in quality_metrics:
            scores_by_type[metric.activityType].append(metric.qualityScore)
            weights[metric.activityType] = metric.weight

        total_weighted = 0.0
        total_weight = 0.0

        for activity_type, scores in scores_by_type.items():
            avg_quality = sum(scores) / len(scores)
            adjusted = max(0.0, (avg_quality - QUALITY_NEUTRAL_SCORE) * QUALITY_SCALE)
            total_weighted += adjusted * weights[activity_type]
            total_weight += weights[activity_type]

        if total_weight <= 0:
            return 0

        return min(MAX_QUALITY_MULTIPLIERS, total_weighted / total_weight)

    @staticmethod
    def consistency_bonuses(metrics: MonthlyMetrics) -> float:
        """
        Participation-rate bonuses, capped at 15.

        Within each category only the highest satisfied tier counts.
        """
        bonus = _highest_tier_points(metrics.habit_completion_rate, HABIT_CONSISTENCY_POINTS)
        bonus += _highest_tier_points(
            metrics.journalEntries / JOURNAL_CONSISTENCY_TARGET, JOURNAL_CONSISTENCY_POINTS
        )
        bonus += _highest_tier_points(
            metrics.meditationSessions / MEDITATION_CONSISTENCY_TARGET,
            MEDITATION_CONSISTENCY_POINTS,
        )
        return min(MAX_CONSISTENCY_BONUSES, bonus)

    @staticmethod
    def excellence_bonuses(metrics: MonthlyMetrics) -> float:
        """Fixed bonuses for clearing the high minimums, capped at 10."""
        bonus = 0

        if (
            metrics.totalHabits >= EXCELLENCE_MIN_HABITS
            and metrics.habit_completion_rate >= EXCELLENCE_HABIT_RATE
        ):
            bonus += EXCELLENCE_HABIT_POINTS

        if metrics.totalFocusTime >= EXCELLENCE_FOCUS_HOURS:
            bonus += EXCELLENCE_FOCUS_POINTS

        if metrics.journalEntries >= EXCELLENCE_JOURNAL_ENTRIES:
            bonus += EXCELLENCE_JOURNAL_POINTS

        if metrics.meditationSessions >= EXCELLENCE_MEDITATION_SESSIONS:
            bonus += EXCELLENCE_MEDITATION_POINTS

        return min(MAX_EXCELLENCE_BONUSES, bonus)

    @staticmethod
    def extract_requirements(metrics: MonthlyMetrics) -> MonthlyRequirements:
        return MonthlyRequirements(
            appDays=metrics.activeDays,
            pomodoroHours=metrics.totalFocusTime,
            meditationSessions=metrics.meditationSessions,
            journalEntries=metrics.journalEntries,
            habitCompletionRate=metrics.habit_completion_rate,
            goalCompletions=metrics.completedGoals,
        )
