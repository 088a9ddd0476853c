"""
Monthly productivity service.

Orchestrates aggregation, scoring, validation and caching for single
months, and assembles multi-month history and current-month progress.
Constructed once at application startup and injected into callers.
"""

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from app.productivity.constants import (
    ScoreTier,
    TIER_TARGETS,
    TIER_LOWER_BOUNDS,
    CACHE_KIND_SCORE,
    CACHE_KIND_METRICS,
    CACHE_KIND_ANALYTICS,
    MAX_HISTORY_MONTHS,
)
from app.productivity.models import (
    CurrentMonthProgress,
    MonthlyAnalytics,
    MonthlyMetrics,
    MonthlyScore,
    QualityMetric,
    ScoreHistoryEntry,
    TierProgress,
)
from app.productivity.months import (
    days_in_month,
    format_month_id,
    parse_month_id,
    shift_month,
)
from app.productivity.exceptions import ScoreValidationException
from app.productivity.services.analytics_service import MonthlyAnalyticsService
from app.productivity.services.data_sources import ActivityDataSource
from app.productivity.services.metric_aggregator import MetricAggregator
from app.productivity.services.score_cache import ScoreCache
from app.productivity.services.score_calculator import ScoreCalculator
from app.productivity.services.score_validator import ScoreValidator
from common.utils.exceptions import BadRequestException

logger = logging.getLogger(__name__)

TIER_NUMBERS = {
    ScoreTier.TIER_1.value: 1,
    ScoreTier.TIER_2.value: 2,
    ScoreTier.TIER_3.value: 3,
}


def _format_amount(value: float) -> str:
    """Whole numbers without decimals, otherwise one decimal place."""
    rounded = round(value, 1)
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)


class ProductivityService:
    """
    Public entry point of the monthly productivity scoring engine.
    """

    def __init__(
        self,
        data_source: ActivityDataSource,
        cache: ScoreCache,
        history_months: int = 12,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize ProductivityService.

        Args:
            data_source: Collaborator services the aggregator reads from
            cache: Month-keyed cache for scores, metrics and analytics
            history_months: Default number of months in a score history
            clock: Returns the current time; defaults to UTC now
        """
        self._cache = cache
        self._aggregator = MetricAggregator(data_source, cache)
        self._analytics_service = MonthlyAnalyticsService(self._aggregator)
        self._history_months = history_months
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ─────────────────────────────────────────────────────────────────
    # Single month
    # ─────────────────────────────────────────────────────────────────

    async def calculate_monthly_score(
        self,
        month_id: str,
        user_id: Optional[str] = None,
        force_recalculate: bool = False
    ) -> MonthlyScore:
        """
        Get the score for a month, from cache unless a recalculation is forced.

        Args:
            month_id: Month identifier (YYYY-MM)
            user_id: Optional user the score belongs to
            force_recalculate: Bypass and replace cached results

        Returns:
            Validated MonthlyScore

        Raises:
            InvalidMonthException: Malformed month identifier
            ScoreValidationException: Computed score failed validation
        """
        parse_month_id(month_id)

        if force_recalculate:
            try:
                await self._cache.invalidate(month_id, user_id)
            except Exception as e:
                logger.warning(f"Cache invalidation failed for {month_id} (user {user_id}): {e}")
        else:
            cached = await self._cache_get(CACHE_KIND_SCORE, month_id, user_id)
            if cached is not None:
                logger.debug(f"Score cache hit for {month_id} (user {user_id})")
                return MonthlyScore.model_validate(cached)

        metrics, quality_metrics = await asyncio.gather(
            self._aggregator.gather_monthly_metrics(month_id, user_id),
            self._aggregator.gather_quality_metrics(month_id, user_id),
        )

        score = ScoreCalculator.calculate_monthly_score(
            metrics, quality_metrics, month_id, user_id
        )
        self._validate_score(score, metrics, quality_metrics)

        await self._cache_set(CACHE_KIND_SCORE, month_id, user_id, score.model_dump(mode="json"))

        logger.info(
            f"Calculated score for {month_id} (user {user_id}): {score.score} ({score.tier})"
        )
        return score

    async def gather_monthly_metrics(
        self,
        month_id: str,
        user_id: Optional[str] = None
    ) -> MonthlyMetrics:
        """
        Get the aggregated metrics for a month, from cache when available.

        Raises:
            InvalidMonthException: Malformed month identifier
        """
        parse_month_id(month_id)

        cached = await self._cache_get(CACHE_KIND_METRICS, month_id, user_id)
        if cached is not None:
            logger.debug(f"Metrics cache hit for {month_id} (user {user_id})")
            return MonthlyMetrics.model_validate(cached)

        return await self._aggregator.gather_monthly_metrics(month_id, user_id)

    async def get_monthly_analytics(
        self,
        month_id: str,
        user_id: Optional[str] = None
    ) -> MonthlyAnalytics:
        """
        Get activity analytics for a month, from cache when available.

        Raises:
            InvalidMonthException: Malformed month identifier
        """
        parse_month_id(month_id)

        cached = await self._cache_get(CACHE_KIND_ANALYTICS, month_id, user_id)
        if cached is not None:
            logger.debug(f"Analytics cache hit for {month_id} (user {user_id})")
            return MonthlyAnalytics.model_validate(cached)

        analytics = await self._analytics_service.get_monthly_analytics(month_id, user_id)
        await self._cache_set(
            CACHE_KIND_ANALYTICS, month_id, user_id, analytics.model_dump(mode="json")
        )
        return analytics

    async def refresh_monthly_data(
        self,
        month_id: str,
        user_id: Optional[str] = None
    ) -> None:
        """Invalidate everything cached for the month and recompute the score."""
        parse_month_id(month_id)
        logger.info(f"Refreshing monthly data for {month_id} (user {user_id})")
        await self.calculate_monthly_score(month_id, user_id, force_recalculate=True)

    async def notify_data_changed(
        self,
        changed_on: date,
        user_id: Optional[str] = None
    ) -> None:
        """
        Signal from a collaborator that data for a day has changed.

        Drops the cached results of the month containing that day; the next
        request recomputes them.
        """
        month_id = format_month_id(changed_on)
        await self._cache.invalidate(month_id, user_id)
        logger.info(f"Invalidated cached results for {month_id} (user {user_id}) after data change")

    async def clear_cache(self) -> None:
        await self._cache.clear()
        logger.info("Productivity cache cleared")

    # ─────────────────────────────────────────────────────────────────
    # Multi-month views
    # ─────────────────────────────────────────────────────────────────

    async def get_score_history(
        self,
        months_back: Optional[int] = None,
        user_id: Optional[str] = None
    ) -> List[ScoreHistoryEntry]:
        """
        Scores for the last months_back months, current month included.

        Months are calculated one after another; a month that fails is
        logged and left out of the result.

        Args:
            months_back: Number of months (1-36), defaults to the configured value
            user_id: Optional user the scores belong to

        Returns:
            History entries sorted by month, oldest first
        """
        months_back = self._history_months if months_back is None else months_back
        if months_back < 1 or months_back > MAX_HISTORY_MONTHS:
            raise BadRequestException(
                message=f"monthsBack must be between 1 and {MAX_HISTORY_MONTHS}",
                code="INVALID_HISTORY_RANGE",
            )

        current_month = self.current_month_id()
        months = [shift_month(current_month, -offset) for offset in range(months_back)]

        scores: List[MonthlyScore] = []
        for month_id in months:
            try:
                scores.append(await self.calculate_monthly_score(month_id, user_id))
            except Exception as e:
                logger.error(f"Skipping {month_id} in score history (user {user_id}): {e}")

        scores.sort(key=lambda s: s.month)
        return self._build_history(scores)

    async def get_current_month_progress(
        self,
        user_id: Optional[str] = None
    ) -> CurrentMonthProgress:
        """
        Current month's score with the distance to the next tier.
        """
        month_id = self.current_month_id()

        score = await self.calculate_monthly_score(month_id, user_id)
        today = self._clock().date()

        return CurrentMonthProgress(
            currentScore=score,
            progressToNextTier=self.calculate_progress_to_next_tier(score),
            daysRemaining=days_in_month(month_id) - today.day,
        )

    def current_month_id(self) -> str:
        return format_month_id(self._clock())

    # ─────────────────────────────────────────────────────────────────
    # Tier progress
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def get_tier_targets(tier: int) -> Dict[str, Any]:
        """Requirement targets of tier 1, 2 or 3."""
        tiers = {1: ScoreTier.TIER_1, 2: ScoreTier.TIER_2, 3: ScoreTier.TIER_3}
        return dict(TIER_TARGETS[tiers.get(tier, ScoreTier.TIER_1)])

    @classmethod
    def calculate_progress_to_next_tier(cls, score: MonthlyScore) -> TierProgress:
        """
        Missing requirements and percentage progress toward the next tier.

        Measured against the requirements snapshot stored with the score, so
        a cached score is compared with the metrics it was computed from.
        Tier 3 always reports 100% and nothing missing.
        """
        tier_number = TIER_NUMBERS.get(score.tier, 1)

        if tier_number == 3:
            return TierProgress(nextTier=3, progressPercentage=100, missingRequirements=[])

        next_tier = tier_number + 1
        targets = cls.get_tier_targets(next_tier)
        current = score.requirements
        missing: List[str] = []

        if current.appDays < targets["appDays"]:
            missing.append(f"{targets['appDays'] - current.appDays} more active days")

        if current.pomodoroHours < targets["pomodoroHours"]:
            missing.append(
                f"{_format_amount(targets['pomodoroHours'] - current.pomodoroHours)} more focus hours"
            )

        if current.meditationSessions < targets["meditationSessions"]:
            missing.append(
                f"{targets['meditationSessions'] - current.meditationSessions} more meditation sessions"
            )

        if current.journalEntries < targets["journalEntries"]:
            missing.append(f"{targets['journalEntries'] - current.journalEntries} more journal entries")

        if current.habitCompletionRate < targets["habitCompletionRate"]:
            needed_rate = round((targets["habitCompletionRate"] - current.habitCompletionRate) * 100)
            missing.append(f"{needed_rate}% better habit completion rate")

        if current.goalCompletions < targets["goalCompletions"]:
            missing.append(f"{targets['goalCompletions'] - current.goalCompletions} more goal completions")

        tier_bounds = list(TIER_LOWER_BOUNDS.values())
        lower = tier_bounds[tier_number - 1]
        upper = tier_bounds[next_tier - 1]
        percentage = (score.score - lower) / (upper - lower) * 100

        return TierProgress(
            nextTier=next_tier,
            progressPercentage=round(min(100, max(0, percentage))),
            missingRequirements=missing,
        )

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    def _validate_score(
        self,
        score: MonthlyScore,
        metrics: MonthlyMetrics,
        quality_metrics: Sequence[QualityMetric]
    ) -> None:
        """Raise on structural or consistency errors; log warnings."""
        result = ScoreValidator.validate_monthly_score(score).merge(
            ScoreValidator.validate_score_consistency(score, metrics, quality_metrics)
        )

        for warning in result.warnings:
            logger.warning(f"Score validation warning for {score.month} (user {score.userId}): {warning}")

        if not result.is_valid:
            logger.error(
                f"Score validation failed for {score.month} (user {score.userId}): {result.errors}"
            )
            raise ScoreValidationException(score.month, result.errors)

    @staticmethod
    def _build_history(scores: Sequence[MonthlyScore]) -> List[ScoreHistoryEntry]:
        history = []
        previous: Optional[MonthlyScore] = None
        for score in scores:
            history.append(ScoreHistoryEntry(
                month=score.month,
                score=score.score,
                tier=score.tier,
                breakdown=score.breakdown,
                requirements=score.requirements,
                scoreChange=round(score.score - previous.score, 2) if previous else None,
            ))
            previous = score
        return history

    async def _cache_get(
        self, kind: str, month_id: str, user_id: Optional[str]
    ) -> Optional[Dict[str, Any]]:
        """Cache read; a failing cache behaves like a miss."""
        try:
            return await self._cache.get(kind, month_id, user_id)
        except Exception as e:
            logger.warning(f"Cache read failed for {kind} {month_id} (user {user_id}): {e}")
            return None

    async def _cache_set(
        self, kind: str, month_id: str, user_id: Optional[str], value: Dict[str, Any]
    ) -> None:
        try:
            await self._cache.set(kind, month_id, user_id, value)
        except Exception as e:
            logger.warning(f"Cache write failed for {kind} {month_id} (user {user_id}): {e}")
