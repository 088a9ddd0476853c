"""
Monthly score validation.

Structural checks on computed scores, cross-checks between a score and
the metrics it was derived from, and sanity checks on the raw inputs.
Errors are hard violations; warnings are advisory.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from app.productivity.constants import (
    ScoreTier,
    COMPONENT_CAPS,
    TIER_2_THRESHOLD,
    TIER_3_THRESHOLD,
    SCORE_SUM_EPSILON,
    FOCUS_HOURS_EPSILON,
    HABIT_RATE_EPSILON,
    MAX_ACTIVE_DAYS,
    MAX_SCORE,
    MIN_QUALITY_SCORE,
    MAX_QUALITY_SCORE,
    MAX_EXPECTED_ACTIVITY_LOGS,
)
from app.productivity.models import (
    MonthlyScore,
    MonthlyMetrics,
    QualityMetric,
    ActivityLogEntry,
)
from app.productivity.months import is_valid_month_id


@dataclass
class ValidationResult:
    """Collected errors and warnings from a validation pass."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
        )


class ScoreValidator:
    """
    Validates monthly scores and the records they are computed from.
    """

    COMPONENT_LABELS = {
        "baseEngagement": "Base engagement score",
        "qualityMultipliers": "Quality multipliers",
        "consistencyBonuses": "Consistency bonuses",
        "excellenceBonuses": "Excellence bonuses",
    }

    NON_NEGATIVE_METRICS = {
        "pomodoroSessions": "Pomodoro sessions",
        "totalFocusTime": "Total focus time",
        "meditationSessions": "Meditation sessions",
        "breathingExercises": "Breathing exercises",
        "journalEntries": "Journal entries",
        "gratitudeEntries": "Gratitude entries",
        "completedGoals": "Completed goals",
        "habitCompletions": "Habit completions",
        "totalHabits": "Total habits",
        "moodEntries": "Mood entries",
    }

    @staticmethod
    def expected_tier(score: float) -> ScoreTier:
        """Tier implied by the score thresholds."""
        if score >= TIER_3_THRESHOLD:
            return ScoreTier.TIER_3
        if score >= TIER_2_THRESHOLD:
            return ScoreTier.TIER_2
        return ScoreTier.TIER_1

    @classmethod
    def validate_monthly_score(cls, score: MonthlyScore) -> ValidationResult:
        """
        Structural validation of a computed score.

        Args:
            score: Score to check

        Returns:
            ValidationResult; tier mismatch, bounds, month format and
            breakdown sum are errors, component caps are warnings
        """
        result = ValidationResult()

        if score.score < 0 or score.score > MAX_SCORE:
            result.errors.append(f"Score must be between 0 and {MAX_SCORE}")

        valid_tiers = [tier.value for tier in ScoreTier]
        if score.tier not in valid_tiers:
            result.errors.append(f"Tier must be one of {', '.join(valid_tiers)}")

        if not score.month:
            result.errors.append("Month identifier is required")
        elif not is_valid_month_id(score.month):
            result.errors.append("Month must be in YYYY-MM format")

        if abs(score.breakdown.total() - score.score) > SCORE_SUM_EPSILON:
            result.errors.append("Score breakdown does not match total score")

        for name, cap in COMPONENT_CAPS.items():
            value = getattr(score.breakdown, name)
            if value < 0 or value > cap:
                result.warnings.append(
                    f"{cls.COMPONENT_LABELS[name]} seems unusual (expected 0-{cap})"
                )

        expected = cls.expected_tier(score.score).value
        if score.tier != expected:
            result.errors.append(
                f"Score {score.score} should be in tier {expected}, not tier {score.tier}"
            )

        return result

    @classmethod
    def validate_monthly_metrics(cls, metrics: MonthlyMetrics) -> ValidationResult:
        """
        Range and cross-field checks on aggregated metrics.

        Rules:
            - activeDays within 0-31
            - every counter non-negative
            - habitCompletions cannot exceed totalHabits
        """
        result = ValidationResult()

        if metrics.activeDays < 0 or metrics.activeDays > MAX_ACTIVE_DAYS:
            result.errors.append(f"Active days must be between 0 and {MAX_ACTIVE_DAYS}")

        for name, label in cls.NON_NEGATIVE_METRICS.items():
            if getattr(metrics, name) < 0:
                result.errors.append(f"{label} cannot be negative")

        if metrics.habitCompletions > metrics.totalHabits:
            result.errors.append("Habit completions cannot exceed total habits")

        if metrics.pomodoroSessions > 0 and metrics.totalFocusTime == 0:
            result.warnings.append("Pomodoro sessions recorded but no focus time")

        if metrics.totalFocusTime > metrics.pomodoroSessions * 2:
            result.warnings.append("Focus time seems high relative to pomodoro sessions")

        if metrics.activeDays > 25 and metrics.pomodoroSessions == 0:
            result.warnings.append("High activity days but no pomodoro sessions")

        return result

    @classmethod
    def validate_quality_metrics(cls, metrics: Sequence[QualityMetric]) -> ValidationResult:
        """Per-sample checks plus distribution warnings."""
        result = ValidationResult()

        for index, metric in enumerate(metrics):
            if not metric.activityType:
                result.errors.append(f"Quality metric {index}: Activity type is required")

            if metric.qualityScore < MIN_QUALITY_SCORE or metric.qualityScore > MAX_QUALITY_SCORE:
                result.errors.append(
                    f"Quality metric {index}: Quality score must be between "
                    f"{MIN_QUALITY_SCORE} and {MAX_QUALITY_SCORE}"
                )

        if not metrics:
            return result

        avg_quality = sum(m.qualityScore for m in metrics) / len(metrics)

        if avg_quality < 3:
            result.warnings.append("Average quality score is quite low (< 3)")

        if avg_quality > 9:
            result.warnings.append("Average quality score is unusually high (> 9)")

        unique_types = {m.activityType for m in metrics}
        if len(unique_types) < 2 and len(metrics) > 10:
            result.warnings.append("Quality metrics cover only one activity type")

        return result

    @classmethod
    def validate_activity_logs(cls, logs: Sequence[ActivityLogEntry]) -> ValidationResult:
        result = ValidationResult()

        for index, log in enumerate(logs):
            if not log.activityType:
                result.errors.append(f"Activity log {index}: Activity type is required")

            if log.quality is not None and (
                log.quality < MIN_QUALITY_SCORE or log.quality > MAX_QUALITY_SCORE
            ):
                result.errors.append(
                    f"Activity log {index}: Quality must be between "
                    f"{MIN_QUALITY_SCORE} and {MAX_QUALITY_SCORE}"
                )

            if log.duration is not None and log.duration < 0:
                result.errors.append(f"Activity log {index}: Duration cannot be negative")

        if len(logs) > MAX_EXPECTED_ACTIVITY_LOGS:
            result.warnings.append(
                f"Very high number of activity logs ({MAX_EXPECTED_ACTIVITY_LOGS}+)"
            )

        return result

    @classmethod
    def validate_score_consistency(
        cls,
        score: MonthlyScore,
        metrics: MonthlyMetrics,
        quality_metrics: Sequence[QualityMetric] = (),
    ) -> ValidationResult:
        """
        Check that the score's requirements snapshot matches its source metrics.

        Args:
            score: Computed score
            metrics: Metrics the score was computed from
            quality_metrics: Quality samples the score was computed from

        Returns:
            ValidationResult; mismatches are errors, suspicious
            score/activity combinations are warnings
        """
        result = ValidationResult()
        requirements = score.requirements

        if requirements.appDays != metrics.activeDays:
            result.errors.append("Score requirements active days do not match metrics")

        if abs(requirements.pomodoroHours - metrics.totalFocusTime) > FOCUS_HOURS_EPSILON:
            result.errors.append("Score requirements focus time do not match metrics")

        if requirements.meditationSessions != metrics.meditationSessions:
            result.errors.append("Score requirements meditation sessions do not match metrics")

        if requirements.journalEntries != metrics.journalEntries:
            result.errors.append("Score requirements journal entries do not match metrics")

        if requirements.goalCompletions != metrics.completedGoals:
            result.errors.append("Score requirements goal completions do not match metrics")

        if abs(requirements.habitCompletionRate - metrics.habit_completion_rate) > HABIT_RATE_EPSILON:
            result.errors.append("Score requirements habit completion rate do not match metrics")

        if score.score > 90 and metrics.activeDays < 20:
            result.warnings.append("Very high score with low activity days")

        if score.score < 20 and metrics.activeDays > 25:
            result.warnings.append("Very low score with high activity days")

        avg_quality = (
            sum(m.qualityScore for m in quality_metrics) / len(quality_metrics)
            if quality_metrics else 0
        )
        if score.breakdown.qualityMultipliers > 15 and avg_quality < 6:
            result.warnings.append("High quality multipliers with low average quality")

        return result

    @classmethod
    def create_validation_report(
        cls,
        score: MonthlyScore,
        metrics: MonthlyMetrics,
        quality_metrics: Sequence[QualityMetric],
        activity_logs: Sequence[ActivityLogEntry],
    ) -> ValidationResult:
        """Run every check and merge the results."""
        return (
            cls.validate_monthly_score(score)
            .merge(cls.validate_monthly_metrics(metrics))
            .merge(cls.validate_quality_metrics(quality_metrics))
            .merge(cls.validate_activity_logs(activity_logs))
            .merge(cls.validate_score_consistency(score, metrics, quality_metrics))
        )
