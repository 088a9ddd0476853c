"""
Pydantic models for the monthly productivity scoring engine.

Defines the metrics, score and analytics records produced by the engine
and the typed contracts for data returned by collaborator services.
"""

from datetime import date, datetime
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.productivity.constants import QUALITY_ACTIVITY_WEIGHTS, DEFAULT_QUALITY_WEIGHT


# ─────────────────────────────────────────────────────────────────
# Engine records
# ─────────────────────────────────────────────────────────────────


class MonthlyMetrics(BaseModel):
    """Aggregated activity counters for one month and user."""
    model_config = ConfigDict(frozen=True)

    activeDays: int = 0
    pomodoroSessions: int = 0
    totalFocusTime: float = Field(default=0.0, description="Hours")
    meditationSessions: int = 0
    breathingExercises: int = 0
    journalEntries: int = 0
    gratitudeEntries: int = 0
    completedGoals: int = 0
    habitCompletions: int = 0
    totalHabits: int = 0
    moodEntries: int = 0

    @classmethod
    def empty(cls) -> "MonthlyMetrics":
        return cls()

    @property
    def habit_completion_rate(self) -> float:
        if self.totalHabits <= 0:
            return 0.0
        return self.habitCompletions / self.totalHabits


class QualityMetric(BaseModel):
    """A single 1-10 quality rating of an activity instance."""
    activityType: str
    qualityScore: float
    timestamp: datetime

    @field_validator("activityType")
    @classmethod
    def normalize_activity_type(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def weight(self) -> float:
        return QUALITY_ACTIVITY_WEIGHTS.get(self.activityType, DEFAULT_QUALITY_WEIGHT)


class ScoreBreakdown(BaseModel):
    """Per-component contribution to the monthly score."""
    baseEngagement: float = 0
    qualityMultipliers: float = 0
    consistencyBonuses: float = 0
    excellenceBonuses: float = 0

    def total(self) -> float:
        return (
            self.baseEngagement
            + self.qualityMultipliers
            + self.consistencyBonuses
            + self.excellenceBonuses
        )


class MonthlyRequirements(BaseModel):
    """Snapshot of the metrics a score was computed from."""
    appDays: int
    pomodoroHours: float
    meditationSessions: int
    journalEntries: int
    habitCompletionRate: float
    goalCompletions: int


class MonthlyScore(BaseModel):
    """Bounded monthly score with tier and breakdown."""
    score: float
    tier: str
    breakdown: ScoreBreakdown
    requirements: MonthlyRequirements
    month: str
    userId: Optional[str] = None


class ActivityLogEntry(BaseModel):
    """Logged user activity, read-only to the engine."""
    activityType: str
    action: str = "log"
    timestamp: datetime
    quality: Optional[float] = None
    duration: Optional[float] = Field(default=None, description="Seconds")
    metadata: Dict[str, Any] = {}

    @field_validator("activityType")
    @classmethod
    def normalize_activity_type(cls, value: str) -> str:
        return value.strip().lower()


# ─────────────────────────────────────────────────────────────────
# Collaborator contracts
# ─────────────────────────────────────────────────────────────────


class StatisticsSummary(BaseModel):
    """Focus statistics for a date range. focusTime is in minutes."""
    focusTime: float = Field(default=0, ge=0)
    sessions: int = Field(default=0, ge=0)
    tasksDone: int = Field(default=0, ge=0)


def _iso_date(value: Any) -> Any:
    """Accept date, datetime or ISO string values for YYYY-MM-DD fields."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


class GoalRecord(BaseModel):
    id: Optional[str] = None
    completed: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


class HabitRecord(BaseModel):
    id: str
    name: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> str:
        return str(value)


class HabitCompletionRecord(BaseModel):
    habitId: str
    date: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    completed: bool = False

    @field_validator("habitId", mode="before")
    @classmethod
    def coerce_habit_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return _iso_date(value)


class MoodEntryRecord(BaseModel):
    date: Optional[str] = Field(default=None, description="YYYY-MM-DD")

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return _iso_date(value)


class JournalPeriodStats(BaseModel):
    totalEntries: int = Field(default=0, ge=0)
    gratitudeEntries: int = Field(default=0, ge=0)
    collections: int = Field(default=0, ge=0)


# ─────────────────────────────────────────────────────────────────
# Derived views
# ─────────────────────────────────────────────────────────────────


class TierProgress(BaseModel):
    """Distance from the current score to the next tier."""
    nextTier: int
    progressPercentage: int
    missingRequirements: List[str] = []


class CurrentMonthProgress(BaseModel):
    currentScore: MonthlyScore
    progressToNextTier: TierProgress
    daysRemaining: int


class ScoreHistoryEntry(BaseModel):
    """One month in a score history, oldest first."""
    month: str
    score: float
    tier: str
    breakdown: ScoreBreakdown
    requirements: MonthlyRequirements
    scoreChange: Optional[float] = None


class ActivityTypeCount(BaseModel):
    activityType: str
    count: int


class WeeklyActivity(BaseModel):
    week: int
    startDate: date
    endDate: date
    activities: int
    activeDays: int


class MonthlyAnalytics(BaseModel):
    """Read-only activity analytics for one month."""
    month: str
    userId: Optional[str] = None
    totalActivities: int = 0
    activeDays: int = 0
    activityCounts: Dict[str, int] = {}
    topActivityTypes: List[ActivityTypeCount] = []
    weeklyBreakdown: List[WeeklyActivity] = []
    totalDurationMinutes: float = 0
    averageQualityByType: Dict[str, float] = {}
