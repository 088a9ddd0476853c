"""
Scoring constants for the monthly productivity engine.

Caps, thresholds, quality weights and tier targets used by the
calculator, the validator and the progress view.
"""

from enum import Enum
from typing import Dict, Any


class ScoreTier(str, Enum):
    """Score bands, lowest first."""
    TIER_1 = "TIER_1"
    TIER_2 = "TIER_2"
    TIER_3 = "TIER_3"


class ActivityType(str, Enum):
    """Activity tags produced by the activity and quality loggers."""
    APP_OPEN = "app_open"
    POMODORO = "pomodoro"
    TASK = "task"
    HABIT = "habit"
    MOOD = "mood"
    JOURNAL = "journal"
    MEDITATION = "meditation"
    BREATHING = "breathing"
    GOAL = "goal"
    STUDY = "study"
    FEATURE_USE = "feature_use"


# ─────────────────────────────────────────────────────────────────
# Component caps
# ─────────────────────────────────────────────────────────────────

MAX_BASE_ENGAGEMENT = 50
MAX_QUALITY_MULTIPLIERS = 25
MAX_CONSISTENCY_BONUSES = 15
MAX_EXCELLENCE_BONUSES = 10
MAX_SCORE = 100

COMPONENT_CAPS: Dict[str, int] = {
    "baseEngagement": MAX_BASE_ENGAGEMENT,
    "qualityMultipliers": MAX_QUALITY_MULTIPLIERS,
    "consistencyBonuses": MAX_CONSISTENCY_BONUSES,
    "excellenceBonuses": MAX_EXCELLENCE_BONUSES,
}

# ─────────────────────────────────────────────────────────────────
# Tier thresholds (lower bound of each tier)
# ─────────────────────────────────────────────────────────────────

TIER_2_THRESHOLD = 50
TIER_3_THRESHOLD = 80

TIER_LOWER_BOUNDS: Dict[ScoreTier, int] = {
    ScoreTier.TIER_1: 0,
    ScoreTier.TIER_2: TIER_2_THRESHOLD,
    ScoreTier.TIER_3: TIER_3_THRESHOLD,
}

# ─────────────────────────────────────────────────────────────────
# Base engagement (thresholds stack)
# ─────────────────────────────────────────────────────────────────

ENGAGEMENT_RATE_POINTS = [
    (0.50, 20),
    (0.70, 15),
    (0.85, 10),
]
POMODORO_PARTICIPATION_POINTS = 5
FOCUS_TIME_MIN_HOURS = 5
FOCUS_TIME_POINTS = 10
JOURNAL_PARTICIPATION_POINTS = 5
MOOD_PARTICIPATION_POINTS = 5

# ─────────────────────────────────────────────────────────────────
# Consistency bonuses (only the highest satisfied tier applies)
# ─────────────────────────────────────────────────────────────────

HABIT_CONSISTENCY_POINTS = [
    (0.80, 8),
    (0.60, 5),
    (0.40, 2),
]

JOURNAL_CONSISTENCY_TARGET = 30
JOURNAL_CONSISTENCY_POINTS = [
    (0.50, 4),
    (0.30, 2),
]

MEDITATION_CONSISTENCY_TARGET = 20
MEDITATION_CONSISTENCY_POINTS = [
    (0.60, 3),
    (0.40, 1),
]

# ─────────────────────────────────────────────────────────────────
# Excellence bonuses
# ─────────────────────────────────────────────────────────────────

EXCELLENCE_MIN_HABITS = 3
EXCELLENCE_HABIT_RATE = 0.80
EXCELLENCE_HABIT_POINTS = 3
EXCELLENCE_FOCUS_HOURS = 15
EXCELLENCE_FOCUS_POINTS = 3
EXCELLENCE_JOURNAL_ENTRIES = 20
EXCELLENCE_JOURNAL_POINTS = 2
EXCELLENCE_MEDITATION_SESSIONS = 16
EXCELLENCE_MEDITATION_POINTS = 2

# ─────────────────────────────────────────────────────────────────
# Quality weights
# ─────────────────────────────────────────────────────────────────

QUALITY_ACTIVITY_WEIGHTS: Dict[str, float] = {
    ActivityType.APP_OPEN.value: 0.15,
    ActivityType.POMODORO.value: 0.20,
    ActivityType.MEDITATION.value: 0.15,
    ActivityType.JOURNAL.value: 0.15,
    ActivityType.STUDY.value: 0.15,
    ActivityType.GOAL.value: 0.10,
    ActivityType.HABIT.value: 0.10,
}
DEFAULT_QUALITY_WEIGHT = 1.0
QUALITY_NEUTRAL_SCORE = 5
QUALITY_SCALE = 2
MIN_QUALITY_SCORE = 1
MAX_QUALITY_SCORE = 10

# ─────────────────────────────────────────────────────────────────
# Targets for "distance to next tier"
# ─────────────────────────────────────────────────────────────────

TIER_TARGETS: Dict[ScoreTier, Dict[str, Any]] = {
    ScoreTier.TIER_1: {
        "appDays": 18,
        "pomodoroHours": 8,
        "meditationSessions": 6,
        "journalEntries": 8,
        "habitCompletionRate": 0.60,
        "goalCompletions": 1,
    },
    ScoreTier.TIER_2: {
        "appDays": 22,
        "pomodoroHours": 12,
        "meditationSessions": 12,
        "journalEntries": 15,
        "habitCompletionRate": 0.75,
        "goalCompletions": 2,
    },
    ScoreTier.TIER_3: {
        "appDays": 26,
        "pomodoroHours": 15,
        "meditationSessions": 16,
        "journalEntries": 20,
        "habitCompletionRate": 0.85,
        "goalCompletions": 3,
    },
}

# ─────────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────────

MIN_MONTH_YEAR = 2020
MAX_MONTH_YEAR = 2030
SCORE_SUM_EPSILON = 0.01
FOCUS_HOURS_EPSILON = 0.1
HABIT_RATE_EPSILON = 0.01
MAX_ACTIVE_DAYS = 31
MAX_EXPECTED_ACTIVITY_LOGS = 100

# ─────────────────────────────────────────────────────────────────
# Cache kinds
# ─────────────────────────────────────────────────────────────────

CACHE_KIND_SCORE = "score"
CACHE_KIND_METRICS = "metrics"
CACHE_KIND_ANALYTICS = "analytics"

MAX_HISTORY_MONTHS = 36
