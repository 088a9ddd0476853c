"""
Productivity services.
"""

from app.productivity.services.data_sources import ActivityDataSource, MongoActivityDataSource
from app.productivity.services.metric_aggregator import MetricAggregator
from app.productivity.services.score_calculator import ScoreCalculator
from app.productivity.services.score_validator import ScoreValidator, ValidationResult
from app.productivity.services.score_cache import ScoreCache, InMemoryScoreCache, MongoScoreCache
from app.productivity.services.analytics_service import MonthlyAnalyticsService
from app.productivity.services.productivity_service import ProductivityService

__all__ = [
    "ActivityDataSource",
    "MongoActivityDataSource",
    "MetricAggregator",
    "ScoreCalculator",
    "ScoreValidator",
    "ValidationResult",
    "ScoreCache",
    "InMemoryScoreCache",
    "MongoScoreCache",
    "MonthlyAnalyticsService",
    "ProductivityService",
]
