"""
FastAPI dependencies for the productivity system.

The service is built once at application startup and stored on
app.state; request handlers receive it through get_productivity_service.
"""

import logging

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.config import Settings
from app.productivity.services.data_sources import MongoActivityDataSource
from app.productivity.services.productivity_service import ProductivityService
from app.productivity.services.score_cache import (
    ScoreCache,
    InMemoryScoreCache,
    MongoScoreCache,
)

logger = logging.getLogger(__name__)


def create_score_cache(settings: Settings) -> ScoreCache:
    """
    Build the cache backend selected in settings.

    Raises:
        ValueError: Unknown PRODUCTIVITY_CACHE_BACKEND
    """
    backend = settings.PRODUCTIVITY_CACHE_BACKEND.lower()

    if backend == "memory":
        return InMemoryScoreCache(ttl_seconds=settings.PRODUCTIVITY_CACHE_TTL_SECONDS)

    if backend == "mongo":
        return MongoScoreCache()

    raise ValueError(f"Unknown productivity cache backend: {settings.PRODUCTIVITY_CACHE_BACKEND}")


def create_productivity_service(
    db: AsyncIOMotorDatabase,
    settings: Settings
) -> ProductivityService:
    """
    Build the productivity service with its data source and cache.

    Called once at application startup.

    Args:
        db: MongoDB database connection
        settings: Application settings
    """
    cache = create_score_cache(settings)
    service = ProductivityService(
        data_source=MongoActivityDataSource(db),
        cache=cache,
        history_months=settings.PRODUCTIVITY_HISTORY_MONTHS,
    )
    logger.info(
        f"Productivity service initialized with '{settings.PRODUCTIVITY_CACHE_BACKEND}' cache"
    )
    return service


def get_productivity_service(request: Request) -> ProductivityService:
    """Get the productivity service instance for this application."""
    service = getattr(request.app.state, "productivity_service", None)
    if service is None:
        raise RuntimeError("Productivity service not initialized.")
    return service
