"""
FastAPI router for productivity scoring endpoints.

Provides endpoints for monthly scores, metrics, analytics, history and
current-month progress.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from app.productivity.dependencies import get_productivity_service
from app.productivity.services.productivity_service import ProductivityService
from common.utils.responses import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/productivity", tags=["productivity"])

ServiceDep = Annotated[ProductivityService, Depends(get_productivity_service)]


@router.get("/months/{month_id}/score")
async def get_monthly_score(
    month_id: str,
    service: ServiceDep,
    user_id: Optional[str] = Query(None, alias="userId"),
    force_recalculate: bool = Query(False, alias="forceRecalculate"),
):
    """Get the score for a month."""
    score = await service.calculate_monthly_score(month_id, user_id, force_recalculate)
    return success_response(score.model_dump(mode="json"))


@router.get("/months/{month_id}/metrics")
async def get_monthly_metrics(
    month_id: str,
    service: ServiceDep,
    user_id: Optional[str] = Query(None, alias="userId"),
):
    """Get the aggregated metrics for a month."""
    metrics = await service.gather_monthly_metrics(month_id, user_id)
    return success_response(metrics.model_dump(mode="json"))


@router.get("/months/{month_id}/analytics")
async def get_monthly_analytics(
    month_id: str,
    service: ServiceDep,
    user_id: Optional[str] = Query(None, alias="userId"),
):
    """Get activity analytics for a month."""
    analytics = await service.get_monthly_analytics(month_id, user_id)
    return success_response(analytics.model_dump(mode="json"))


@router.post("/months/{month_id}/refresh")
async def refresh_monthly_data(
    month_id: str,
    service: ServiceDep,
    user_id: Optional[str] = Query(None, alias="userId"),
):
    """Drop cached results for a month and recompute its score."""
    await service.refresh_monthly_data(month_id, user_id)
    score = await service.calculate_monthly_score(month_id, user_id)
    return success_response(score.model_dump(mode="json"), message="Monthly data refreshed")


@router.get("/history")
async def get_score_history(
    service: ServiceDep,
    user_id: Optional[str] = Query(None, alias="userId"),
    months_back: Optional[int] = Query(None, alias="monthsBack"),
):
    """Get monthly scores for recent months, oldest first."""
    history = await service.get_score_history(months_back, user_id)
    return success_response([entry.model_dump(mode="json") for entry in history])


@router.get("/progress")
async def get_current_month_progress(
    service: ServiceDep,
    user_id: Optional[str] = Query(None, alias="userId"),
):
    """Get the current month's score and distance to the next tier."""
    progress = await service.get_current_month_progress(user_id)
    return success_response(progress.model_dump(mode="json"))


@router.delete("/cache")
async def clear_cache(service: ServiceDep):
    """Drop every cached score, metrics and analytics record."""
    await service.clear_cache()
    return success_response(message="Productivity cache cleared")
