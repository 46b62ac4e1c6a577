"""
Predicsure AI — Stats API

Per-user analytics and the public platform counters.
"""

from __future__ import annotations

from typing import Literal

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.services.analytics_service import AnalyticsService

logger = structlog.get_logger("predicsure.api.stats")

router = APIRouter()

_analytics_service = AnalyticsService()


@router.get("/me", summary="Analytics for the caller's predictions")
async def get_my_analytics(
    date_range: Literal["7d", "30d", "90d", "all"] = Query("30d"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await _analytics_service.user_analytics(db, user, date_range)


@router.get("/global", summary="Public platform counters")
async def get_global_stats(db: AsyncSession = Depends(get_db)) -> dict:
    return await _analytics_service.global_stats(db)
