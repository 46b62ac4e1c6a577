"""
Predicsure AI — Admin API

Every route requires ``role == "admin"``.  Test-user management, self-service
switches for exercising tier gates and onboarding, and the business
dashboard.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.admin import (
    AdminActionResult,
    DeleteResult,
    ImpersonateRequest,
    SeedResult,
    TestUserResponse,
    TierChangeRequest,
)
from app.services.admin_service import AdminService
from app.services.analytics_service import AnalyticsService

logger = structlog.get_logger("predicsure.api.admin")

router = APIRouter()

# ── Service singletons ────────────────────────────────────────────────────────

_admin_service: AdminService | None = None
_analytics_service: AnalyticsService | None = None


def _get_admin_service() -> AdminService:
    global _admin_service
    if _admin_service is None:
        _admin_service = AdminService()
    return _admin_service


def _get_analytics_service() -> AnalyticsService:
    global _analytics_service
    if _analytics_service is None:
        _analytics_service = AnalyticsService()
    return _analytics_service


# ──────────────────────────────────────────────────────────────────────────────
# Test users
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/test-users", response_model=SeedResult, summary="Seed one test user per archetype")
async def seed_test_users(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> dict:
    logger.info("seed_test_users_start", admin_id=str(admin.id))
    return await _get_admin_service().seed_test_users(db)


@router.get("/test-users", response_model=list[TestUserResponse], summary="List test users")
async def list_test_users(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    return await _get_admin_service().list_test_users(db)


@router.delete("/test-users", response_model=DeleteResult, summary="Delete all test users")
async def delete_test_users(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> dict:
    logger.info("delete_test_users_start", admin_id=str(admin.id))
    return await _get_admin_service().delete_test_users(db)


# ──────────────────────────────────────────────────────────────────────────────
# Self-service switches
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/impersonate", summary="Adopt an archetype persona")
async def impersonate(
    payload: ImpersonateRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await _get_admin_service().impersonate(db, admin, payload.personality_type)


@router.post("/tier", summary="Change the admin's own subscription tier")
async def change_tier(
    payload: TierChangeRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await _get_admin_service().change_tier(db, admin, payload.tier)


@router.post("/reset-predictions", response_model=AdminActionResult, summary="Zero the quota counters")
async def reset_prediction_count(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await _get_admin_service().reset_prediction_count(db, admin)


@router.post("/reset-onboarding", response_model=AdminActionResult, summary="Restart onboarding")
async def reset_onboarding(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await _get_admin_service().reset_onboarding(db, admin)


# ──────────────────────────────────────────────────────────────────────────────
# GET /dashboard — Business analytics
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/dashboard", summary="Admin dashboard analytics")
async def get_dashboard(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await _get_analytics_service().admin_dashboard(db)
