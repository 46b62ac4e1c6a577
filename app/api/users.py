"""
Predicsure AI — Users API

Identity sync, the current user, onboarding answers and premium precision
data.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_gateway
from app.config import get_settings
from app.database import get_db
from app.models.user import User
from app.schemas.user import (
    OnboardingComplete,
    OnboardingSave,
    OnboardingSaveResponse,
    PremiumDataSave,
    SuccessResponse,
    UserResponse,
    UserSync,
)
from app.services.prediction_service import PredictionService

logger = structlog.get_logger("predicsure.api.users")

router = APIRouter()

# ── Service singletons ────────────────────────────────────────────────────────

_prediction_service: PredictionService | None = None


def _get_prediction_service() -> PredictionService:
    global _prediction_service
    if _prediction_service is None:
        _prediction_service = PredictionService()
    return _prediction_service


# ──────────────────────────────────────────────────────────────────────────────
# POST /sync — Upsert the signed-in identity
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/sync",
    response_model=UserResponse,
    summary="Create or refresh a user from the identity provider",
    dependencies=[Depends(require_gateway)],
)
async def sync_user(
    payload: UserSync,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Upsert by external identity id and stamp ``last_signed_in``.

    The configured owner identity is always promoted to ``admin``, and the
    returned id is what later calls send as ``X-User-Id``.  Only the identity
    gateway may call this route; it proves itself with ``X-Gateway-Secret``.
    """
    log = logger.bind(external_id=payload.external_id)
    log.info("sync_user_start")

    result = await db.execute(select(User).where(User.external_id == payload.external_id))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(external_id=payload.external_id)
        db.add(user)
        log.info("sync_user_created")

    update_data = payload.model_dump(exclude_unset=True, exclude={"external_id"})
    for field, value in update_data.items():
        setattr(user, field, value)

    owner_id = get_settings().OWNER_EXTERNAL_ID
    if owner_id and payload.external_id == owner_id:
        user.role = "admin"
    elif not user.role:
        user.role = "user"

    user.last_signed_in = datetime.now(timezone.utc)
    await db.flush()
    await db.refresh(user)

    log.info("sync_user_complete", user_id=str(user.id), role=user.role)
    return user


# ──────────────────────────────────────────────────────────────────────────────
# GET /me — Current user
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the authenticated user",
)
async def get_me(user: User = Depends(get_current_user)) -> User:
    return user


# ──────────────────────────────────────────────────────────────────────────────
# POST /onboarding — Save onboarding answers + welcome prediction
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/onboarding",
    response_model=OnboardingSaveResponse,
    summary="Save onboarding answers and create the welcome prediction",
)
async def save_onboarding(
    payload: OnboardingSave,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> OnboardingSaveResponse:
    log = logger.bind(user_id=str(user.id), interests=payload.interests)
    log.info("save_onboarding_start")

    user.nickname = payload.nickname
    user.interests = list(payload.interests)
    user.relationship_status = payload.relationship_status
    for field in ("career_profile", "money_profile", "love_profile", "health_profile"):
        value = getattr(payload, field)
        setattr(user, field, value.model_dump(exclude_none=True) if value is not None else None)
    user.onboarding_completed = True
    await db.flush()

    welcome = await _get_prediction_service().generate_welcome_prediction(db, user)

    log.info("save_onboarding_complete", share_token=welcome["share_token"])
    return OnboardingSaveResponse(success=True, **welcome)


# ──────────────────────────────────────────────────────────────────────────────
# POST /onboarding/complete — Partial update, then mark complete
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/onboarding/complete",
    response_model=SuccessResponse,
    summary="Mark onboarding as complete",
)
async def complete_onboarding(
    payload: OnboardingComplete,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    update_data = payload.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(user, field, value)
    user.onboarding_completed = True
    await db.flush()

    logger.info("onboarding_completed", user_id=str(user.id), updated_fields=list(update_data.keys()))
    return SuccessResponse()


# ──────────────────────────────────────────────────────────────────────────────
# POST /premium-data — Premium precision context
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/premium-data",
    response_model=SuccessResponse,
    summary="Save premium precision data",
)
async def save_premium_data(
    payload: PremiumDataSave,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    for field, value in payload.model_dump().items():
        setattr(user, field, value)
    user.premium_data_completed = True
    await db.flush()

    logger.info("premium_data_saved", user_id=str(user.id), industry=payload.industry)
    return SuccessResponse()
