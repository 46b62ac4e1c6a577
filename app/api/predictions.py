"""
Predicsure AI — Predictions API

Generation (signed-in and anonymous), history, sharing, feedback and
attachment upload.
"""

from __future__ import annotations

import uuid
from typing import Literal, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.prediction import Prediction
from app.models.user import User
from app.schemas.prediction import (
    AnonymousPredictionCreate,
    AnonymousPredictionResponse,
    FileUpload,
    FileUploadResponse,
    PredictionCreate,
    PredictionFeedback,
    PredictionGenerated,
    PredictionHistory,
    PredictionRename,
    PredictionRenamed,
    PredictionResponse,
)
from app.schemas.user import SuccessResponse
from app.services.prediction_service import PredictionGenerationError, PredictionService
from app.services.subscription_service import TierAccessError

logger = structlog.get_logger("predicsure.api.predictions")

router = APIRouter()

# ── Service singletons ────────────────────────────────────────────────────────

_prediction_service: PredictionService | None = None


def _get_prediction_service() -> PredictionService:
    global _prediction_service
    if _prediction_service is None:
        _prediction_service = PredictionService()
    return _prediction_service


def _not_found(exc: LookupError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


# ──────────────────────────────────────────────────────────────────────────────
# POST / — Generate a prediction
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/",
    response_model=PredictionGenerated,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a personalised prediction",
)
async def generate_prediction(
    payload: PredictionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Run the full generation pipeline for the authenticated user.

    Tier gates and quota exhaustion surface as 403 with an upgrade message.
    """
    log = logger.bind(user_id=str(user.id), category=payload.category)
    try:
        return await _get_prediction_service().generate(
            db,
            user,
            payload.user_input,
            category=payload.category,
            attachment_urls=payload.attachment_urls,
            deep_mode=payload.deep_mode,
            trajectory_type=payload.trajectory_type,
            parent_prediction_id=payload.parent_prediction_id,
        )
    except TierAccessError as exc:
        log.info("generate_prediction_forbidden", reason=str(exc))
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    except RuntimeError as exc:
        log.error("generate_prediction_failed", error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate prediction: {exc}",
        )


# ──────────────────────────────────────────────────────────────────────────────
# POST /anonymous — Signed-out teaser prediction
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/anonymous",
    response_model=AnonymousPredictionResponse,
    summary="Generate a short prediction without an account",
)
async def generate_anonymous_prediction(payload: AnonymousPredictionCreate) -> dict:
    onboarding = payload.onboarding_data.model_dump(exclude_none=True) if payload.onboarding_data else None
    try:
        return await _get_prediction_service().generate_anonymous(
            payload.user_input, payload.category, onboarding
        )
    except PredictionGenerationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )


# ──────────────────────────────────────────────────────────────────────────────
# GET /history — Paged, filtered history
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/history",
    response_model=PredictionHistory,
    summary="List the caller's predictions",
)
async def get_history(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    category: Optional[str] = Query(None, description="Category, or 'all'"),
    search: Optional[str] = Query(None, max_length=200),
    feedback: Optional[Literal["like", "dislike", "none", "all"]] = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await _get_prediction_service().get_history(
        db,
        user,
        limit=limit,
        offset=offset,
        category=category,
        search=search,
        feedback=feedback,
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET /feedback-stats — Like / dislike summary
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/feedback-stats",
    summary="Summarise the caller's prediction feedback",
)
async def get_feedback_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await _get_prediction_service().feedback_stats(db, user)


# ──────────────────────────────────────────────────────────────────────────────
# GET /shared/{share_token} — Public shared prediction
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/shared/{share_token}",
    response_model=PredictionResponse,
    summary="Get a shared prediction by token",
)
async def get_shared_prediction(
    share_token: str,
    db: AsyncSession = Depends(get_db),
) -> Prediction:
    try:
        return await _get_prediction_service().get_shared(db, share_token)
    except LookupError as exc:
        raise _not_found(exc)


# ──────────────────────────────────────────────────────────────────────────────
# DELETE /{prediction_id}
# ──────────────────────────────────────────────────────────────────────────────

@router.delete(
    "/{prediction_id}",
    response_model=SuccessResponse,
    summary="Delete one of the caller's predictions",
)
async def delete_prediction(
    prediction_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    try:
        await _get_prediction_service().delete(db, user, prediction_id)
    except LookupError as exc:
        raise _not_found(exc)
    return SuccessResponse()


# ──────────────────────────────────────────────────────────────────────────────
# PATCH /{prediction_id}/title
# ──────────────────────────────────────────────────────────────────────────────

@router.patch(
    "/{prediction_id}/title",
    response_model=PredictionRenamed,
    summary="Rename a prediction",
)
async def rename_prediction(
    prediction_id: uuid.UUID,
    payload: PredictionRename,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PredictionRenamed:
    try:
        await _get_prediction_service().rename(db, user, prediction_id, payload.new_title)
    except LookupError as exc:
        raise _not_found(exc)
    return PredictionRenamed(new_title=payload.new_title)


# ──────────────────────────────────────────────────────────────────────────────
# POST /{prediction_id}/feedback
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/{prediction_id}/feedback",
    response_model=SuccessResponse,
    summary="Like or dislike a prediction",
)
async def submit_feedback(
    prediction_id: uuid.UUID,
    payload: PredictionFeedback,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    try:
        await _get_prediction_service().submit_feedback(db, user, prediction_id, payload.feedback)
    except LookupError as exc:
        raise _not_found(exc)
    return SuccessResponse()


# ──────────────────────────────────────────────────────────────────────────────
# POST /upload — Base64 attachment upload
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/upload",
    response_model=FileUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an attachment for a prediction",
)
async def upload_file(
    payload: FileUpload,
    user: User = Depends(get_current_user),
) -> dict:
    try:
        return await _get_prediction_service().upload_file(
            user, payload.file_name, payload.file_data, payload.mime_type
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except RuntimeError as exc:
        logger.error("upload_file_failed", user_id=str(user.id), error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="File storage unavailable",
        )
