"""
Predicsure AI — Progressive Deepening API
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.psyche import DeepeningCategoriesAdd, DeepeningCategoriesResult, DeepeningStatus
from app.schemas.user import SuccessResponse
from app.services.deepening_service import DeepeningService

logger = structlog.get_logger("predicsure.api.deepening")

router = APIRouter()

# ── Service singletons ────────────────────────────────────────────────────────

_deepening_service: DeepeningService | None = None


def _get_deepening_service() -> DeepeningService:
    global _deepening_service
    if _deepening_service is None:
        _deepening_service = DeepeningService()
    return _deepening_service


# ──────────────────────────────────────────────────────────────────────────────
# GET /status — Should the "add a category" prompt be shown?
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/status",
    response_model=DeepeningStatus,
    summary="Check whether to prompt for more interest categories",
)
async def get_status(user: User = Depends(get_current_user)) -> DeepeningStatus:
    svc = _get_deepening_service()
    return DeepeningStatus(
        should_show=svc.should_show_prompt(user),
        available_categories=svc.available_categories(user),
    )


# ──────────────────────────────────────────────────────────────────────────────
# POST /categories — Add categories with their answers
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/categories",
    response_model=DeepeningCategoriesResult,
    summary="Add interest categories",
)
async def add_categories(
    payload: DeepeningCategoriesAdd,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    try:
        return await _get_deepening_service().add_interest_categories(
            db,
            user,
            payload.new_categories,
            [r.model_dump() for r in payload.responses],
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


# ──────────────────────────────────────────────────────────────────────────────
# POST /dismiss — Snooze the prompt
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/dismiss",
    response_model=SuccessResponse,
    summary="Dismiss the deepening prompt",
)
async def dismiss(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    await _get_deepening_service().dismiss_prompt(db, user)
    logger.info("deepening_prompt_dismissed", user_id=str(user.id), count=user.deepening_dismissed_count)
    return SuccessResponse()
