"""
Predicsure AI — Psyche API

Three onboarding flows (hybrid archetype, weighted indicators, legacy quiz),
the stored profile, and the core question catalog.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.psyche import CoreQuestion
from app.models.user import User
from app.schemas.psyche import (
    CoreQuestionResponse,
    HybridOnboardingResult,
    HybridOnboardingSubmit,
    LegacyOnboardingResult,
    LegacyOnboardingSubmit,
    PsycheProfileResponse,
    PsycheSummary,
    WeightedOnboardingResult,
)
from app.services.psyche_catalog import CORE_QUESTIONS
from app.services.psyche_service import PsycheService

logger = structlog.get_logger("predicsure.api.psyche")

router = APIRouter()

# ── Service singletons ────────────────────────────────────────────────────────

_psyche_service: PsycheService | None = None


def _get_psyche_service() -> PsycheService:
    global _psyche_service
    if _psyche_service is None:
        _psyche_service = PsycheService()
    return _psyche_service


# ──────────────────────────────────────────────────────────────────────────────
# POST /hybrid — 12-answer archetype onboarding
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/hybrid",
    response_model=HybridOnboardingResult,
    summary="Submit hybrid (core + adaptive) onboarding answers",
)
async def submit_hybrid_onboarding(
    payload: HybridOnboardingSubmit,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> HybridOnboardingResult:
    """Score the answers into an archetype and store the matching profile.

    The primary interest becomes the user's only interest; further
    categories are added later through progressive deepening.
    """
    log = logger.bind(user_id=str(user.id), primary_interest=payload.primary_interest)
    log.info("hybrid_onboarding_start")

    svc = _get_psyche_service()
    responses = [r.model_dump() for r in payload.core_responses + payload.adaptive_responses]
    result = svc.calculate_archetype(responses, payload.primary_interest)
    archetype = result["archetype"]

    user.nickname = payload.nickname
    user.interests = [payload.primary_interest]
    await svc.save_psyche_profile(db, user, archetype["db_type"])

    insights = svc.generate_category_insights(archetype["name"], payload.primary_interest)

    log.info("hybrid_onboarding_complete", archetype=archetype["name"])
    return HybridOnboardingResult(
        psyche_type=archetype,
        scores=result["scores"],
        insights=insights,
        nickname=payload.nickname,
        primary_interest=payload.primary_interest,
    )


# ──────────────────────────────────────────────────────────────────────────────
# POST /weighted — Indicator-weighted onboarding
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/weighted",
    response_model=WeightedOnboardingResult,
    summary="Submit weighted (8 core + 4 adaptive) onboarding answers",
)
async def submit_weighted_onboarding(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> WeightedOnboardingResult:
    log = logger.bind(user_id=str(user.id))
    svc = _get_psyche_service()

    if not svc.validate_weighted_onboarding(payload):
        log.warning("weighted_onboarding_invalid")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid onboarding data",
        )

    result = svc.calculate_weighted_psyche_type(payload)

    try:
        await svc.save_psyche_profile(db, user, result["psyche_type"])
    except ValueError as exc:
        log.warning("weighted_onboarding_unknown_type", psyche_type=result["psyche_type"])
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )
    user.nickname = payload["nickname"]
    user.interests = [payload["primary_interest"]]
    await svc.update_parameters(db, user, result["parameters"])

    log.info(
        "weighted_onboarding_complete",
        psyche_type=result["psyche_type"],
        confidence=round(result["confidence"], 2),
    )
    return WeightedOnboardingResult(**result)


# ──────────────────────────────────────────────────────────────────────────────
# POST /onboarding — Legacy 16-question quiz
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/onboarding",
    response_model=LegacyOnboardingResult,
    summary="Submit legacy quiz onboarding",
)
async def submit_onboarding(
    payload: LegacyOnboardingSubmit,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> LegacyOnboardingResult:
    log = logger.bind(user_id=str(user.id), responses=len(payload.psyche_responses))
    svc = _get_psyche_service()

    user.nickname = payload.nickname
    user.relationship_status = payload.relationship_status
    user.interests = list(payload.interests)

    for response in payload.psyche_responses:
        await svc.save_onboarding_response(
            db,
            user,
            question_id=response.question_id,
            question_text=response.question_text,
            selected_option=response.selected_option,
            answer_text=response.answer_text,
            mapped_types=svc.mapped_types_for(response.question_id, response.selected_option),
        )

    psyche_type = svc.calculate_psyche_type([r.model_dump() for r in payload.psyche_responses])
    profile = await svc.save_psyche_profile(db, user, psyche_type)

    log.info("legacy_onboarding_complete", psyche_type=psyche_type)
    return LegacyOnboardingResult(
        psyche_type=psyche_type,
        profile=PsycheSummary(
            display_name=profile["display_name"],
            description=profile["description"],
            core_traits=list(profile["core_traits"]),
            decision_making_style=profile["decision_making_style"],
            growth_edge=profile["growth_edge"],
        ),
        nickname=payload.nickname,
        interests=payload.interests,
        relationship_status=payload.relationship_status,
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET /profile — Stored profile or null
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/profile",
    response_model=Optional[PsycheProfileResponse],
    summary="Get the caller's psyche profile",
)
async def get_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Optional[PsycheProfileResponse]:
    svc = _get_psyche_service()
    profile = await svc.get_profile(db, user)
    if profile is None:
        return None

    return PsycheProfileResponse(
        psyche_type=profile.psyche_type,
        display_name=profile.display_name,
        description=profile.description,
        core_traits=list(profile.core_traits or []),
        decision_making_style=profile.decision_making_style,
        growth_edge=profile.growth_edge,
        parameters=dict(profile.psyche_parameters or {}),
        radar_traits=svc.radar_traits(profile.psyche_parameters),
        secondary_interests=profile.secondary_interests,
        cross_domain_insights=profile.cross_domain_insights,
        profile_completeness=profile.profile_completeness or 0,
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET /core-questions — The eight universal questions
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/core-questions",
    response_model=list[CoreQuestionResponse],
    summary="List the core onboarding questions",
)
async def get_core_questions(db: AsyncSession = Depends(get_db)) -> list[CoreQuestionResponse]:
    """Seeded rows when present, otherwise the built-in catalog."""
    result = await db.execute(select(CoreQuestion).order_by(CoreQuestion.position))
    rows = result.scalars().all()
    if rows:
        return [
            CoreQuestionResponse(id=row.question_key, question=row.question_text, options=row.options)
            for row in rows
        ]
    return [CoreQuestionResponse(**question) for question in CORE_QUESTIONS]
