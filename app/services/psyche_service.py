"""
Predicsure AI — Psyche Scoring Engine

Three deterministic classifiers turn onboarding answers into a stored psyche
profile:

  1. ``calculate_psyche_type`` — legacy 16-question quiz.  Every psyche type
     mapped by the chosen option receives one point.
  2. ``calculate_weighted_psyche_type`` — 8 core + 4 adaptive answers that
     carry explicit indicator lists and parameter samples.  Primary
     indicators are weighted above secondary ones and low-confidence results
     fall back to a balanced type.
  3. ``calculate_archetype`` — 12 answers scored on four dimensions, bucketed
     into one of eight display archetypes by threshold rules.

Persistence helpers (``save_psyche_profile``, ``save_onboarding_response``,
``apply_persona``) write to ``psyche_profiles`` / ``onboarding_responses``.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.psyche import OnboardingResponse, PsycheProfile
from app.models.user import User
from app.services.psyche_catalog import (
    ARCHETYPE_PERSONAS,
    ARCHETYPES,
    CATEGORY_INSIGHTS,
    DEFAULT_ARCHETYPE_DB_TYPE,
    DEFAULT_PSYCHE_TYPE,
    GENERIC_INSIGHTS,
    LOW_CONFIDENCE_PSYCHE_TYPE,
    PSYCHE_PARAMETER_NAMES,
    PSYCHE_TYPES,
    QUESTION_MAPPINGS,
    RADAR_TRAITS,
)

logger = structlog.get_logger("predicsure.psyche_service")


class PsycheService:
    """Scores onboarding answers and persists the resulting psyche profile."""

    # ── Constants ─────────────────────────────────────────────────────────

    CORE_PRIMARY_POINTS: int = 3
    ADAPTIVE_PRIMARY_POINTS: int = 2
    SECONDARY_POINTS: int = 1
    CONFIDENCE_THRESHOLD: float = 0.6

    REQUIRED_CORE_RESPONSES: int = 8
    REQUIRED_ADAPTIVE_RESPONSES: int = 4

    # 12 questions x max option score of 3
    ARCHETYPE_NORMALISER: float = 36.0
    HIGH: float = 0.66
    LOW: float = 0.34

    # ══════════════════════════════════════════════════════════════════════
    # 1. Legacy quiz classifier
    # ══════════════════════════════════════════════════════════════════════

    def calculate_psyche_type(self, responses: list[dict]) -> str:
        """Return the psyche type with the most votes across quiz answers.

        Parameters
        ----------
        responses:
            ``[{"question_id": int, "selected_option": "A".."E"}, ...]``.
            Unknown questions or options contribute nothing.

        Returns
        -------
        str
            A key of ``PSYCHE_TYPES``.  Ties resolve to the type listed first
            in the catalog; an all-zero tally yields ``quiet_strategist``.
        """
        scores = {psyche_type: 0 for psyche_type in PSYCHE_TYPES}

        for response in responses:
            mapping = QUESTION_MAPPINGS.get(response.get("question_id"))
            if not mapping:
                continue
            for psyche_type in mapping.get(response.get("selected_option"), []):
                scores[psyche_type] = scores.get(psyche_type, 0) + 1

        return self._strict_argmax(scores, DEFAULT_PSYCHE_TYPE)

    @staticmethod
    def mapped_types_for(question_id: int, selected_option: str) -> list[str]:
        return list(QUESTION_MAPPINGS.get(question_id, {}).get(selected_option, []))

    # ══════════════════════════════════════════════════════════════════════
    # 2. Weighted indicator classifier
    # ══════════════════════════════════════════════════════════════════════

    def calculate_weighted_psyche_type(self, data: dict) -> dict:
        """Score weighted core/adaptive answers.

        Core answers add +3 to their first indicator and +1 to each further
        indicator; adaptive answers add +2 / +1.  Parameters are averaged
        across core answers and rounded to two decimals.

        Parameters
        ----------
        data:
            Dict with ``core_responses`` and ``adaptive_responses`` lists.

        Returns
        -------
        dict
            ``{"psyche_type", "confidence", "parameters", "domain_insights"}``
        """
        scores: dict[str, int] = {}
        parameter_values: dict[str, list[float]] = {
            name: [] for name in PSYCHE_PARAMETER_NAMES
        }
        domain_insights: list[str] = []

        for response in data.get("core_responses", []):
            self._add_indicator_points(
                scores, response.get("indicators") or [], self.CORE_PRIMARY_POINTS
            )
            for param, value in (response.get("parameters") or {}).items():
                if param in parameter_values:
                    parameter_values[param].append(value)

        for response in data.get("adaptive_responses", []):
            self._add_indicator_points(
                scores, response.get("indicators") or [], self.ADAPTIVE_PRIMARY_POINTS
            )
            if response.get("domain_insight"):
                domain_insights.append(response["domain_insight"])

        total_points = sum(scores.values())
        dominant_type = self._strict_argmax(scores, DEFAULT_PSYCHE_TYPE)
        max_score = scores.get(dominant_type, 0)
        confidence = max_score / total_points if total_points > 0 else 0

        type_defaults = PSYCHE_TYPES.get(dominant_type, {}).get("parameters", {})
        averaged: dict[str, float] = {}
        for param, values in parameter_values.items():
            if values:
                averaged[param] = round(sum(values) / len(values), 2)
            else:
                averaged[param] = type_defaults.get(param) or 0.5

        if confidence < self.CONFIDENCE_THRESHOLD:
            dominant_type = LOW_CONFIDENCE_PSYCHE_TYPE

        return {
            "psyche_type": dominant_type,
            "confidence": confidence,
            "parameters": averaged,
            "domain_insights": domain_insights,
        }

    def validate_weighted_onboarding(self, data: Any) -> bool:
        """Structural check for a weighted onboarding submission."""
        if not isinstance(data, dict):
            return False
        for key in ("nickname", "primary_interest"):
            if not data.get(key) or not isinstance(data[key], str):
                return False

        core = data.get("core_responses")
        adaptive = data.get("adaptive_responses")
        if not isinstance(core, list) or len(core) != self.REQUIRED_CORE_RESPONSES:
            return False
        if not isinstance(adaptive, list) or len(adaptive) != self.REQUIRED_ADAPTIVE_RESPONSES:
            return False

        for response in core:
            if not self._has_answer_shape(response):
                return False
            if not isinstance(response.get("parameters"), dict):
                return False

        for response in adaptive:
            if not self._has_answer_shape(response):
                return False
            if not response.get("domain_insight"):
                return False

        return True

    @staticmethod
    def format_weighted_onboarding_for_storage(data: dict) -> dict:
        core = data.get("core_responses", [])
        adaptive = data.get("adaptive_responses", [])
        return {
            "nickname": data.get("nickname"),
            "primary_interest": data.get("primary_interest"),
            "core_responses": json.dumps(core),
            "adaptive_responses": json.dumps(adaptive),
            "total_questions": len(core) + len(adaptive),
        }

    # ══════════════════════════════════════════════════════════════════════
    # 3. Archetype classifier
    # ══════════════════════════════════════════════════════════════════════

    def calculate_archetype(self, responses: list[dict], category: str = "") -> dict:
        """Bucket dimension scores into one of eight archetypes.

        Each dimension is summed across responses and divided by 36 (the
        maximum for twelve answers), regardless of how many answers arrived.

        Parameters
        ----------
        responses:
            ``[{"scores": {"risk", "emotional", "time_horizon",
            "decision_style"}}, ...]`` with each score in 1..3.
        category:
            The user's primary interest; carried for insight lookup.

        Returns
        -------
        dict
            ``{"archetype": {name, db_type, description, traits, strengths,
            challenges}, "scores": {risk, emotional, time_horizon,
            decision_style}}``
        """
        totals = {"risk": 0.0, "emotional": 0.0, "time_horizon": 0.0, "decision_style": 0.0}
        for response in responses:
            response_scores = response.get("scores") or {}
            for dimension in totals:
                totals[dimension] += response_scores.get(dimension, 0)

        normalised = {k: v / self.ARCHETYPE_NORMALISER for k, v in totals.items()}
        name = self._archetype_name(normalised)
        archetype = {"name": name, **ARCHETYPES[name]}
        archetype.setdefault("db_type", DEFAULT_ARCHETYPE_DB_TYPE)

        logger.debug("archetype_calculated", archetype=name, category=category)
        return {"archetype": archetype, "scores": normalised}

    def _archetype_name(self, s: dict[str, float]) -> str:
        hi = lambda v: v > self.HIGH  # noqa: E731
        lo = lambda v: v < self.LOW  # noqa: E731
        risk, emo, time_h, dec = s["risk"], s["emotional"], s["time_horizon"], s["decision_style"]

        if hi(risk) and hi(emo) and lo(time_h) and hi(dec):
            return "The Maverick"
        if lo(risk) and lo(emo) and hi(time_h) and lo(dec):
            return "The Strategist"
        if hi(risk) and lo(emo) and hi(time_h) and lo(dec):
            return "The Visionary"
        if lo(risk) and hi(emo) and hi(time_h) and hi(dec):
            return "The Guardian"
        if hi(risk) and hi(emo) and hi(time_h):
            return "The Pioneer"
        if lo(risk) and lo(emo) and lo(time_h) and lo(dec):
            return "The Pragmatist"
        if hi(emo) and lo(time_h) and hi(dec):
            return "The Catalyst"
        return "The Adapter"

    @staticmethod
    def generate_category_insights(archetype_name: str, category: str) -> list[str]:
        return list(CATEGORY_INSIGHTS.get(category, {}).get(archetype_name, GENERIC_INSIGHTS))

    @staticmethod
    def radar_traits(parameters: Optional[dict]) -> dict[str, float]:
        """Five-axis view of a parameter dict, 0.5 where a trait is missing."""
        parameters = parameters or {}
        return {trait: parameters.get(trait, 0.5) for trait in RADAR_TRAITS}

    # ══════════════════════════════════════════════════════════════════════
    # 4. Persistence
    # ══════════════════════════════════════════════════════════════════════

    async def get_profile(self, db: AsyncSession, user: User) -> Optional[PsycheProfile]:
        result = await db.execute(
            select(PsycheProfile).where(PsycheProfile.user_id == user.id)
        )
        return result.scalar_one_or_none()

    async def save_psyche_profile(
        self,
        db: AsyncSession,
        user: User,
        psyche_type: str,
    ) -> dict:
        """Upsert the user's profile from catalog data for *psyche_type*.

        Marks onboarding complete and returns the catalog entry.

        Raises
        ------
        ValueError
            If *psyche_type* is not a known psyche type.
        """
        psyche_data = PSYCHE_TYPES.get(psyche_type)
        if psyche_data is None:
            raise ValueError("Invalid psyche type")

        await self._upsert_profile(
            db,
            user,
            psyche_type=psyche_type,
            display_name=psyche_data["display_name"],
            description=psyche_data["description"],
            core_traits=list(psyche_data["core_traits"]),
            decision_making_style=psyche_data["decision_making_style"],
            growth_edge=psyche_data["growth_edge"],
            psyche_parameters=dict(psyche_data["parameters"]),
        )
        user.onboarding_completed = True
        await db.flush()

        logger.info("psyche_profile_saved", user_id=str(user.id), psyche_type=psyche_type)
        return psyche_data

    async def apply_persona(self, db: AsyncSession, user: User, persona_key: str) -> dict:
        """Overwrite the user's profile with an archetype persona."""
        persona = ARCHETYPE_PERSONAS.get(persona_key)
        if persona is None:
            raise ValueError(f"Unknown persona: {persona_key}")

        await self._upsert_profile(
            db,
            user,
            psyche_type=persona["psyche_type"],
            display_name=persona["display_name"],
            description=persona["description"],
            core_traits=list(persona["core_traits"]),
            decision_making_style=persona["decision_making_style"],
            growth_edge=persona["growth_edge"],
            psyche_parameters=dict(persona["parameters"]),
        )
        await db.flush()
        return persona

    async def update_parameters(
        self, db: AsyncSession, user: User, parameters: dict[str, float]
    ) -> None:
        profile = await self.get_profile(db, user)
        if profile is None:
            raise LookupError("Profile not found")
        profile.psyche_parameters = dict(parameters)
        await db.flush()

    async def delete_profile(self, db: AsyncSession, user: User) -> None:
        await db.execute(delete(PsycheProfile).where(PsycheProfile.user_id == user.id))

    async def save_onboarding_response(
        self,
        db: AsyncSession,
        user: User,
        question_id: int,
        question_text: str,
        selected_option: str,
        answer_text: str,
        mapped_types: list[str],
    ) -> OnboardingResponse:
        row = OnboardingResponse(
            user_id=user.id,
            question_id=question_id,
            question_text=question_text,
            selected_option=selected_option,
            answer_text=answer_text,
            mapped_psyche_types=list(mapped_types),
        )
        db.add(row)
        await db.flush()
        return row

    # ── Internals ─────────────────────────────────────────────────────────

    async def _upsert_profile(self, db: AsyncSession, user: User, **fields: Any) -> PsycheProfile:
        profile = await self.get_profile(db, user)
        if profile is None:
            profile = PsycheProfile(user_id=user.id, **fields)
            db.add(profile)
        else:
            for key, value in fields.items():
                setattr(profile, key, value)
        return profile

    def _add_indicator_points(
        self, scores: dict[str, int], indicators: list[str], primary_points: int
    ) -> None:
        if not indicators:
            return
        primary, *secondary = indicators
        scores[primary] = scores.get(primary, 0) + primary_points
        for indicator in secondary:
            scores[indicator] = scores.get(indicator, 0) + self.SECONDARY_POINTS

    @staticmethod
    def _strict_argmax(scores: dict[str, int], default: str) -> str:
        max_score = 0
        winner = default
        for key, score in scores.items():
            if score > max_score:
                max_score = score
                winner = key
        return winner

    @staticmethod
    def _has_answer_shape(response: Any) -> bool:
        if not isinstance(response, dict):
            return False
        if not response.get("question_id") or not response.get("selected_option"):
            return False
        return isinstance(response.get("indicators"), list)
