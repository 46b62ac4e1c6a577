"""
Predicsure AI — Progressive Deepening

After onboarding a user has one interest category.  As they keep asking for
predictions they are periodically invited to add further categories; the
answers they give for the new categories feed cross-domain insights on their
psyche profile.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.services.psyche_service import PsycheService

logger = structlog.get_logger("predicsure.deepening_service")

ALL_CATEGORIES: tuple[str, ...] = ("career", "love", "finance", "health", "sports", "stocks")

CATEGORY_LABELS: dict[str, str] = {
    "career": "Career",
    "love": "Relationships",
    "finance": "Financial",
    "health": "Health",
    "sports": "Sports",
    "stocks": "Investment",
}

INSIGHT_TEMPLATES: dict[str, str] = {
    "ambitious_builder": "You bring growth-oriented thinking to {text} decisions",
    "quiet_strategist": "You apply analytical precision across {text}",
    "intuitive_empath": "You trust emotional wisdom in both {text} contexts",
    "momentum_chaser": "You seek quick wins and immediate feedback in {text}",
    "stabilizer": "You prioritize security and consistency across {text}",
    "escapist_romantic": "You seek meaning and depth in {text} choices",
    "emotional_fan": "You make emotionally-driven decisions in {text}",
    "pattern_analyst": "You identify patterns and trends across {text}",
    "revenge_bettor": "You respond emotionally to setbacks in {text}",
    "long_term_builder": "You take a patient, long-term view of {text}",
    "fear_based_seller": "You tend toward caution and risk-aversion in {text}",
    "risk_addict": "You embrace high-risk opportunities in {text}",
}

DEEPENING_QUESTION_OFFSET = 2000

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


class DeepeningService:
    """Decides when to prompt for more categories and records the answers."""

    MAX_DISMISSALS: int = 3
    PROMPT_COOLDOWN: timedelta = timedelta(hours=24)
    FIRST_PROMPT_AFTER: int = 3
    PREDICTIONS_PER_INTEREST: int = 5

    def __init__(self, psyche_service: Optional[PsycheService] = None) -> None:
        self.psyche_service = psyche_service or PsycheService()

    # ══════════════════════════════════════════════════════════════════════
    # Prompt gating
    # ══════════════════════════════════════════════════════════════════════

    def should_show_prompt(self, user: User, now: Optional[datetime] = None) -> bool:
        """Return True when the user is due an "add a category" prompt.

        Never shown once every category is covered, after three dismissals,
        or within 24 hours of the last prompt.  The first prompt needs three
        predictions; later ones need five predictions per current interest.
        """
        now = now or datetime.now(timezone.utc)
        interests = user.interests or []

        if len(interests) >= len(ALL_CATEGORIES):
            return False
        if (user.deepening_dismissed_count or 0) >= self.MAX_DISMISSALS:
            return False
        prompted_at = user.deepening_prompted_at
        if prompted_at is not None:
            if prompted_at.tzinfo is None:
                prompted_at = prompted_at.replace(tzinfo=timezone.utc)
            if now - prompted_at < self.PROMPT_COOLDOWN:
                return False

        prediction_count = user.prediction_count or 0
        if len(interests) == 1 and prediction_count >= self.FIRST_PROMPT_AFTER:
            return True
        if len(interests) > 1 and prediction_count >= len(interests) * self.PREDICTIONS_PER_INTEREST:
            return True
        return False

    @staticmethod
    def available_categories(user: User) -> list[str]:
        interests = user.interests or []
        return [c for c in ALL_CATEGORIES if c not in interests]

    # ══════════════════════════════════════════════════════════════════════
    # Cross-domain insights
    # ══════════════════════════════════════════════════════════════════════

    def calculate_cross_domain_insights(
        self,
        responses: list[dict],
        existing_insights: Optional[list[str]] = None,
    ) -> list[str]:
        """Derive insights from indicators that recur across categories.

        Parameters
        ----------
        responses:
            Deepening answers, each with ``category`` and ``indicators``.
        existing_insights:
            Previously stored insights; kept at the front of the result.

        Returns
        -------
        list[str]
            Existing insights followed by one new line per indicator seen in
            two or more categories, without duplicates.
        """
        insights = list(existing_insights or [])

        categories_involved = {r.get("category") for r in responses}
        if len(categories_involved) < 2:
            return insights

        indicator_categories: dict[str, list[str]] = {}
        for response in responses:
            for indicator in response.get("indicators") or []:
                seen = indicator_categories.setdefault(indicator, [])
                if response.get("category") not in seen:
                    seen.append(response.get("category"))

        for indicator, categories in indicator_categories.items():
            if len(categories) >= 2:
                insight = self._cross_domain_insight(indicator, categories)
                if insight not in insights:
                    insights.append(insight)

        return insights

    @staticmethod
    def _cross_domain_insight(indicator: str, categories: list[str]) -> str:
        labels = [CATEGORY_LABELS.get(c, c) for c in categories]
        if len(labels) == 2:
            text = f"{labels[0]} and {labels[1]}"
        else:
            text = f"{', '.join(labels[:-1])}, and {labels[-1]}"

        template = INSIGHT_TEMPLATES.get(indicator)
        if template is None:
            return f"Consistent {indicator} pattern across {text}"
        return template.format(text=text)

    @staticmethod
    def deepening_question_id(question_id: str) -> int:
        """Map ``"adaptive_12_x"`` style ids into the deepening id range."""
        parts = question_id.split("_")
        number = 0
        if len(parts) > 1:
            match = _LEADING_DIGITS.match(parts[1])
            if match:
                number = int(match.group(1))
        return DEEPENING_QUESTION_OFFSET + number

    # ══════════════════════════════════════════════════════════════════════
    # Mutations
    # ══════════════════════════════════════════════════════════════════════

    async def add_interest_categories(
        self,
        db: AsyncSession,
        user: User,
        new_categories: list[str],
        responses: list[dict],
    ) -> dict:
        """Append categories, store their answers and refresh the profile.

        Raises
        ------
        LookupError
            If the user has no psyche profile yet.
        ValueError
            If a category is not one of the known interest categories.
        """
        log = logger.bind(user_id=str(user.id), new_categories=new_categories)

        profile = await self.psyche_service.get_profile(db, user)
        if profile is None:
            raise LookupError("Profile not found")

        updated_interests = list(user.interests or [])
        added: list[str] = []
        for category in new_categories:
            if category not in ALL_CATEGORIES:
                raise ValueError(f"Unknown category: {category}")
            if category not in updated_interests:
                updated_interests.append(category)
                added.append(category)
        user.interests = updated_interests

        for response in responses:
            await self.psyche_service.save_onboarding_response(
                db,
                user,
                question_id=self.deepening_question_id(response["question_id"]),
                question_text=response.get("question_text", ""),
                selected_option=response.get("selected_option", ""),
                answer_text=response.get("answer_text", ""),
                mapped_types=response.get("indicators") or [],
            )

        cross_domain = self.calculate_cross_domain_insights(
            responses, profile.cross_domain_insights or []
        )
        completeness = round(len(updated_interests) / len(ALL_CATEGORIES) * 100)

        profile.secondary_interests = added
        profile.cross_domain_insights = cross_domain
        profile.profile_completeness = completeness
        await db.flush()

        log.info("interest_categories_added", completeness=completeness)
        return {
            "success": True,
            "updated_interests": updated_interests,
            "cross_domain_insights": cross_domain,
            "profile_completeness": completeness,
        }

    async def dismiss_prompt(
        self, db: AsyncSession, user: User, now: Optional[datetime] = None
    ) -> None:
        user.deepening_prompted_at = now or datetime.now(timezone.utc)
        user.deepening_dismissed_count = (user.deepening_dismissed_count or 0) + 1
        await db.flush()

    async def increment_prediction_count(self, db: AsyncSession, user: User) -> None:
        user.prediction_count = (user.prediction_count or 0) + 1
        await db.flush()
