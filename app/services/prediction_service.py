"""
Predicsure AI — PredictionService: question in, personalised forecast out.

Generation pipeline for an authenticated user:

1. Daily reset + tier gating (``SubscriptionService``)
2. Base prompt chosen by trajectory, then deep mode
3. Personalisation blocks appended in order: profile, premium precision,
   personality, accuracy, live sports/stocks data, prediction history
4. Gemini completion (``LLMService``); the ``Confidence: NN%`` line is
   parsed and stripped from the stored text
5. Persist, bump quota counters, first-prediction welcome email

The service also owns history browsing, sharing, feedback, attachments and
the onboarding welcome prediction.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import re
import secrets
import uuid
from typing import Optional

import structlog
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.prediction import Prediction
from app.models.user import User
from app.services import prompts
from app.services.accuracy_service import calculate_accuracy, format_accuracy_for_prompt
from app.services.deepening_service import DeepeningService
from app.services.email_service import EmailService
from app.services.llm_service import LLMService
from app.services.market_data_service import SportsDataService, StocksDataService
from app.services.psyche_service import PsycheService
from app.services.subscription_service import SubscriptionService
from app.utils import storage

logger = structlog.get_logger("predicsure.prediction_service")

CATEGORIES: tuple[str, ...] = ("career", "love", "finance", "health", "sports", "stocks", "general")
FEEDBACK_VALUES: tuple[str, ...] = ("like", "dislike")

_CONFIDENCE = re.compile(r"Confidence:\s*(\d+)%", re.IGNORECASE)
_CONFIDENCE_LINE = re.compile(r"\n?Confidence:\s*\d+%", re.IGNORECASE)

HISTORY_CONTEXT_SIZE = 5


class PredictionGenerationError(Exception):
    """The LLM could not produce a prediction."""


def parse_confidence(text: str) -> tuple[Optional[int], str]:
    """Return ``(score, text_without_confidence_line)``.

    Text is returned unchanged when no score is present.
    """
    match = _CONFIDENCE.search(text)
    if not match:
        return None, text
    return int(match.group(1)), _CONFIDENCE_LINE.sub("", text, count=1).strip()


def new_share_token() -> str:
    return secrets.token_urlsafe(12)


class PredictionService:
    """Generates, stores and serves predictions."""

    def __init__(
        self,
        llm: Optional[LLMService] = None,
        subscriptions: Optional[SubscriptionService] = None,
        psyche: Optional[PsycheService] = None,
        deepening: Optional[DeepeningService] = None,
        email: Optional[EmailService] = None,
        sports: Optional[SportsDataService] = None,
        stocks: Optional[StocksDataService] = None,
    ) -> None:
        self._llm = llm
        self.subscriptions = subscriptions or SubscriptionService()
        self.psyche = psyche or PsycheService()
        self.deepening = deepening or DeepeningService(self.psyche)
        self._email = email
        self._sports = sports
        self._stocks = stocks

    # Network-backed collaborators are built on first use so that
    # read-only endpoints never configure the Gemini SDK.

    @property
    def llm(self) -> LLMService:
        if self._llm is None:
            self._llm = LLMService()
        return self._llm

    @property
    def email(self) -> EmailService:
        if self._email is None:
            self._email = EmailService()
        return self._email

    @property
    def sports(self) -> SportsDataService:
        if self._sports is None:
            self._sports = SportsDataService()
        return self._sports

    @property
    def stocks(self) -> StocksDataService:
        if self._stocks is None:
            self._stocks = StocksDataService()
        return self._stocks

    # ══════════════════════════════════════════════════════════════════════
    # Generation
    # ══════════════════════════════════════════════════════════════════════

    async def generate(
        self,
        db: AsyncSession,
        user: User,
        user_input: str,
        category: Optional[str] = None,
        attachment_urls: Optional[list[str]] = None,
        deep_mode: bool = False,
        trajectory_type: str = "instant",
        parent_prediction_id: Optional[uuid.UUID] = None,
    ) -> dict:
        """Generate and store one prediction for *user*.

        Parameters
        ----------
        db:
            Request-scoped session; the caller commits.
        user:
            The requesting user.
        user_input:
            The question, 1 to 1000 characters.
        category:
            One of :data:`CATEGORIES`, or ``None`` for an uncategorised ask.
        attachment_urls:
            Previously uploaded files to reference in the user turn.
        deep_mode:
            Request the long-form analysis layout (Pro and Premium).
        trajectory_type:
            ``instant``, ``30day``, ``90day`` or ``yearly``.
        parent_prediction_id:
            Set when this is a follow-up in an existing thread.

        Returns
        -------
        dict
            ``prediction``, ``prediction_id``, ``share_token``,
            ``remaining_today``, ``confidence_score``, ``deep_mode``,
            ``is_follow_up``.

        Raises
        ------
        TierAccessError
            When the tier may not use the requested feature or the quota
            is spent.
        RuntimeError
            When every model in the LLM chain fails.
        """
        log = logger.bind(user_id=str(user.id), category=category, trajectory=trajectory_type)
        log.info("generate_prediction_start", deep_mode=deep_mode)

        subscription = await self.subscriptions.check_and_reset(db, user)
        self.subscriptions.enforce_generation_access(
            subscription, deep_mode=deep_mode, trajectory_type=trajectory_type
        )
        first_prediction = (subscription.total_used or 0) == 0
        remaining_today = self.subscriptions.remaining_today(subscription)

        system_prompt = await self.build_system_prompt(
            db, user, user_input, category, deep_mode, trajectory_type
        )

        raw = await self.llm.complete(
            system_prompt,
            prompts.user_prompt(user_input, category),
            attachment_urls,
        )
        confidence, result_text = parse_confidence(raw)

        prediction = Prediction(
            user_id=user.id,
            user_input=user_input,
            prediction_result=result_text,
            category=category or "general",
            attachment_urls=attachment_urls or None,
            share_token=new_share_token(),
            confidence_score=confidence,
            prediction_mode="deep" if deep_mode else "standard",
            trajectory_type=trajectory_type or "instant",
            parent_prediction_id=parent_prediction_id,
        )
        db.add(prediction)
        await db.flush()

        await self.subscriptions.increment_usage(db, user)
        await self.deepening.increment_prediction_count(db, user)

        if first_prediction and user.email:
            sent = await self.email.send_welcome_email(user.email, user.name or "there")
            log.info("welcome_email_dispatched", sent=sent)

        log.info("generate_prediction_complete", prediction_id=str(prediction.id), confidence=confidence)
        return {
            "prediction": result_text,
            "prediction_id": prediction.id,
            "share_token": prediction.share_token,
            "remaining_today": remaining_today,
            "confidence_score": confidence,
            "deep_mode": deep_mode,
            "is_follow_up": parent_prediction_id is not None,
        }

    async def build_system_prompt(
        self,
        db: AsyncSession,
        user: User,
        user_input: str,
        category: Optional[str],
        deep_mode: bool,
        trajectory_type: str,
    ) -> str:
        psyche_profile = await self.psyche.get_profile(db, user)
        accuracy = calculate_accuracy(user, psyche_profile, user_input, category or "general")

        system_prompt = prompts.base_prompt(trajectory_type, deep_mode)
        system_prompt += prompts.profile_block(user, category)
        system_prompt += prompts.premium_block(user)
        system_prompt += prompts.psyche_block(psyche_profile)
        system_prompt += format_accuracy_for_prompt(accuracy)
        system_prompt += await self.live_data_block(user_input, category)

        history = await self.recent_history(db, user, HISTORY_CONTEXT_SIZE)
        if history:
            stats = await self.feedback_stats(db, user)
            system_prompt += prompts.history_block(history, stats)
        return system_prompt

    async def live_data_block(self, user_input: str, category: Optional[str]) -> str:
        if category == "sports":
            context = await self.sports.get_context(user_input)
            return self.sports.format_context(context)
        if category == "stocks":
            context = await self.stocks.get_context(user_input)
            return self.stocks.format_context(context)
        return ""

    async def generate_anonymous(
        self,
        user_input: str,
        category: Optional[str] = None,
        onboarding: Optional[dict] = None,
    ) -> dict:
        """Short prediction for a signed-out visitor; nothing is stored."""
        log = logger.bind(category=category, has_onboarding=bool(onboarding))
        log.info("generate_anonymous_start")
        try:
            text = await self.llm.complete(
                prompts.anonymous_prompt(onboarding),
                prompts.user_prompt(user_input, category),
            )
        except Exception as exc:
            log.error("generate_anonymous_failed", error=str(exc))
            raise PredictionGenerationError(f"Failed to generate prediction: {exc}") from exc

        log.info("generate_anonymous_complete")
        return {"prediction": text, "category": category or "general"}

    async def generate_welcome_prediction(self, db: AsyncSession, user: User) -> dict:
        """Warm 30-day forecast created when onboarding is saved.

        An LLM failure stores a fixed greeting instead of failing onboarding.
        """
        interests = list(user.interests or [])
        primary = interests[0] if interests else "general"
        question = prompts.WELCOME_QUESTIONS.get(primary, prompts.WELCOME_QUESTIONS["general"])

        system_prompt = prompts.welcome_prompt(
            user.nickname or "friend",
            user.relationship_status,
            user.career_profile,
            user.money_profile,
            user.love_profile,
            user.health_profile,
        )
        try:
            text = await self.llm.complete(system_prompt, question)
        except Exception:
            logger.exception("welcome_prediction_failed", user_id=str(user.id))
            text = prompts.WELCOME_FALLBACK_TEXT

        confidence, _ = parse_confidence(text)
        prediction = Prediction(
            user_id=user.id,
            user_input=question,
            prediction_result=text,
            category=primary if primary in CATEGORIES else "general",
            share_token=new_share_token(),
            confidence_score=confidence,
            trajectory_type="30day",
        )
        db.add(prediction)
        await db.flush()

        return {
            "welcome_prediction": text,
            "share_token": prediction.share_token,
            "confidence_score": confidence,
        }

    # ══════════════════════════════════════════════════════════════════════
    # History & feedback
    # ══════════════════════════════════════════════════════════════════════

    async def recent_history(self, db: AsyncSession, user: User, limit: int) -> list[Prediction]:
        result = await db.execute(
            select(Prediction)
            .where(Prediction.user_id == user.id)
            .order_by(Prediction.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def feedback_stats(self, db: AsyncSession, user: User) -> dict:
        """``{total, liked, disliked, liked_categories}`` for *user*.

        ``liked_categories`` is distinct and most-recently-liked first.
        """
        result = await db.execute(
            select(Prediction.category, Prediction.user_feedback)
            .where(Prediction.user_id == user.id)
            .order_by(Prediction.created_at.desc())
        )
        rows = result.all()

        liked_categories: list[str] = []
        liked = disliked = 0
        for category, feedback in rows:
            if feedback == "like":
                liked += 1
                if category and category not in liked_categories:
                    liked_categories.append(category)
            elif feedback == "dislike":
                disliked += 1

        return {
            "total": len(rows),
            "liked": liked,
            "disliked": disliked,
            "liked_categories": liked_categories,
        }

    async def get_history(
        self,
        db: AsyncSession,
        user: User,
        limit: int = 20,
        offset: int = 0,
        category: Optional[str] = None,
        search: Optional[str] = None,
        feedback: Optional[str] = None,
    ) -> dict:
        """Root predictions (no follow-ups), newest first, with paging."""
        conditions = [
            Prediction.user_id == user.id,
            Prediction.parent_prediction_id.is_(None),
        ]
        if category and category != "all":
            conditions.append(Prediction.category == category)
        if feedback and feedback != "all":
            if feedback == "none":
                conditions.append(Prediction.user_feedback.is_(None))
            else:
                conditions.append(Prediction.user_feedback == feedback)
        if search and search.strip():
            term = f"%{search.strip()}%"
            conditions.append(
                or_(
                    Prediction.user_input.ilike(term),
                    Prediction.prediction_result.ilike(term),
                )
            )

        result = await db.execute(
            select(Prediction)
            .where(*conditions)
            .order_by(Prediction.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        predictions = list(result.scalars().all())

        total = (
            await db.execute(select(func.count()).select_from(Prediction).where(*conditions))
        ).scalar_one()

        return {
            "predictions": predictions,
            "total": total,
            "has_more": offset + len(predictions) < total,
        }

    async def get_shared(self, db: AsyncSession, share_token: str) -> Prediction:
        result = await db.execute(
            select(Prediction).where(Prediction.share_token == share_token)
        )
        prediction = result.scalar_one_or_none()
        if prediction is None:
            raise LookupError("Prediction not found")
        return prediction

    async def _get_owned(self, db: AsyncSession, user: User, prediction_id: uuid.UUID, action: str) -> Prediction:
        result = await db.execute(
            select(Prediction).where(
                Prediction.id == prediction_id,
                Prediction.user_id == user.id,
            )
        )
        prediction = result.scalar_one_or_none()
        if prediction is None:
            raise LookupError(
                f"Prediction not found or you don't have permission to {action} it"
            )
        return prediction

    async def delete(self, db: AsyncSession, user: User, prediction_id: uuid.UUID) -> None:
        await self._get_owned(db, user, prediction_id, "delete")
        await db.execute(delete(Prediction).where(Prediction.id == prediction_id))
        await db.flush()
        logger.info("prediction_deleted", user_id=str(user.id), prediction_id=str(prediction_id))

    async def rename(
        self, db: AsyncSession, user: User, prediction_id: uuid.UUID, new_title: str
    ) -> Prediction:
        prediction = await self._get_owned(db, user, prediction_id, "rename")
        prediction.user_input = new_title
        await db.flush()
        return prediction

    async def submit_feedback(
        self, db: AsyncSession, user: User, prediction_id: uuid.UUID, feedback: str
    ) -> Prediction:
        if feedback not in FEEDBACK_VALUES:
            raise ValueError(f"Invalid feedback: {feedback}")
        prediction = await self._get_owned(db, user, prediction_id, "rate")
        prediction.user_feedback = feedback
        await db.flush()
        return prediction

    # ══════════════════════════════════════════════════════════════════════
    # Attachments
    # ══════════════════════════════════════════════════════════════════════

    async def upload_file(
        self, user: User, file_name: str, file_data: str, mime_type: str
    ) -> dict:
        """Store a base64 payload under ``predictions/{user_id}/``."""
        try:
            payload = base64.b64decode(file_data)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("File data is not valid base64") from exc

        extension = file_name.rsplit(".", 1)[-1] or "file"
        key = f"predictions/{user.id}/{secrets.token_urlsafe(16)}.{extension}"
        stored = await asyncio.to_thread(storage.put_object, key, payload, mime_type)

        logger.info("prediction_attachment_uploaded", user_id=str(user.id), key=stored["key"], size=len(payload))
        return {"url": stored["url"], "file_name": file_name}
