"""
Predicsure AI — Subscription quotas and tier gating.

Free users get a lifetime allowance (``FREE_LIFETIME_LIMIT``); paid tiers get a
daily allowance that resets on the first request of a new calendar day.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models.subscription import Subscription
from app.models.user import User
from app.services.plans import TIER_DAILY_LIMITS, TIERS, UNLIMITED

logger = structlog.get_logger("predicsure.subscription_service")


class TierAccessError(Exception):
    """Raised when a tier may not use a feature or has spent its quota."""


DEEP_MODE_MESSAGE = (
    "Deep Prediction Mode is only available for Pro and Premium users. "
    "Upgrade to unlock advanced AI analysis!"
)
THIRTY_DAY_MESSAGE = (
    "30-Day Trajectory Predictions are only available for Plus, Pro, and Premium users. "
    "Upgrade to unlock your future path!"
)
LONG_RANGE_MESSAGE = (
    "90-Day and Yearly Trajectory Predictions are only available for Pro and Premium users. "
    "Upgrade to see your long-term future!"
)


class SubscriptionService:
    """Reads and mutates the one ``Subscription`` row each user owns."""

    def __init__(self) -> None:
        self.free_lifetime_limit = get_settings().FREE_LIFETIME_LIMIT

    # ══════════════════════════════════════════════════════════════════════
    # Persistence
    # ══════════════════════════════════════════════════════════════════════

    async def get_or_create(self, db: AsyncSession, user: User) -> Subscription:
        result = await db.execute(
            select(Subscription).where(Subscription.user_id == user.id)
        )
        subscription = result.scalar_one_or_none()
        if subscription is not None:
            return subscription

        subscription = Subscription(
            user_id=user.id,
            tier="free",
            daily_limit=TIER_DAILY_LIMITS["free"],
            used_today=0,
            total_used=0,
            last_reset_date=datetime.now(timezone.utc),
            is_active=True,
        )
        db.add(subscription)
        await db.flush()
        logger.info("subscription_created", user_id=str(user.id))
        return subscription

    async def update_tier(self, db: AsyncSession, user: User, tier: str) -> Subscription:
        if tier not in TIERS:
            raise ValueError(f"Unknown tier: {tier}")

        subscription = await self.get_or_create(db, user)
        previous = subscription.tier
        subscription.tier = tier
        subscription.daily_limit = TIER_DAILY_LIMITS[tier]
        await db.flush()

        logger.info("subscription_tier_updated", user_id=str(user.id), previous=previous, tier=tier)
        return subscription

    async def check_and_reset(
        self,
        db: AsyncSession,
        user: User,
        now: Optional[datetime] = None,
    ) -> Subscription:
        """Return the subscription, zeroing ``used_today`` on a new day.

        The free tier is never reset: its quota is a lifetime total.
        """
        subscription = await self.get_or_create(db, user)
        if subscription.tier == "free":
            return subscription

        now = now or datetime.now(timezone.utc)
        if self.needs_daily_reset(subscription, now):
            subscription.used_today = 0
            subscription.last_reset_date = now
            await db.flush()
        return subscription

    @staticmethod
    def needs_daily_reset(subscription: Subscription, now: datetime) -> bool:
        last_reset = subscription.last_reset_date
        if last_reset is None:
            return True
        if last_reset.tzinfo is None:
            last_reset = last_reset.replace(tzinfo=timezone.utc)
        return last_reset.astimezone(timezone.utc).date() != now.astimezone(timezone.utc).date()

    async def increment_usage(self, db: AsyncSession, user: User) -> Subscription:
        subscription = await self.get_or_create(db, user)
        subscription.used_today = (subscription.used_today or 0) + 1
        subscription.total_used = (subscription.total_used or 0) + 1
        await db.flush()
        return subscription

    async def reset_usage(self, db: AsyncSession, user: User) -> Subscription:
        subscription = await self.get_or_create(db, user)
        subscription.used_today = 0
        subscription.total_used = 0
        await db.flush()
        return subscription

    # ══════════════════════════════════════════════════════════════════════
    # Gating
    # ══════════════════════════════════════════════════════════════════════

    def enforce_generation_access(
        self,
        subscription: Subscription,
        deep_mode: bool = False,
        trajectory_type: str = "instant",
    ) -> None:
        """Raise ``TierAccessError`` if this request is not allowed.

        Checks run in a fixed order so the user always sees the most
        specific upgrade message first: feature gates before quota.
        """
        tier = subscription.tier

        if deep_mode and tier not in ("pro", "premium"):
            raise TierAccessError(DEEP_MODE_MESSAGE)

        if trajectory_type == "30day" and tier not in ("plus", "pro", "premium"):
            raise TierAccessError(THIRTY_DAY_MESSAGE)

        if trajectory_type in ("90day", "yearly") and tier not in ("pro", "premium"):
            raise TierAccessError(LONG_RANGE_MESSAGE)

        if tier == "free":
            if subscription.total_used >= self.free_lifetime_limit:
                raise TierAccessError(
                    f"You've reached your free tier limit of {self.free_lifetime_limit} predictions. "
                    "Upgrade to Pro or Premium for unlimited predictions!"
                )
        elif subscription.daily_limit != UNLIMITED and subscription.used_today >= subscription.daily_limit:
            raise TierAccessError(
                f"Daily prediction limit reached ({subscription.daily_limit}). "
                "Try again tomorrow or upgrade for higher limits."
            )

    @staticmethod
    def remaining_today(subscription: Subscription) -> int:
        """Remaining quota after the prediction currently being generated."""
        return subscription.daily_limit - subscription.used_today - 1
