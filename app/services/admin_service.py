"""
Predicsure AI — Admin tooling.

Test-user seeding and self-service switches (persona, tier, quota,
onboarding) used to exercise the product by hand.  Every operation assumes
the caller already passed the admin check in the API layer.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.psyche import PsycheProfile
from app.models.subscription import Subscription
from app.models.user import User
from app.services.plans import TIER_DISPLAY_NAMES
from app.services.psyche_catalog import ARCHETYPE_PERSONAS
from app.services.psyche_service import PsycheService
from app.services.subscription_service import SubscriptionService

logger = structlog.get_logger("predicsure.admin_service")

TEST_LOGIN_METHOD = "test"

TEST_CAREER_PROFILE = {
    "position": "mid",
    "direction": "clarity",
    "challenge": "direction",
    "timeline": "6mo",
}


class AdminService:

    def __init__(
        self,
        psyche: PsycheService | None = None,
        subscriptions: SubscriptionService | None = None,
    ) -> None:
        self.psyche = psyche or PsycheService()
        self.subscriptions = subscriptions or SubscriptionService()

    # ── Test users ────────────────────────────────────────────────────────

    async def seed_test_users(self, db: AsyncSession) -> dict:
        """Create or refresh one test user per archetype persona."""
        seeded = []
        for key, persona in ARCHETYPE_PERSONAS.items():
            email = f"test-{key}@test.com"
            label = f"Test {key.capitalize()}"

            result = await db.execute(
                select(User).where(User.email == email, User.login_method == TEST_LOGIN_METHOD)
            )
            user = result.scalar_one_or_none()
            if user is None:
                user = User(
                    external_id=f"test_{persona['psyche_type']}_{key}",
                    email=email,
                    login_method=TEST_LOGIN_METHOD,
                )
                db.add(user)

            user.name = label
            user.nickname = label
            user.onboarding_completed = True
            user.interests = ["career"]
            user.career_profile = dict(TEST_CAREER_PROFILE)
            await db.flush()

            await self.psyche.apply_persona(db, user, key)
            await self.subscriptions.get_or_create(db, user)

            seeded.append(
                {"email": email, "personality": persona["display_name"], "psyche_type": persona["psyche_type"]}
            )

        logger.info("test_users_seeded", count=len(seeded))
        return {
            "success": True,
            "message": f"Successfully seeded {len(seeded)} test users",
            "users": seeded,
        }

    async def list_test_users(self, db: AsyncSession) -> list[dict]:
        result = await db.execute(
            select(User, PsycheProfile)
            .outerjoin(PsycheProfile, PsycheProfile.user_id == User.id)
            .where(User.login_method == TEST_LOGIN_METHOD)
            .order_by(User.email)
        )
        return [
            {
                "id": str(user.id),
                "email": user.email,
                "name": user.name,
                "nickname": user.nickname,
                "personality": profile.display_name if profile else "Not assigned",
                "psyche_type": profile.psyche_type if profile else None,
            }
            for user, profile in result.all()
        ]

    async def delete_test_users(self, db: AsyncSession) -> dict:
        result = await db.execute(select(User.id).where(User.login_method == TEST_LOGIN_METHOD))
        user_ids = list(result.scalars().all())
        if not user_ids:
            return {"success": True, "message": "No test users to delete", "deleted_count": 0}

        await db.execute(delete(PsycheProfile).where(PsycheProfile.user_id.in_(user_ids)))
        await db.execute(delete(Subscription).where(Subscription.user_id.in_(user_ids)))
        await db.execute(delete(User).where(User.id.in_(user_ids)))
        await db.flush()

        logger.info("test_users_deleted", count=len(user_ids))
        return {
            "success": True,
            "message": f"Successfully deleted {len(user_ids)} test users",
            "deleted_count": len(user_ids),
        }

    # ── Self-service switches ─────────────────────────────────────────────

    async def impersonate(self, db: AsyncSession, user: User, personality_type: str) -> dict:
        persona = await self.psyche.apply_persona(db, user, personality_type)
        logger.info("admin_impersonating", user_id=str(user.id), persona=personality_type)
        return {
            "success": True,
            "message": f"Now impersonating: {persona['display_name']}",
            "personality": {
                "type": personality_type,
                "display_name": persona["display_name"],
                "description": persona["description"],
            },
        }

    async def change_tier(self, db: AsyncSession, user: User, tier: str) -> dict:
        await self.subscriptions.update_tier(db, user, tier)
        return {
            "success": True,
            "message": f"Subscription changed to {TIER_DISPLAY_NAMES[tier]}",
            "tier": tier,
        }

    async def reset_prediction_count(
        self, db: AsyncSession, user: User, now: datetime | None = None
    ) -> dict:
        subscription = await self.subscriptions.reset_usage(db, user)
        subscription.last_reset_date = now or datetime.now(timezone.utc)
        await db.flush()
        return {
            "success": True,
            "message": "Prediction count reset to 0. You can now test the free tier limits.",
        }

    async def reset_onboarding(self, db: AsyncSession, user: User) -> dict:
        user.onboarding_completed = False
        await self.psyche.delete_profile(db, user)
        await db.flush()
        return {
            "success": True,
            "message": "Onboarding reset. You can now go through the onboarding flow again.",
        }
