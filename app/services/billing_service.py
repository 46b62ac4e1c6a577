"""
Predicsure AI — Stripe billing: checkout, customer portal, webhooks.

The Stripe SDK is synchronous, so every API call runs in a worker thread.
Webhook events drive tier changes; checkout success is never trusted from
the browser redirect alone.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Any, Optional

import stripe
import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models.user import User
from app.services.email_service import EmailService
from app.services.plans import PAID_TIERS, PLANS, plan_price
from app.services.subscription_service import SubscriptionService

logger = structlog.get_logger("predicsure.billing_service")

CHECKOUT_INTERVALS: tuple[str, ...] = ("month", "year")
DOWNGRADE_STATUSES: tuple[str, ...] = ("canceled", "unpaid")


class BillingService:
    """Wraps the Stripe API for subscription purchase and lifecycle."""

    def __init__(
        self,
        subscriptions: Optional[SubscriptionService] = None,
        email: Optional[EmailService] = None,
    ) -> None:
        settings = get_settings()
        stripe.api_key = settings.STRIPE_SECRET_KEY
        self.webhook_secret = settings.STRIPE_WEBHOOK_SECRET
        self.subscriptions = subscriptions or SubscriptionService()
        self.email = email or EmailService()

    # ══════════════════════════════════════════════════════════════════════
    # Sessions
    # ══════════════════════════════════════════════════════════════════════

    async def create_checkout_session(
        self, user: User, tier: str, interval: str, origin: str
    ) -> str:
        """Start a subscription checkout and return its hosted URL.

        Raises
        ------
        ValueError
            For an unknown tier or interval, or a monthly Premium request
            (Premium is sold yearly only).
        """
        if tier not in PAID_TIERS:
            raise ValueError(f"Unknown tier: {tier}")
        if interval not in CHECKOUT_INTERVALS:
            raise ValueError(f"Unknown billing interval: {interval}")

        unit_amount = plan_price(tier, interval)
        if unit_amount is None:
            raise ValueError(f"The {tier} plan is not available with {interval}ly billing")

        plan = PLANS[tier]
        params: dict[str, Any] = {
            "mode": "subscription",
            "client_reference_id": str(user.id),
            "metadata": {
                "user_id": str(user.id),
                "customer_email": user.email or "",
                "customer_name": user.name or "",
                "tier": tier,
            },
            "line_items": [
                {
                    "price_data": {
                        "currency": "usd",
                        "product_data": {
                            "name": plan["name"],
                            "description": plan["description"],
                        },
                        "unit_amount": unit_amount,
                        "recurring": {"interval": interval},
                    },
                    "quantity": 1,
                }
            ],
            "success_url": f"{origin}/dashboard?payment=success",
            "cancel_url": f"{origin}/dashboard?payment=cancelled",
            "allow_promotion_codes": True,
        }
        if user.email:
            params["customer_email"] = user.email

        session = await asyncio.to_thread(stripe.checkout.Session.create, **params)
        logger.info("checkout_session_created", user_id=str(user.id), tier=tier, interval=interval)
        return session.url

    async def create_portal_session(self, user: User, origin: str) -> str:
        customer_id: Optional[str] = None
        if user.email:
            customers = await asyncio.to_thread(stripe.Customer.list, email=user.email, limit=1)
            if customers.data:
                customer_id = customers.data[0].id

        if customer_id is None:
            customer = await asyncio.to_thread(
                stripe.Customer.create,
                email=user.email or None,
                name=user.name or None,
                metadata={"user_id": str(user.id)},
            )
            customer_id = customer.id
            logger.info("stripe_customer_created", user_id=str(user.id), customer_id=customer_id)

        session = await asyncio.to_thread(
            stripe.billing_portal.Session.create,
            customer=customer_id,
            return_url=f"{origin}/account",
        )
        return session.url

    # ══════════════════════════════════════════════════════════════════════
    # Webhooks
    # ══════════════════════════════════════════════════════════════════════

    def construct_event(self, payload: bytes, signature: str):
        """Verify the signature and parse the event.

        Raises ``stripe.SignatureVerificationError`` or ``ValueError``.
        """
        return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)

    async def handle_event(self, db: AsyncSession, event) -> None:
        event_type = event["type"]
        obj = event["data"]["object"]
        metadata = obj.get("metadata") or {}
        log = logger.bind(event_id=event["id"], event_type=event_type)

        if event_type == "checkout.session.completed":
            user_id, tier = metadata.get("user_id"), metadata.get("tier")
            log.info("stripe_checkout_completed", session_id=obj.get("id"))
            if not (user_id and tier):
                return
            user = await self._get_user(db, user_id)
            if user is None:
                log.warning("stripe_user_not_found", user_id=user_id)
                return
            await self.subscriptions.update_tier(db, user, tier)
            log.info("stripe_tier_updated", user_id=user_id, tier=tier)

            email = metadata.get("customer_email") or user.email
            if email:
                amount = obj.get("amount_total") or plan_price(tier, "year") or 0
                await self.email.send_subscription_confirmation_email(
                    email, metadata.get("customer_name") or user.name or "there", tier, amount
                )

        elif event_type in ("customer.subscription.updated", "customer.subscription.deleted"):
            log.info("stripe_subscription_changed", subscription_id=obj.get("id"), status=obj.get("status"))
            if event_type == "customer.subscription.updated" and obj.get("status") not in DOWNGRADE_STATUSES:
                return
            user_id = metadata.get("user_id")
            if not user_id:
                return
            user = await self._get_user(db, user_id)
            if user is None:
                log.warning("stripe_user_not_found", user_id=user_id)
                return
            await self.subscriptions.update_tier(db, user, "free")
            log.info("stripe_user_downgraded", user_id=user_id)

        elif event_type == "invoice.payment_failed":
            log.warning("stripe_payment_failed", invoice_id=obj.get("id"))
            email = obj.get("customer_email")
            if email:
                await self.email.send_failed_payment_email(
                    email, obj.get("customer_name") or "there", obj.get("amount_due") or 0
                )

        else:
            log.info("stripe_event_unhandled")

    @staticmethod
    async def _get_user(db: AsyncSession, user_id: str) -> Optional[User]:
        try:
            key = uuid.UUID(str(user_id))
        except ValueError:
            return None
        result = await db.execute(select(User).where(User.id == key))
        return result.scalar_one_or_none()
