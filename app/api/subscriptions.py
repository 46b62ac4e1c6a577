"""
Predicsure AI — Subscriptions API

Current quota, the plan catalog and Stripe checkout / portal sessions.
"""

from __future__ import annotations

from typing import Optional

import stripe
import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.config import get_settings
from app.database import get_db
from app.models.subscription import Subscription
from app.models.user import User
from app.schemas.subscription import (
    CheckoutRequest,
    CheckoutResponse,
    PlanResponse,
    PortalResponse,
    SubscriptionResponse,
)
from app.services.billing_service import BillingService
from app.services.plans import PLANS
from app.services.subscription_service import SubscriptionService

logger = structlog.get_logger("predicsure.api.subscriptions")

router = APIRouter()

# ── Service singletons ────────────────────────────────────────────────────────

_subscription_service: SubscriptionService | None = None
_billing_service: BillingService | None = None


def _get_subscription_service() -> SubscriptionService:
    global _subscription_service
    if _subscription_service is None:
        _subscription_service = SubscriptionService()
    return _subscription_service


def _get_billing_service() -> BillingService:
    global _billing_service
    if _billing_service is None:
        _billing_service = BillingService()
    return _billing_service


def _origin(origin: Optional[str]) -> str:
    return (origin or get_settings().DEFAULT_APP_ORIGIN).rstrip("/")


# ──────────────────────────────────────────────────────────────────────────────
# GET /current — The caller's subscription
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/current",
    response_model=SubscriptionResponse,
    summary="Get the current subscription and quota",
)
async def get_current_subscription(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Subscription:
    """Returns the subscription after applying any pending daily reset."""
    return await _get_subscription_service().check_and_reset(db, user)


# ──────────────────────────────────────────────────────────────────────────────
# GET /plans — Paid plan catalog
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/plans",
    response_model=list[PlanResponse],
    summary="List purchasable plans",
)
async def list_plans() -> list[PlanResponse]:
    return [
        PlanResponse(
            tier=tier,
            name=plan["name"],
            description=plan["description"],
            price_monthly=plan["price_monthly"],
            price_yearly=plan["price_yearly"],
            features=plan["features"],
            trajectory_access=plan["trajectory_access"],
            deep_mode=plan["deep_mode"],
        )
        for tier, plan in PLANS.items()
    ]


# ──────────────────────────────────────────────────────────────────────────────
# POST /checkout — Stripe checkout session
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/checkout",
    response_model=CheckoutResponse,
    summary="Start a Stripe checkout for a paid plan",
)
async def create_checkout(
    payload: CheckoutRequest,
    origin: Optional[str] = Header(None),
    user: User = Depends(get_current_user),
) -> CheckoutResponse:
    log = logger.bind(user_id=str(user.id), tier=payload.tier, interval=payload.interval)
    log.info("create_checkout_start")

    try:
        url = await _get_billing_service().create_checkout_session(
            user, payload.tier, payload.interval, _origin(origin)
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except stripe.StripeError as exc:
        log.error("create_checkout_failed", error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Payment provider unavailable",
        )

    log.info("create_checkout_complete")
    return CheckoutResponse(checkout_url=url)


# ──────────────────────────────────────────────────────────────────────────────
# POST /portal — Stripe customer portal
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/portal",
    response_model=PortalResponse,
    summary="Open the Stripe billing portal",
)
async def create_portal(
    origin: Optional[str] = Header(None),
    user: User = Depends(get_current_user),
) -> PortalResponse:
    try:
        url = await _get_billing_service().create_portal_session(user, _origin(origin))
    except stripe.StripeError as exc:
        logger.error("create_portal_failed", user_id=str(user.id), error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Payment provider unavailable",
        )
    return PortalResponse(portal_url=url)
