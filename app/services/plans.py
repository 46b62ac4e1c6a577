"""
Predicsure AI — Subscription plans.

Prices are in US cents.  ``daily_limit`` of -1 on a plan means "no advertised
cap"; the enforced per-day quota comes from ``TIER_DAILY_LIMITS``.
"""

from __future__ import annotations

from typing import Dict, Optional

TIERS: tuple[str, ...] = ("free", "plus", "pro", "premium")
PAID_TIERS: tuple[str, ...] = ("plus", "pro", "premium")
TRAJECTORY_TYPES: tuple[str, ...] = ("instant", "30day", "90day", "yearly")

UNLIMITED = -1

TIER_DAILY_LIMITS: Dict[str, int] = {
    "free": 3,
    "plus": 20,
    "pro": 20,
    "premium": 100,
}

TIER_DISPLAY_NAMES: Dict[str, str] = {
    "free": "Free",
    "plus": "Plus ($9.99/mo)",
    "pro": "Pro ($19.99/mo)",
    "premium": "Premium ($59/year)",
}

PLANS: Dict[str, dict] = {
    "plus": {
        "name": "Plus Plan",
        "description": "Unlimited predictions with 30-day trajectory insights",
        "price_monthly": 999,
        "price_yearly": 9588,
        "features": [
            "Unlimited predictions",
            "30-day trajectory forecasts",
            "Deep Prediction Mode",
            "Advanced confidence scores",
            "Unlimited prediction history",
            "File upload support",
            "All prediction categories",
            "Plus badge",
        ],
        "daily_limit": UNLIMITED,
        "history_depth": UNLIMITED,
        "deep_mode": True,
        "confidence_scores": True,
        "trajectory_access": ["instant", "30day"],
        "alternate_scenarios": False,
        "chat_mode": False,
    },
    "pro": {
        "name": "Pro Plan",
        "description": "90-day forecasts with alternate scenario analysis",
        "price_monthly": 1999,
        "price_yearly": 19188,
        "features": [
            "Everything in Plus",
            "90-day trajectory forecasts",
            "Alternate future scenarios",
            "Personalized yearly overview",
            "Chat-based prediction analysis",
            "\"Ask anything\" mode",
            "Prediction tracking dashboard",
            "Priority support",
            "Pro crown badge",
        ],
        "daily_limit": UNLIMITED,
        "history_depth": UNLIMITED,
        "deep_mode": True,
        "confidence_scores": True,
        "trajectory_access": ["instant", "30day", "90day"],
        "alternate_scenarios": True,
        "chat_mode": True,
    },
    "premium": {
        "name": "Premium Plan (Yearly)",
        "description": "Complete forecasting system with lifetime updates",
        "price_monthly": None,
        "price_yearly": 5900,
        "features": [
            "EVERYTHING in Pro",
            "Yearly macro-reading & forecasts",
            "Major life event predictions",
            "\"What if I choose X?\" scenarios",
            "Relationship compatibility analysis",
            "Lifetime monthly accuracy tuning",
            "All future updates included",
            "VIP support & early access",
            "Premium crown badge",
        ],
        "daily_limit": UNLIMITED,
        "history_depth": UNLIMITED,
        "deep_mode": True,
        "confidence_scores": True,
        "trajectory_access": ["instant", "30day", "90day", "yearly"],
        "alternate_scenarios": True,
        "chat_mode": True,
    },
}

FREE_PLAN: dict = {
    "name": "Free Plan",
    "description": "Try AI predictions with weekly limits",
    "features": [
        "3 predictions per week",
        "Short-form insights only",
        "No long-term trajectory",
        "No alternate scenarios",
        "7-day prediction history",
        "Basic features",
    ],
    "weekly_limit": 3,
    "history_depth": 7,
    "deep_mode": False,
    "confidence_scores": False,
    "trajectory_access": ["instant"],
}


def get_plan(tier: str) -> Optional[dict]:
    if tier == "free":
        return FREE_PLAN
    return PLANS.get(tier)


def plan_price(tier: str, interval: str) -> Optional[int]:
    """Price in cents for *tier* billed per *interval* (``month``/``year``)."""
    plan = PLANS.get(tier)
    if plan is None:
        return None
    return plan["price_monthly"] if interval == "month" else plan["price_yearly"]


def monthly_equivalent(tier: str) -> float:
    """Dollar value per month, used for revenue estimates."""
    plan = PLANS.get(tier)
    if plan is None:
        return 0.0
    if plan["price_monthly"] is not None:
        return plan["price_monthly"] / 100
    return plan["price_yearly"] / 12 / 100
