"""
Predicsure AI — Main API Router

Aggregates all sub-routers so that ``app.main`` can mount the whole API
surface with one ``include_router`` call.
"""

from fastapi import APIRouter

from app.api import admin, billing, deepening, predictions, psyche, stats, subscriptions, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(psyche.router, prefix="/psyche", tags=["Psyche"])
router.include_router(deepening.router, prefix="/deepening", tags=["Deepening"])
router.include_router(predictions.router, prefix="/predictions", tags=["Predictions"])
router.include_router(subscriptions.router, prefix="/subscriptions", tags=["Subscriptions"])
router.include_router(billing.router, prefix="/billing", tags=["Billing"])
router.include_router(stats.router, prefix="/stats", tags=["Stats"])
router.include_router(admin.router, prefix="/admin", tags=["Admin"])
