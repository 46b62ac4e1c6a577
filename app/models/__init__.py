"""
Predicsure AI — ORM model registry.

Importing every model here ensures that Alembic (and any other tool that
inspects ``Base.metadata``) discovers all tables automatically.
"""

from app.models.user import User
from app.models.subscription import Subscription
from app.models.prediction import Prediction
from app.models.psyche import CoreQuestion, OnboardingResponse, PsycheProfile

__all__ = [
    "User",
    "Subscription",
    "Prediction",
    "PsycheProfile",
    "OnboardingResponse",
    "CoreQuestion",
]
