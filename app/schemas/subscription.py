from pydantic import BaseModel
from datetime import datetime
from typing import Literal, Optional


class SubscriptionResponse(BaseModel):
    tier: str
    daily_limit: int
    used_today: int
    total_used: int
    last_reset_date: datetime
    is_active: bool

    model_config = {"from_attributes": True}


class PlanResponse(BaseModel):
    tier: str
    name: str
    description: str
    price_monthly: Optional[int] = None
    price_yearly: Optional[int] = None
    features: list[str]
    trajectory_access: list[str]
    deep_mode: bool


class CheckoutRequest(BaseModel):
    tier: Literal["plus", "pro", "premium"]
    interval: Literal["month", "year"] = "month"


class CheckoutResponse(BaseModel):
    checkout_url: str


class PortalResponse(BaseModel):
    portal_url: str
