from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Optional


class UserSync(BaseModel):
    external_id: str = Field(min_length=1, max_length=64)
    email: Optional[str] = None
    name: Optional[str] = None
    login_method: Optional[str] = None


class UserResponse(BaseModel):
    id: UUID
    external_id: str
    email: Optional[str]
    name: Optional[str]
    role: str
    nickname: Optional[str]
    gender: Optional[str]
    relationship_status: Optional[str]
    interests: Optional[list[str]]
    onboarding_completed: bool
    premium_data_completed: bool
    prediction_count: int
    created_at: datetime
    last_signed_in: Optional[datetime]

    model_config = {"from_attributes": True}


class CareerProfile(BaseModel):
    position: Optional[str] = None
    direction: Optional[str] = None
    challenge: Optional[str] = None
    timeline: Optional[str] = None


class MoneyProfile(BaseModel):
    stage: Optional[str] = None
    goal: Optional[str] = None
    income_source: Optional[str] = None
    stability: Optional[str] = None


class LoveProfile(BaseModel):
    goal: Optional[str] = None
    patterns: Optional[str] = None
    desires: Optional[str] = None


class HealthProfile(BaseModel):
    state: Optional[str] = None
    focus: Optional[str] = None
    consistency: Optional[str] = None
    obstacle: Optional[str] = None


class OnboardingSave(BaseModel):
    nickname: str = Field(min_length=1, max_length=100)
    interests: list[str] = []
    relationship_status: Optional[str] = None
    career_profile: Optional[CareerProfile] = None
    money_profile: Optional[MoneyProfile] = None
    love_profile: Optional[LoveProfile] = None
    health_profile: Optional[HealthProfile] = None


class OnboardingSaveResponse(BaseModel):
    success: bool
    welcome_prediction: Optional[str] = None
    share_token: Optional[str] = None
    confidence_score: Optional[int] = None


class OnboardingComplete(BaseModel):
    nickname: Optional[str] = None
    gender: Optional[str] = None
    relationship_status: Optional[str] = None
    interests: Optional[list[str]] = None


class PremiumDataSave(BaseModel):
    age_range: str
    location: Optional[str] = None
    income_range: str
    industry: str
    major_transition: bool
    transition_type: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True
