from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Literal, Optional

Category = Literal["career", "love", "finance", "health", "sports", "stocks", "general"]
Trajectory = Literal["instant", "30day", "90day", "yearly"]


class PredictionCreate(BaseModel):
    user_input: str = Field(min_length=1, max_length=1000)
    category: Optional[Category] = None
    attachment_urls: Optional[list[str]] = None
    deep_mode: bool = False
    trajectory_type: Trajectory = "instant"
    parent_prediction_id: Optional[UUID] = None


class PredictionGenerated(BaseModel):
    prediction: str
    prediction_id: UUID
    share_token: str
    remaining_today: int
    confidence_score: Optional[int]
    deep_mode: bool
    is_follow_up: bool


class OnboardingContext(BaseModel):
    nickname: Optional[str] = None
    interests: Optional[list[str]] = None
    relationship_status: Optional[str] = None
    career_profile: Optional[dict] = None
    finance_profile: Optional[dict] = None
    love_profile: Optional[dict] = None
    health_profile: Optional[dict] = None


class AnonymousPredictionCreate(BaseModel):
    user_input: str = Field(min_length=1, max_length=1000)
    category: Optional[Category] = None
    onboarding_data: Optional[OnboardingContext] = None


class AnonymousPredictionResponse(BaseModel):
    prediction: str
    category: str


class PredictionResponse(BaseModel):
    id: UUID
    user_input: str
    prediction_result: str
    category: Optional[str]
    attachment_urls: Optional[list[str]]
    share_token: Optional[str]
    confidence_score: Optional[int]
    prediction_mode: str
    trajectory_type: str
    parent_prediction_id: Optional[UUID]
    user_feedback: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class PredictionHistory(BaseModel):
    predictions: list[PredictionResponse]
    total: int
    has_more: bool


class PredictionRename(BaseModel):
    new_title: str = Field(min_length=1, max_length=200)


class PredictionRenamed(BaseModel):
    success: bool = True
    new_title: str


class PredictionFeedback(BaseModel):
    feedback: Literal["like", "dislike"]


class FileUpload(BaseModel):
    file_name: str = Field(min_length=1, max_length=255)
    file_data: str  # base64
    mime_type: str


class FileUploadResponse(BaseModel):
    url: str
    file_name: str
