from pydantic import BaseModel, Field
from typing import Any, Literal, Optional


class DimensionScores(BaseModel):
    risk: float = Field(ge=1, le=3)
    emotional: float = Field(ge=1, le=3)
    time_horizon: float = Field(ge=1, le=3)
    decision_style: float = Field(ge=1, le=3)


class HybridResponse(BaseModel):
    question_id: str
    selected_option_index: int = Field(ge=0)
    scores: DimensionScores


class HybridOnboardingSubmit(BaseModel):
    nickname: str = Field(min_length=1, max_length=100)
    primary_interest: str = Field(min_length=1)
    core_responses: list[HybridResponse]
    adaptive_responses: list[HybridResponse]


class HybridOnboardingResult(BaseModel):
    success: bool = True
    psyche_type: dict
    scores: dict[str, float]
    insights: list[str]
    nickname: str
    primary_interest: str


class LegacyPsycheResponse(BaseModel):
    question_id: int
    question_text: str
    selected_option: str
    answer_text: str


class LegacyOnboardingSubmit(BaseModel):
    nickname: str = Field(min_length=1, max_length=100)
    interests: list[str]
    relationship_status: str
    category_answers: dict[str, dict[str, str]] = {}
    psyche_responses: list[LegacyPsycheResponse]


class PsycheSummary(BaseModel):
    display_name: str
    description: str
    core_traits: list[str]
    decision_making_style: str
    growth_edge: str


class LegacyOnboardingResult(BaseModel):
    success: bool = True
    psyche_type: str
    profile: PsycheSummary
    nickname: str
    interests: list[str]
    relationship_status: str


class WeightedOnboardingResult(BaseModel):
    success: bool = True
    psyche_type: str
    confidence: float
    parameters: dict[str, float]
    domain_insights: list[str]


class PsycheProfileResponse(BaseModel):
    psyche_type: str
    display_name: str
    description: str
    core_traits: list[str]
    decision_making_style: str
    growth_edge: str
    parameters: dict[str, Any]
    radar_traits: dict[str, float]
    secondary_interests: Optional[list[str]] = None
    cross_domain_insights: Optional[list[str]] = None
    profile_completeness: int = 0


class CoreQuestionResponse(BaseModel):
    id: str
    question: str
    options: list[dict]


class DeepeningStatus(BaseModel):
    should_show: bool
    available_categories: list[str]


class DeepeningAnswer(BaseModel):
    question_id: str
    category: str
    question_text: str = ""
    selected_option: str = ""
    answer_text: str = ""
    indicators: list[str] = []


InterestCategory = Literal["career", "love", "finance", "health", "sports", "stocks"]


class DeepeningCategoriesAdd(BaseModel):
    new_categories: list[InterestCategory] = Field(min_length=1)
    responses: list[DeepeningAnswer] = []


class DeepeningCategoriesResult(BaseModel):
    success: bool = True
    updated_interests: list[str]
    cross_domain_insights: list[str]
    profile_completeness: int
