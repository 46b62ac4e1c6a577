from pydantic import BaseModel
from typing import Literal, Optional

PersonalityType = Literal[
    "maverick", "strategist", "visionary", "guardian",
    "pioneer", "pragmatist", "catalyst", "adapter",
]


class ImpersonateRequest(BaseModel):
    personality_type: PersonalityType


class TierChangeRequest(BaseModel):
    tier: Literal["free", "plus", "pro", "premium"]


class TestUserSummary(BaseModel):
    email: str
    personality: str
    psyche_type: str


class SeedResult(BaseModel):
    success: bool = True
    message: str
    users: list[TestUserSummary]


class TestUserResponse(BaseModel):
    id: str
    email: Optional[str]
    name: Optional[str]
    nickname: Optional[str]
    personality: str
    psyche_type: Optional[str]


class DeleteResult(BaseModel):
    success: bool = True
    message: str
    deleted_count: int


class AdminActionResult(BaseModel):
    success: bool = True
    message: str
