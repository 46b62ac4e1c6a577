"""
Predicsure AI — Psyche models (profile, onboarding answers, core questions).
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB, UUID as PgUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class PsycheProfile(Base):
    __tablename__ = "psyche_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        PgUUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        PgUUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    psyche_type: Mapped[str] = mapped_column(String(50), nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    core_traits: Mapped[list] = mapped_column(
        JSONB, nullable=False, comment="Array of trait strings"
    )
    decision_making_style: Mapped[str] = mapped_column(Text, nullable=False)
    growth_edge: Mapped[str] = mapped_column(Text, nullable=False)
    psyche_parameters: Mapped[dict] = mapped_column(
        JSONB, nullable=False, comment="Parameter name -> value in [0, 1]"
    )
    secondary_interests: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    cross_domain_insights: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    profile_completeness: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False, comment="0-100"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    # ── Relationships ──────────────────────────────────────────────
    user: Mapped["User"] = relationship("User", back_populates="psyche_profile")

    def __repr__(self) -> str:
        return f"<PsycheProfile user={self.user_id} type={self.psyche_type!r}>"


class OnboardingResponse(Base):
    __tablename__ = "onboarding_responses"

    id: Mapped[uuid.UUID] = mapped_column(
        PgUUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        PgUUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    question_id: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="1-16 legacy quiz, 2000+ deepening"
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    selected_option: Mapped[str] = mapped_column(String(64), nullable=False)
    answer_text: Mapped[str] = mapped_column(Text, nullable=False)
    mapped_psyche_types: Mapped[list] = mapped_column(
        JSONB, nullable=False, comment="Array of psyche type keys or indicators"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # ── Relationships ──────────────────────────────────────────────
    user: Mapped["User"] = relationship("User", back_populates="onboarding_responses")

    def __repr__(self) -> str:
        return (
            f"<OnboardingResponse user={self.user_id} "
            f"q={self.question_id} option={self.selected_option!r}>"
        )


class CoreQuestion(Base):
    """Reference table holding the eight universal core questions."""

    __tablename__ = "core_questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_key: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    position: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list] = mapped_column(
        JSONB, nullable=False, comment="Array of {id, text, scores}"
    )

    def __repr__(self) -> str:
        return f"<CoreQuestion #{self.position} key={self.question_key!r}>"
