"""
Predicsure AI — User model (identity, onboarding answers, premium context).
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB, UUID as PgUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        PgUUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    external_id: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False,
        comment="Identity provider subject id",
    )
    email: Mapped[str | None] = mapped_column(String(320), index=True, nullable=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    login_method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    role: Mapped[str] = mapped_column(
        String(16), default="user", server_default="user", nullable=False,
        comment="user / admin",
    )

    # ── Onboarding ─────────────────────────────────────────────────
    nickname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(32), nullable=True)
    relationship_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    interests: Mapped[list | None] = mapped_column(
        JSONB, nullable=True, comment="Array of prediction categories"
    )
    career_profile: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    money_profile: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    love_profile: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    health_profile: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    onboarding_completed: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )

    # ── Premium precision data ─────────────────────────────────────
    age_range: Mapped[str | None] = mapped_column(String(32), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    income_range: Mapped[str | None] = mapped_column(String(32), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    major_transition: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    transition_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    premium_data_completed: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )

    # ── Progressive deepening ──────────────────────────────────────
    prediction_count: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    deepening_prompted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    deepening_dismissed_count: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )
    last_signed_in: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # ── Relationships ──────────────────────────────────────────────
    subscription: Mapped["Subscription"] = relationship(
        "Subscription", back_populates="user", uselist=False,
        cascade="all, delete-orphan", passive_deletes=True,
    )
    predictions: Mapped[list["Prediction"]] = relationship(
        "Prediction", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    psyche_profile: Mapped["PsycheProfile"] = relationship(
        "PsycheProfile", back_populates="user", uselist=False,
        cascade="all, delete-orphan", passive_deletes=True,
    )
    onboarding_responses: Mapped[list["OnboardingResponse"]] = relationship(
        "OnboardingResponse", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self) -> str:
        return f"<User {self.external_id!r} id={self.id}>"
