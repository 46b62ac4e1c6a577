"""
Predicsure AI — Prediction model (one LLM answer to one user question).
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB, UUID as PgUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Prediction(Base):
    __tablename__ = "predictions"

    id: Mapped[uuid.UUID] = mapped_column(
        PgUUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        PgUUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    user_input: Mapped[str] = mapped_column(Text, nullable=False)
    prediction_result: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    attachment_urls: Mapped[list | None] = mapped_column(
        JSONB, nullable=True, comment="Array of uploaded file URLs"
    )
    share_token: Mapped[str | None] = mapped_column(
        String(32), unique=True, index=True, nullable=True
    )
    confidence_score: Mapped[int | None] = mapped_column(
        Integer, nullable=True, comment="0-100, parsed from the model output"
    )
    prediction_mode: Mapped[str] = mapped_column(
        String(16), default="standard", server_default="standard", nullable=False,
        comment="standard / deep",
    )
    trajectory_type: Mapped[str] = mapped_column(
        String(16), default="instant", server_default="instant", nullable=False,
        comment="instant / 30day / 90day / yearly",
    )
    parent_prediction_id: Mapped[uuid.UUID | None] = mapped_column(
        PgUUID(as_uuid=True),
        ForeignKey("predictions.id", ondelete="SET NULL"),
        nullable=True,
    )
    user_feedback: Mapped[str | None] = mapped_column(
        String(16), nullable=True, comment="like / dislike"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True, nullable=False
    )

    # ── Relationships ──────────────────────────────────────────────
    user: Mapped["User"] = relationship("User", back_populates="predictions")

    def __repr__(self) -> str:
        return (
            f"<Prediction {self.id} user={self.user_id} "
            f"category={self.category!r} trajectory={self.trajectory_type!r}>"
        )
