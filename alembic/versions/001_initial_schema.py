"""Initial schema — the six Predicsure AI tables.

Revision ID: 001_initial
Revises:
Create Date: 2025-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    # ── 1. users ────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "external_id",
            sa.String(64),
            nullable=False,
            comment="Identity provider subject id",
        ),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("name", sa.String, nullable=True),
        sa.Column("login_method", sa.String(64), nullable=True),
        sa.Column(
            "role",
            sa.String(16),
            server_default="user",
            nullable=False,
            comment="user / admin",
        ),
        sa.Column("nickname", sa.String(100), nullable=True),
        sa.Column("gender", sa.String(32), nullable=True),
        sa.Column("relationship_status", sa.String(32), nullable=True),
        sa.Column(
            "interests",
            postgresql.JSONB,
            nullable=True,
            comment="Array of prediction categories",
        ),
        sa.Column("career_profile", postgresql.JSONB, nullable=True),
        sa.Column("money_profile", postgresql.JSONB, nullable=True),
        sa.Column("love_profile", postgresql.JSONB, nullable=True),
        sa.Column("health_profile", postgresql.JSONB, nullable=True),
        sa.Column("onboarding_completed", sa.Boolean, server_default="false", nullable=False),
        sa.Column("age_range", sa.String(32), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("income_range", sa.String(32), nullable=True),
        sa.Column("industry", sa.String(100), nullable=True),
        sa.Column("major_transition", sa.Boolean, nullable=True),
        sa.Column("transition_type", sa.String(100), nullable=True),
        sa.Column("premium_data_completed", sa.Boolean, server_default="false", nullable=False),
        sa.Column("prediction_count", sa.Integer, server_default="0", nullable=False),
        sa.Column("deepening_prompted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deepening_dismissed_count", sa.Integer, server_default="0", nullable=False),
        *_timestamps(),
        sa.Column("last_signed_in", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_external_id", "users", ["external_id"], unique=True)
    op.create_index("ix_users_email", "users", ["email"])

    # ── 2. subscriptions ────────────────────────────────────────────
    op.create_table(
        "subscriptions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        ),
        sa.Column(
            "tier",
            sa.String(16),
            server_default="free",
            nullable=False,
            comment="free / plus / pro / premium",
        ),
        sa.Column(
            "daily_limit",
            sa.Integer,
            server_default="3",
            nullable=False,
            comment="-1 means unlimited",
        ),
        sa.Column("used_today", sa.Integer, server_default="0", nullable=False),
        sa.Column("total_used", sa.Integer, server_default="0", nullable=False),
        sa.Column(
            "last_reset_date",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean, server_default="true", nullable=False),
        sa.Column("stripe_customer_id", sa.String(255), nullable=True),
        sa.Column("stripe_subscription_id", sa.String(255), nullable=True),
        *_timestamps(),
    )

    # ── 3. predictions ──────────────────────────────────────────────
    op.create_table(
        "predictions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_input", sa.Text, nullable=False),
        sa.Column("prediction_result", sa.Text, nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column(
            "attachment_urls",
            postgresql.JSONB,
            nullable=True,
            comment="Array of uploaded file URLs",
        ),
        sa.Column("share_token", sa.String(32), nullable=True),
        sa.Column(
            "confidence_score",
            sa.Integer,
            nullable=True,
            comment="0-100, parsed from the model output",
        ),
        sa.Column(
            "prediction_mode",
            sa.String(16),
            server_default="standard",
            nullable=False,
            comment="standard / deep",
        ),
        sa.Column(
            "trajectory_type",
            sa.String(16),
            server_default="instant",
            nullable=False,
            comment="instant / 30day / 90day / yearly",
        ),
        sa.Column(
            "parent_prediction_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("predictions.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("user_feedback", sa.String(16), nullable=True, comment="like / dislike"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_predictions_user_id", "predictions", ["user_id"])
    op.create_index("ix_predictions_share_token", "predictions", ["share_token"], unique=True)
    op.create_index("ix_predictions_created_at", "predictions", ["created_at"])

    # ── 4. psyche_profiles ──────────────────────────────────────────
    op.create_table(
        "psyche_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        ),
        sa.Column("psyche_type", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("core_traits", postgresql.JSONB, nullable=False, comment="Array of trait strings"),
        sa.Column("decision_making_style", sa.Text, nullable=False),
        sa.Column("growth_edge", sa.Text, nullable=False),
        sa.Column(
            "psyche_parameters",
            postgresql.JSONB,
            nullable=False,
            comment="Parameter name -> value in [0, 1]",
        ),
        sa.Column("secondary_interests", postgresql.JSONB, nullable=True),
        sa.Column("cross_domain_insights", postgresql.JSONB, nullable=True),
        sa.Column(
            "profile_completeness",
            sa.Integer,
            server_default="0",
            nullable=False,
            comment="0-100",
        ),
        *_timestamps(),
    )

    # ── 5. onboarding_responses ─────────────────────────────────────
    op.create_table(
        "onboarding_responses",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "question_id",
            sa.Integer,
            nullable=False,
            comment="1-16 legacy quiz, 2000+ deepening",
        ),
        sa.Column("question_text", sa.Text, nullable=False),
        sa.Column("selected_option", sa.String(64), nullable=False),
        sa.Column("answer_text", sa.Text, nullable=False),
        sa.Column(
            "mapped_psyche_types",
            postgresql.JSONB,
            nullable=False,
            comment="Array of psyche type keys or indicators",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_onboarding_responses_user_id", "onboarding_responses", ["user_id"])

    # ── 6. core_questions (reference table) ─────────────────────────
    op.create_table(
        "core_questions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("question_key", sa.String(64), unique=True, nullable=False),
        sa.Column("position", sa.Integer, unique=True, nullable=False),
        sa.Column("question_text", sa.Text, nullable=False),
        sa.Column(
            "options",
            postgresql.JSONB,
            nullable=False,
            comment="Array of {id, text, scores}",
        ),
    )


def downgrade() -> None:
    # Children first.
    op.drop_table("core_questions")

    op.drop_index("ix_onboarding_responses_user_id", table_name="onboarding_responses")
    op.drop_table("onboarding_responses")

    op.drop_table("psyche_profiles")

    op.drop_index("ix_predictions_created_at", table_name="predictions")
    op.drop_index("ix_predictions_share_token", table_name="predictions")
    op.drop_index("ix_predictions_user_id", table_name="predictions")
    op.drop_table("predictions")

    op.drop_table("subscriptions")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_external_id", table_name="users")
    op.drop_table("users")
