"""
Predicsure AI — Application Configuration

Every setting comes from the environment or a local ``.env`` file.  Only
the database URL, Redis URL and Gemini key are required; billing, email,
storage and market data degrade gracefully when left empty.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the Predicsure AI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Gemini LLM
    # ------------------------------------------------------------------ #
    GEMINI_API_KEY: str
    GEMINI_MODEL_PRIMARY: str = "gemini-2.5-pro"
    GEMINI_MODEL_FALLBACK: str = "gemini-2.5-flash"
    GEMINI_MODEL_STABLE: str = "gemini-2.0-flash"
    GEMINI_MAX_OUTPUT_TOKENS: int = 4096

    # ------------------------------------------------------------------ #
    # Database – Cloud SQL via Unix socket or private IP
    # ------------------------------------------------------------------ #
    DATABASE_URL: str
    DB_USER: str = "predicsure_user"
    DB_PASSWORD: str = ""
    DB_NAME: str = "predicsure"

    # ------------------------------------------------------------------ #
    # Redis – global stats and market data cache
    # ------------------------------------------------------------------ #
    REDIS_URL: str
    GLOBAL_STATS_CACHE_SECONDS: int = 60

    # ------------------------------------------------------------------ #
    # Stripe billing
    # ------------------------------------------------------------------ #
    STRIPE_SECRET_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""

    # ------------------------------------------------------------------ #
    # Subscription quotas
    # ------------------------------------------------------------------ #
    FREE_LIFETIME_LIMIT: int = 3

    # ------------------------------------------------------------------ #
    # Outbound email (notification API)
    # ------------------------------------------------------------------ #
    NOTIFICATION_API_URL: str = ""
    NOTIFICATION_API_KEY: str = ""

    # ------------------------------------------------------------------ #
    # Market data providers
    # ------------------------------------------------------------------ #
    ALPHA_VANTAGE_API_KEY: str = "demo"
    SPORTS_DB_BASE_URL: str = "https://www.thesportsdb.com/api/v1/json/3"
    ALPHA_VANTAGE_BASE_URL: str = "https://www.alphavantage.co/query"

    # ------------------------------------------------------------------ #
    # Identity
    # ------------------------------------------------------------------ #
    OWNER_EXTERNAL_ID: str = ""  # external id that is promoted to admin on sync
    GATEWAY_SHARED_SECRET: str = ""  # sent by the gateway as X-Gateway-Secret on /users/sync

    # ------------------------------------------------------------------ #
    # Runtime environment
    # ------------------------------------------------------------------ #
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    DEFAULT_APP_ORIGIN: str = "http://localhost:3000"

    # ------------------------------------------------------------------ #
    # Google Cloud Platform
    # ------------------------------------------------------------------ #
    GCP_PROJECT_ID: str = ""
    GCP_REGION: str = "us-central1"
    GCS_BUCKET_NAME: str = ""
    GCS_PUBLIC_BASE_URL: str = ""
    CLOUD_SQL_INSTANCE_CONNECTION: str = ""
    CLOUD_SQL_USE_UNIX_SOCKET: bool = True

    # ------------------------------------------------------------------ #
    # CORS
    # ------------------------------------------------------------------ #
    ALLOWED_ORIGINS: str = "*"

    # ------------------------------------------------------------------ #
    # Derived helpers
    # ------------------------------------------------------------------ #
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list split on commas."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @field_validator("FREE_LIFETIME_LIMIT")
    @classmethod
    def _limit_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Free lifetime limit must be positive, got {v}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, parsed once."""
    return Settings()  # type: ignore[call-arg]
