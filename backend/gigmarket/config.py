"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in production)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - strict_gig_transitions defaults off: owners may set any gig status
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Database
    database_url: str = (
        "postgresql+asyncpg://gigmarket:gigmarket@db:5432/gigmarket"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7

    # Email (Resend)
    resend_api_key: str = "re_placeholder"
    resend_api_url: str = "https://api.resend.com/emails"
    email_from: str = "Freelance App <noreply@example.com>"
    email_timeout_seconds: float = 10.0
    app_url: str = "http://localhost:3000"
    verification_token_ttl_hours: int = 24

    # Gig lifecycle
    strict_gig_transitions: bool = False

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
