"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "EduAssist"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    default_language: Literal["ar", "en"] = "ar"

    # Database
    # If database_url_override is set (e.g., for Neon with SSL), it takes precedence
    database_url_override: str | None = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "eduassist"
    postgres_password: str = ""
    postgres_db: str = "eduassist"
    database_pool_size: int = 5
    database_max_overflow: int = 10

    def _database_url(self, scheme: str) -> str:
        """Database URL with ``scheme``, from the override or the postgres_* parts."""
        if not self.database_url_override:
            return (
                f"{scheme}://{self.postgres_user}:{self.postgres_password}"
                f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
            )
        _, _, rest = self.database_url_override.partition("://")
        return f"{scheme}://{rest}"

    @computed_field
    @property
    def database_url(self) -> str:
        """Async (asyncpg) URL. Query params are dropped; SSL goes through connect_args."""
        return self._database_url("postgresql+asyncpg").split("?", 1)[0]

    @computed_field
    @property
    def database_requires_ssl(self) -> bool:
        override = self.database_url_override or ""
        return "sslmode=require" in override or "ssl=require" in override

    @computed_field
    @property
    def database_url_sync(self) -> str:
        """Sync (psycopg2) URL for Alembic."""
        return self._database_url("postgresql")

    # Auth / JWT
    jwt_secret_key: str  # Required - no default, must be set in .env
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Google OAuth
    google_client_id: str

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Set to true when frontend and backend are on different domains
    cookie_cross_domain: bool = False

    # AWS S3 (uploaded study material)
    aws_access_key_id: str
    aws_secret_access_key: str
    aws_s3_bucket: str
    aws_s3_region: str = "me-south-1"
    aws_s3_endpoint_url: str | None = None  # Set for MinIO/LocalStack

    # Anthropic API
    anthropic_api_key: str

    # LLM Configuration
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 2000
    llm_chat_temperature: float = 0.7
    llm_structured_temperature: float = 0.3
    llm_summary_temperature: float = 0.4
    llm_translation_temperature: float = 0.2

    # Number of prior messages sent with each chat turn
    chat_history_window: int = 10

    # Characters of extracted document text sent for analysis
    document_context_max_chars: int = 8000

    # Uploads
    max_upload_size_bytes: int = 10 * 1024 * 1024  # 10 MiB

    # Stripe billing
    stripe_secret_key: str
    stripe_product_id: str
    billing_currency: str = "sar"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def sanitize_error(error: Exception, *, generic_message: str = "An internal error occurred.") -> str:
    """
    Return a user-safe error message.

    In development, returns the full exception string for debugging.
    In staging/production, returns a generic message to avoid leaking internals.
    """
    settings = get_settings()
    if settings.environment == "development":
        return str(error)
    return generic_message
