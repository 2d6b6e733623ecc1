"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.constants import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_PORT,
    FACEBOOK_API_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every credential is optional so the server can start and report its
    state on /health; handlers reject requests that need a missing secret.
    """

    model_config = SettingsConfigDict(
        # .env.local overrides .env
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Gemini Configuration
    gemini_api_key: str | None = Field(
        default=None, description="Google Gemini API key"
    )
    gemini_model: str = Field(
        default=DEFAULT_GEMINI_MODEL, description="Gemini model name"
    )

    # Facebook Configuration
    facebook_verify_token: str | None = Field(
        default=None, description="Webhook subscription verification token"
    )
    facebook_page_access_token: str | None = Field(
        default=None, description="Facebook Page access token for the Send API"
    )
    facebook_app_secret: str | None = Field(
        default=None, description="Facebook App secret for signature verification"
    )
    facebook_api_timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        description="Timeout for Facebook Graph API calls (seconds)",
    )

    # Server
    port: int = Field(default=DEFAULT_PORT, description="HTTP listen port")
    environment: str = Field(
        default=DEFAULT_ENVIRONMENT,
        validation_alias=AliasChoices("environment", "node_env", "env"),
        description="Deployment environment name",
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token (cloud export)"
    )

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    @property
    def gemini_configured(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def facebook_configured(self) -> bool:
        return bool(self.facebook_page_access_token)

    def missing_credentials(self) -> list[str]:
        """Names of unset credentials, as environment variable names."""
        required = {
            "GEMINI_API_KEY": self.gemini_api_key,
            "FACEBOOK_PAGE_ACCESS_TOKEN": self.facebook_page_access_token,
            "FACEBOOK_VERIFY_TOKEN": self.facebook_verify_token,
            "FACEBOOK_APP_SECRET": self.facebook_app_secret,
        }
        return [name for name, value in required.items() if not value]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
