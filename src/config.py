"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.constants import FACEBOOK_API_TIMEOUT_SECONDS, FOLLOW_UP_DELAY_SECONDS


class ConfigMissingError(RuntimeError):
    """Raised at startup when required configuration is absent or invalid."""

    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(
            "Missing or invalid configuration values: " + ", ".join(fields)
        )


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Loaded once per process and frozen afterwards.
    """

    model_config = SettingsConfigDict(
        # Load .env first, then .env.local (for local/test overrides)
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Messenger Configuration
    messenger_app_secret: str = Field(
        ..., min_length=1, description="Facebook App secret used to sign webhooks"
    )
    messenger_validation_token: str = Field(
        ..., min_length=1, description="Webhook verification token"
    )
    messenger_page_access_token: str = Field(
        ..., min_length=1, description="Facebook Page access token"
    )
    server_url: str = Field(
        ...,
        min_length=1,
        description="Externally reachable base URL of this service (with protocol)",
    )

    signature_missing_policy: Literal["allow", "reject"] = Field(
        default="allow",
        description=(
            "What to do with webhook deliveries that carry no X-Hub-Signature: "
            "'allow' logs and processes them, 'reject' answers 403"
        ),
    )

    follow_up_delay_seconds: float = Field(
        default=FOLLOW_UP_DELAY_SECONDS,
        ge=0.0,
        description="Delay before follow-up replies are sent (seconds)",
    )
    facebook_api_timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        gt=0.0,
        description="Timeout for Facebook Graph API calls (seconds)",
    )

    # Environment
    env: Literal["local", "railway", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for observability"
    )


def load_settings() -> Settings:
    """Build settings from the environment, failing loudly on missing values.

    Raises:
        ConfigMissingError: If any required value is missing or invalid.
    """
    try:
        return Settings()
    except ValidationError as e:
        fields = [
            ".".join(str(part) for part in error["loc"]).upper() or "<settings>"
            for error in e.errors()
        ]
        raise ConfigMissingError(fields) from e


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
