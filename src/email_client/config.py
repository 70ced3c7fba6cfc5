"""Configuration for the email client using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmailClientConfig(BaseSettings):
    """Configuration for the transactional email API.

    All settings are loaded from environment variables with the EMAIL_ prefix.

    :param base_url: Base URL of the email API.
    :param api_key: API key sent in the ``api-key`` header.
    :param sender_email: Address newsletters are sent from.
    :param sender_name: Display name newsletters are sent from.
    :param timeout_ms: Request timeout in milliseconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(..., description="Base URL of the email API")
    api_key: str = Field(..., description="Email API key")
    sender_email: str = Field(..., description="Sender email address")
    sender_name: str = Field(..., description="Sender display name")
    timeout_ms: int = Field(
        default=10_000,
        ge=10,
        le=60_000,
        description="Request timeout in milliseconds",
    )


@lru_cache
def get_email_settings() -> EmailClientConfig:
    """Get cached email client settings.

    :returns: Configured EmailClientConfig instance.
    """
    return EmailClientConfig()  # type: ignore[call-arg]
