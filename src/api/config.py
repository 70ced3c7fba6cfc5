"""Configuration for the HTTP API using pydantic-settings."""

import uuid
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiConfig(BaseSettings):
    """Configuration for the admin API.

    All settings are loaded from environment variables with the API_ prefix.

    :param auth_token: Bearer token operators authenticate with.
    :param operator_id: Identity of the operator holding the token. Idempotency
        keys are scoped to this identity.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    auth_token: str = Field(..., min_length=1, description="Bearer token for the admin API")
    operator_id: uuid.UUID = Field(..., description="Identity of the token holder")


@lru_cache
def get_api_settings() -> ApiConfig:
    """Get cached API settings.

    :returns: Configured ApiConfig instance.
    """
    return ApiConfig()  # type: ignore[call-arg]
