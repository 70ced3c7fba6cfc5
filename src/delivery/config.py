"""Configuration for the delivery worker using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DeliveryWorkerConfig(BaseSettings):
    """Configuration for the issue delivery worker.

    All settings are loaded from environment variables with the
    DELIVERY_WORKER_ prefix.

    :param empty_queue_delay: Seconds to wait after finding the queue empty.
    :param error_retry_delay: Seconds to wait after an unexpected error.
    """

    model_config = SettingsConfigDict(
        env_prefix="DELIVERY_WORKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    empty_queue_delay: float = Field(
        default=10.0,
        gt=0,
        le=300,
        description="Delay in seconds after finding the queue empty",
    )
    error_retry_delay: float = Field(
        default=1.0,
        gt=0,
        le=60,
        description="Delay in seconds between retries after an error",
    )


@lru_cache
def get_delivery_worker_settings() -> DeliveryWorkerConfig:
    """Get cached delivery worker settings.

    :returns: Configured DeliveryWorkerConfig instance.
    """
    return DeliveryWorkerConfig()
