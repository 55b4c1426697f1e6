"""Runtime settings for provider adapters and the polling loop.

Secrets are injected via environment variables (``SHIPIN_RUNWAY_API_KEY``,
``SHIPIN_LUMA_API_KEY``); every other value has a working default.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ShipinSettings(BaseSettings):
    """Pydantic settings container for adapters and the lifecycle controller."""

    model_config = SettingsConfigDict(env_prefix="SHIPIN_", extra="ignore")

    runway_api_key: SecretStr | None = Field(
        default=None,
        description="Bearer credential for the image-to-video provider.",
    )
    runway_base_url: str = Field(default="https://api.dev.runwayml.com/v1")
    runway_api_version: str = Field(
        default="2024-09-13",
        description="Value of the fixed X-Runway-Version header.",
    )
    runway_model: str = Field(default="gen3a_turbo")

    luma_api_key: SecretStr | None = Field(
        default=None,
        description="Bearer credential for the dream-machine provider.",
    )
    luma_base_url: str = Field(default="https://api.lumalabs.ai")

    request_timeout_seconds: float = Field(default=30.0, gt=0)
    create_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Shorter timeout applied to task creation calls.",
    )
    poll_interval_seconds: float = Field(default=5.0, ge=0)
    throttled_interval_seconds: float = Field(default=10.0, ge=0)
    poll_deadline_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Optional overall polling deadline; unset polls until terminal.",
    )


@lru_cache
def get_settings() -> ShipinSettings:
    """Return process-wide cached settings."""

    return ShipinSettings()
