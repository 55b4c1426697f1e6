"""Factory for provider adapters."""

from __future__ import annotations

from ..config import ShipinSettings
from ..exceptions import InvalidParametersError
from ..transport import HttpTransport
from .base import ProviderAdapter
from .luma import LumaAdapter
from .runway import RunwayAdapter


def create_adapter(
    name: str,
    *,
    settings: ShipinSettings,
    transport: HttpTransport | None = None,
) -> ProviderAdapter:
    """Instantiate a provider adapter by name."""
    transport = transport or HttpTransport(timeout_seconds=settings.request_timeout_seconds)
    lower = name.lower()
    if lower == "runway":
        if settings.runway_api_key is None:
            raise InvalidParametersError("SHIPIN_RUNWAY_API_KEY is not set")
        return RunwayAdapter(
            transport=transport,
            api_key=settings.runway_api_key.get_secret_value(),
            base_url=settings.runway_base_url,
            api_version=settings.runway_api_version,
            model=settings.runway_model,
            create_timeout_seconds=settings.create_timeout_seconds,
        )
    if lower == "luma":
        if settings.luma_api_key is None:
            raise InvalidParametersError("SHIPIN_LUMA_API_KEY is not set")
        return LumaAdapter(
            transport=transport,
            api_key=settings.luma_api_key.get_secret_value(),
            base_url=settings.luma_base_url,
            create_timeout_seconds=settings.create_timeout_seconds,
        )
    raise InvalidParametersError(f"Unsupported provider '{name}'")
