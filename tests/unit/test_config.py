from __future__ import annotations

import pytest

from shipin.config import ShipinSettings

pytestmark = pytest.mark.unit


def test_defaults_match_provider_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SHIPIN_RUNWAY_API_KEY", raising=False)

    settings = ShipinSettings()

    assert settings.runway_api_key is None
    assert settings.runway_api_version == "2024-09-13"
    assert settings.poll_interval_seconds == 5.0
    assert settings.throttled_interval_seconds == 10.0
    assert settings.create_timeout_seconds == 10.0
    assert settings.poll_deadline_seconds is None


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHIPIN_RUNWAY_API_KEY", "rw-env-key")
    monkeypatch.setenv("SHIPIN_POLL_INTERVAL_SECONDS", "1.5")
    monkeypatch.setenv("SHIPIN_POLL_DEADLINE_SECONDS", "600")

    settings = ShipinSettings()

    assert settings.runway_api_key.get_secret_value() == "rw-env-key"
    assert "rw-env-key" not in repr(settings)
    assert settings.poll_interval_seconds == 1.5
    assert settings.poll_deadline_seconds == 600.0
