"""Tests for settings loading."""

from __future__ import annotations

import pytest

from talk_weatherbot.config import REQUIRED_VARIABLES, load_settings
from talk_weatherbot.errors import ConfigurationError


@pytest.fixture
def environment(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Provide a complete environment."""
    monkeypatch.setenv("NEXTCLOUD_URI", "https://cloud.example.com")
    monkeypatch.setenv("NEXTCLOUD_USER", "wetter")
    monkeypatch.setenv("NEXTCLOUD_PASSWORD", "secret")
    monkeypatch.setenv("OPEN_WEATHER_API_KEY", "key")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("CONVERSATION_POLL_INTERVAL", raising=False)
    return monkeypatch


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_reads_environment(self, environment: pytest.MonkeyPatch) -> None:
        """Required values are read, optional values get defaults."""
        settings = load_settings(dotenv=False)

        assert settings.nextcloud_uri == "https://cloud.example.com"
        assert settings.nextcloud_user == "wetter"
        assert settings.nextcloud_password == "secret"
        assert settings.open_weather_api_key == "key"
        assert settings.log_level == "INFO"
        assert settings.conversation_poll_interval == 30.0

    @pytest.mark.parametrize("name", REQUIRED_VARIABLES)
    def test_missing_required_variable(
        self, environment: pytest.MonkeyPatch, name: str
    ) -> None:
        """A missing required variable is named in the error."""
        environment.delenv(name)

        with pytest.raises(ConfigurationError, match=name):
            load_settings(dotenv=False)

    def test_optional_values(self, environment: pytest.MonkeyPatch) -> None:
        """Log level and poll interval can be overridden."""
        environment.setenv("LOG_LEVEL", "debug")
        environment.setenv("CONVERSATION_POLL_INTERVAL", "5")

        settings = load_settings(dotenv=False)

        assert settings.log_level == "DEBUG"
        assert settings.conversation_poll_interval == 5.0

    @pytest.mark.parametrize("value", ["soon", "0", "-1"])
    def test_invalid_poll_interval(
        self, environment: pytest.MonkeyPatch, value: str
    ) -> None:
        """The poll interval must be a positive number."""
        environment.setenv("CONVERSATION_POLL_INTERVAL", value)

        with pytest.raises(ConfigurationError, match="CONVERSATION_POLL_INTERVAL"):
            load_settings(dotenv=False)
