"""Runtime configuration read from the environment (and a ``.env`` file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from dotenv import load_dotenv

from .errors import ConfigurationError

REQUIRED_VARIABLES: Final = (
    "NEXTCLOUD_URI",
    "NEXTCLOUD_USER",
    "NEXTCLOUD_PASSWORD",
    "OPEN_WEATHER_API_KEY",
)


@dataclass(frozen=True)
class Settings:
    """Bot settings.

    Attributes:
        nextcloud_uri: Base URL of the Nextcloud server.
        nextcloud_user: User name of the bot account.
        nextcloud_password: Password (or app password) of the bot account.
        open_weather_api_key: OpenWeather API key (APPID).
        log_level: Logging level name.
        conversation_poll_interval: Seconds between conversation list refreshes.
    """

    nextcloud_uri: str
    nextcloud_user: str
    nextcloud_password: str
    open_weather_api_key: str
    log_level: str = "INFO"
    conversation_poll_interval: float = 30.0


def load_settings(*, dotenv: bool = True) -> Settings:
    """Build Settings from environment variables.

    Raises:
        ConfigurationError: If a required variable is missing or a value
            cannot be parsed.
    """
    if dotenv:
        load_dotenv()

    values: dict[str, str] = {}
    for name in REQUIRED_VARIABLES:
        value = os.getenv(name, "").strip()
        if not value:
            raise ConfigurationError(f"{name} is not set")
        values[name] = value

    raw_interval = os.getenv("CONVERSATION_POLL_INTERVAL", "30")
    try:
        poll_interval = float(raw_interval)
    except ValueError as err:
        raise ConfigurationError(
            f"CONVERSATION_POLL_INTERVAL is not a number: {raw_interval!r}"
        ) from err
    if poll_interval <= 0:
        raise ConfigurationError("CONVERSATION_POLL_INTERVAL must be positive")

    return Settings(
        nextcloud_uri=values["NEXTCLOUD_URI"],
        nextcloud_user=values["NEXTCLOUD_USER"],
        nextcloud_password=values["NEXTCLOUD_PASSWORD"],
        open_weather_api_key=values["OPEN_WEATHER_API_KEY"],
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        conversation_poll_interval=poll_interval,
    )
