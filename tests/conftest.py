"""Pytest configuration and fixtures for talk_weatherbot tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

BOT_USER_NAME = "wetter"
BOT_DISPLAY_NAME = "Wetterfrosch"


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


@pytest.fixture
def gateway() -> MagicMock:
    """Create a chat gateway double with an async send_text."""
    gateway = MagicMock()
    gateway.user_name = BOT_USER_NAME
    gateway.display_name = BOT_DISPLAY_NAME
    gateway.send_text = AsyncMock()
    return gateway


@pytest.fixture
def provider() -> MagicMock:
    """Create a weather provider double."""
    provider = MagicMock()
    provider.get_coordinates = AsyncMock(return_value=[])
    provider.get_current_weather_data = AsyncMock(return_value={})
    return provider


def create_mock_response(
    status: int = 200,
    json_data: Any = None,
    text_data: str | None = None,
) -> AsyncMock:
    """Create a configured mock response.

    Args:
        status: HTTP status code
        json_data: Data to return from json() call
        text_data: Data to return from text() call

    Returns:
        Configured AsyncMock response
    """
    response = AsyncMock()
    response.status = status

    if json_data is not None:
        response.json.return_value = json_data
    if text_data is not None:
        response.text.return_value = text_data

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response


def ocs(data: Any) -> dict[str, Any]:
    """Wrap data in an OCS response envelope."""
    return {"ocs": {"meta": {"status": "ok", "statuscode": 200}, "data": data}}


def one_call_payload() -> dict[str, Any]:
    """Return a trimmed One Call response for 2020-04-01 to 2020-04-03 (UTC)."""
    base = 1585699200  # 2020-04-01T00:00:00Z
    one_day = 60 * 60 * 24
    return {
        "lat": 51.51,
        "lon": -0.13,
        "timezone": "Europe/London",
        "current": {
            "dt": base,
            "temp": 12.4,
            "feels_like": 10.6,
            "wind_speed": 5.6,
            "weather": [{"id": 800, "main": "Clear", "description": "klarer Himmel", "icon": "01n"}],
        },
        "daily": [
            {
                "dt": base + index * one_day + 12 * 60 * 60,
                "temp": {
                    "day": 14.2,
                    "min": -9.8,
                    "max": 20.2,
                    "night": 7.8,
                    "eve": 12.5,
                    "morn": 1.2,
                },
                "weather": [{"id": 500, "main": "Rain", "description": "Leichter Regen", "icon": "10d"}],
            }
            for index in range(3)
        ],
    }
