"""Capabilities the bot needs from the chat server and the weather provider.

The bot depends on these protocols only, so the concrete adapters in
``talk_weatherbot.transport`` can be replaced by test doubles.
"""

from __future__ import annotations

from typing import Any, Protocol


class ChatGateway(Protocol):
    """Chat server as seen by the bot."""

    @property
    def user_name(self) -> str:
        """User name of the bot account."""
        ...

    @property
    def display_name(self) -> str:
        """Display name of the bot account."""
        ...

    async def send_text(self, text: str, conversation_token: str) -> None:
        """Post a plain text message to a conversation."""
        ...


class WeatherProvider(Protocol):
    """Weather data source as seen by the bot."""

    async def get_coordinates(self, location_name: str) -> list[dict[str, Any]]:
        """Geocode a location name; an empty list means "not found"."""
        ...

    async def get_current_weather_data(
        self,
        latitude: float,
        longitude: float,
        units: str = "standard",
        language: str = "de",
    ) -> dict[str, Any]:
        """Fetch current conditions and the daily forecast."""
        ...
