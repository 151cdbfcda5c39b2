"""Error types for the weather bot and its transport adapters."""

from __future__ import annotations


class WeatherBotError(Exception):
    """Base error for weather bot failures."""


class ConfigurationError(WeatherBotError):
    """Required configuration is missing or invalid."""


class LocationNotFoundError(WeatherBotError):
    """The geocoder did not know the requested location.

    The message is meant to be shown to the user as is.
    """

    def __init__(self, location: str) -> None:
        super().__init__(
            f'Ich kenne "{location}" leider nicht. 😟 Hast du dich vielleicht '
            "vertippt?\nAnsonsten probiere es mal mit dem nächstgrößeren Ort."
        )
        self.location = location


class ProviderError(WeatherBotError):
    """Base error for weather provider failures."""


class ProviderTimeout(ProviderError):
    """Timeout while communicating with the weather provider."""


class ProviderConnectionError(ProviderError):
    """Network connection to the weather provider failed."""


class ProviderResponseError(ProviderError):
    """HTTP response error from the weather provider."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


class TalkClientError(WeatherBotError):
    """Base error for chat server failures."""


class TalkTimeout(TalkClientError):
    """Timeout while communicating with the chat server."""


class TalkConnectionError(TalkClientError):
    """Network connection to the chat server failed."""


class TalkResponseError(TalkClientError):
    """HTTP response error from the chat server."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
