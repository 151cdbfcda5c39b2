"""Nextcloud Talk bot answering weather questions in German."""

__version__ = "0.1.0"

from .bot import WeatherBot
from .errors import (
    ConfigurationError,
    LocationNotFoundError,
    ProviderConnectionError,
    ProviderError,
    ProviderResponseError,
    ProviderTimeout,
    TalkClientError,
    TalkConnectionError,
    TalkResponseError,
    TalkTimeout,
    WeatherBotError,
)
from .generator import MessageGenerator
from .models import (
    Conversation,
    ConversationType,
    CurrentConditions,
    DailyForecast,
    InboundMessage,
    Intent,
    MessageEntities,
    MessageProperties,
    ParsedMessage,
    UserInfo,
)
from .parser import MessageParser

__all__ = [
    "ConfigurationError",
    "Conversation",
    "ConversationType",
    "CurrentConditions",
    "DailyForecast",
    "InboundMessage",
    "Intent",
    "LocationNotFoundError",
    "MessageEntities",
    "MessageGenerator",
    "MessageParser",
    "MessageProperties",
    "ParsedMessage",
    "ProviderConnectionError",
    "ProviderError",
    "ProviderResponseError",
    "ProviderTimeout",
    "TalkClientError",
    "TalkConnectionError",
    "TalkResponseError",
    "TalkTimeout",
    "UserInfo",
    "WeatherBot",
    "WeatherBotError",
    "__version__",
]
