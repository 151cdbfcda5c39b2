"""Data structures shared by the parser, the generator and the bot.

Weather payloads are mapped from the OpenWeather One Call API:
https://openweathermap.org/api/one-call-3
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Final


class Intent(Enum):
    """Classified purpose of an utterance."""

    NONE = "none"
    HELP = "help"
    WEATHER_TODAY = "weather.today"
    WEATHER_FORECAST = "weather.forecast"


@dataclass(frozen=True)
class MessageEntities:
    """Named values extracted from an utterance."""

    location: str | None = None


@dataclass(frozen=True)
class ParsedMessage:
    """Result of parsing a single chat message.

    Attributes:
        utterance: Message text with the bot handle removed (or the raw text
            if the bot was not addressed).
        intent: Classified intent.
        entities: Extracted entities.
    """

    utterance: str
    intent: Intent
    entities: MessageEntities = field(default_factory=MessageEntities)


@dataclass(frozen=True)
class Units:
    """Unit labels of one OpenWeather unit system."""

    temperature: str
    speed: str
    pressure: str = "hPa"
    humidity: str = "%"
    clouds: str = "%"
    visibility: str = "m"


UNITS: Final = MappingProxyType(
    {
        "metric": Units(temperature="°C", speed="m/s"),
        "imperial": Units(temperature="°F", speed="mph"),
        "standard": Units(temperature="K", speed="m/s"),
    }
)


@dataclass(frozen=True)
class CurrentConditions:
    """Current weather at a location."""

    description: str
    icon: str
    temp: float | None
    felt_temp: float | None
    wind_speed: float | None


@dataclass(frozen=True)
class DailyForecast:
    """Forecast for a single day.

    Attributes:
        date: Unix timestamp (seconds) of the forecast day.
        description: Condition text in the requested language.
        icon: OpenWeather icon code (e.g., "10d").
        min_temp: Daily minimum.
        max_temp: Daily maximum.
        morning_temp: Morning temperature.
        day_temp: Midday temperature.
        evening_temp: Evening temperature.
        night_temp: Night temperature.
    """

    date: int
    description: str
    icon: str
    min_temp: float | None
    max_temp: float | None
    morning_temp: float | None = None
    day_temp: float | None = None
    evening_temp: float | None = None
    night_temp: float | None = None


@dataclass(frozen=True)
class MessageProperties:
    """Weather payload prepared for rendering a single reply.

    Attributes:
        location: Human-readable location label (e.g., "London, GB").
        current: Current conditions, if requested.
        daily: Daily forecasts, first entry is today.
        timezone: IANA time zone of the location, None means UTC.
    """

    location: str
    current: CurrentConditions | None = None
    daily: list[DailyForecast] = field(default_factory=lambda: list[DailyForecast]())
    timezone: str | None = None

    @classmethod
    def from_one_call(
        cls,
        location: str,
        payload: dict[str, Any],
    ) -> MessageProperties:
        """Create MessageProperties from a One Call API response.

        Temperatures are rounded while mapping. Missing values stay None.

        Args:
            location: Location label to show in the reply.
            payload: Decoded One Call response body.

        Returns:
            MessageProperties populated from the response.
        """
        current = None
        raw_current = payload.get("current")
        if raw_current:
            condition = _first_condition(raw_current)
            current = CurrentConditions(
                description=condition.get("description", ""),
                icon=condition.get("icon", ""),
                temp=_round_optional(raw_current.get("temp")),
                felt_temp=_round_optional(raw_current.get("feels_like")),
                wind_speed=raw_current.get("wind_speed"),
            )

        daily: list[DailyForecast] = []
        for day in payload.get("daily") or []:
            condition = _first_condition(day)
            temp = day.get("temp") or {}
            daily.append(
                DailyForecast(
                    date=day.get("dt", 0),
                    description=condition.get("description", ""),
                    icon=condition.get("icon", ""),
                    min_temp=_round_optional(temp.get("min")),
                    max_temp=_round_optional(temp.get("max")),
                    morning_temp=_round_optional(temp.get("morn")),
                    day_temp=_round_optional(temp.get("day")),
                    evening_temp=_round_optional(temp.get("eve")),
                    night_temp=_round_optional(temp.get("night")),
                )
            )

        return cls(
            location=location,
            current=current,
            daily=daily,
            timezone=payload.get("timezone"),
        )


@dataclass(frozen=True)
class UserInfo:
    """Chat user as needed for welcome messages."""

    user_name: str
    display_name: str


class ConversationType(Enum):
    """Nextcloud Talk conversation types."""

    ONE_TO_ONE = 1
    GROUP = 2
    PUBLIC = 3
    CHANGELOG = 4


@dataclass(frozen=True)
class Conversation:
    """A chat conversation the bot is a member of.

    Attributes:
        token: Conversation token used for all further requests.
        type: Conversation type.
        display_name: Conversation name shown in clients.
        participants: Mapping of user name to display name.
        last_message_id: ID of the newest message at fetch time.
    """

    token: str
    type: ConversationType
    display_name: str = ""
    participants: dict[str, str] = field(default_factory=lambda: {})
    last_message_id: int = 0


@dataclass(frozen=True)
class InboundMessage:
    """Normalized chat message delivered by the chat gateway.

    Attributes:
        text: Message text with mentions rendered as "@<user name>".
        token: Token of the conversation the message was posted in.
        actor_id: User name of the author.
        message_id: Server-side message ID.
        message_type: "comment" for user messages, "system" etc. otherwise.
    """

    text: str
    token: str
    actor_id: str | None = None
    message_id: int | None = None
    message_type: str = "comment"


def round_temperature(value: float) -> int:
    """Round to the nearest integer, halves rounding up (-9.5 -> -9)."""
    return math.floor(value + 0.5)


def _round_optional(value: float | None) -> int | None:
    if value is None:
        return None
    return round_temperature(value)


def _first_condition(entry: dict[str, Any]) -> dict[str, Any]:
    """Return the primary weather condition of a One Call entry."""
    conditions = entry.get("weather") or []
    if not conditions:
        return {}
    result: dict[str, Any] = conditions[0]
    return result
