"""Rendering of chat replies.

Every reply is produced from a fixed German template with ``{{NAME}}``
placeholders. Rendering is pure and never raises: values missing from a
partial payload leave their placeholders unfilled, and template lines with
unfilled placeholders are dropped from the reply.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, tzinfo
from typing import Final
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .icons import get_weather_icon
from .models import UNITS, DailyForecast, MessageProperties, UserInfo, round_temperature

LANGUAGE: Final = "de"
UNIT_SYSTEM: Final = "metric"

DEFAULT_ERROR_MESSAGE: Final = (
    "🛰 Das Wetter ist gerade auf Forschungsreise für dich. "
    "Probiere es in ein paar Minuten noch mal."
)

WEEKDAY_ABBREVIATIONS: Final = {
    "de": ("Mo.", "Di.", "Mi.", "Do.", "Fr.", "Sa.", "So."),
}

# Upper bounds (inclusive) in metres per second, Beaufort 1 to 5.
WIND_DESCRIPTIONS: Final = (
    (1.5, "Leiser Zug"),
    (3.5, "Leichte Brise"),
    (5.5, "Schwache Brise"),
    (8.0, "Mäßige Brise"),
    (11.0, "Frische Brise"),
)
STRONG_WIND_DESCRIPTION: Final = "Starker Wind"

HELP_TEMPLATE: Final = (
    "Du möchtest wissen, wie das Wetter ist?\n\n"
    '- Sende "@{{BOT_USER_NAME}} London" um eine Wochenvorhersage für einen '
    "Ort zu erhalten\n"
    '- Sende "@{{BOT_USER_NAME}} heute London" um das aktuelle Wetter für '
    "heute zu erhalten"
)

GROUP_WELCOME_TEMPLATE: Final = (
    "Hallo zusammen, ich bin {{BOT_DISPLAY_NAME}}! 👋\n\n" + HELP_TEMPLATE
)

PERSONAL_WELCOME_TEMPLATE: Final = (
    "Hallo {{USER_DISPLAY_NAME}}, ich bin {{BOT_DISPLAY_NAME}}! 👋\n\n"
    + HELP_TEMPLATE
)

CURRENT_TEMPLATE: Final = (
    "Das Wetter heute in {{LOCATION}}:\n"
    "\n"
    "{{ICON}} {{TEMPERATURE}} {{UNIT}}, {{DESCRIPTION}}\n"
    "Fühlt sich an wie {{FELT_TEMPERATURE}} {{UNIT}}\n"
    "💨 {{WIND}}\n"
    "\n"
    "morgens: {{MORNING_TEMPERATURE}} {{UNIT}}\n"
    "mittags: {{DAY_TEMPERATURE}} {{UNIT}}\n"
    "abends: {{EVENING_TEMPERATURE}} {{UNIT}}\n"
    "nachts: {{NIGHT_TEMPERATURE}} {{UNIT}}"
)

FORECAST_TEMPLATE: Final = (
    "Hier ist das Wetter für die nächsten Tage in {{LOCATION}}:\n\n{{DAILY}}"
)

DAILY_FORECAST_TEMPLATE: Final = (
    "{{DATE}}\t {{ICON}}\t {{MIN_TEMPERATURE}} / {{MAX_TEMPERATURE}}{{UNIT}}"
    "\t {{DESCRIPTION}}"
)

_PLACEHOLDER_PATTERN: Final = re.compile(r"\{\{[A-Z_]+\}\}")


class MessageGenerator:
    """Creates nicely formatted chat messages."""

    def __init__(self, language: str = LANGUAGE, unit_system: str = UNIT_SYSTEM):
        self.language = language
        self.units = UNITS[unit_system]

    def generate_help(self, bot_user_name: str) -> str:
        """Create the usage instructions."""
        return render(HELP_TEMPLATE, {"BOT_USER_NAME": bot_user_name})

    def generate_error(self, message: str | None = None) -> str:
        """Create an error message.

        If no error message is provided, a default message is returned.
        """
        return message or DEFAULT_ERROR_MESSAGE

    def generate_group_welcome(self, bot: UserInfo) -> str:
        """Create the greeting for a group conversation."""
        return render(
            GROUP_WELCOME_TEMPLATE,
            {
                "BOT_DISPLAY_NAME": bot.display_name,
                "BOT_USER_NAME": bot.user_name,
            },
        )

    def generate_personal_welcome(self, bot: UserInfo, user: UserInfo) -> str:
        """Create the greeting for a one-to-one conversation."""
        return render(
            PERSONAL_WELCOME_TEMPLATE,
            {
                "BOT_DISPLAY_NAME": bot.display_name,
                "BOT_USER_NAME": bot.user_name,
                "USER_DISPLAY_NAME": user.display_name,
            },
        )

    def generate_current(self, properties: MessageProperties) -> str:
        """Create the message for today's weather.

        Uses the current conditions and the day-part temperatures of the
        first daily forecast.
        """
        values: dict[str, object | None] = {
            "LOCATION": properties.location,
            "UNIT": self.units.temperature,
        }

        current = properties.current
        if current is not None:
            values.update(
                {
                    "ICON": get_weather_icon(current.icon),
                    "TEMPERATURE": _round_or_none(current.temp),
                    "FELT_TEMPERATURE": _round_or_none(current.felt_temp),
                    "DESCRIPTION": current.description,
                    "WIND": _wind_or_none(current.wind_speed),
                }
            )

        if properties.daily:
            today = properties.daily[0]
            values.update(
                {
                    "MORNING_TEMPERATURE": _round_or_none(today.morning_temp),
                    "DAY_TEMPERATURE": _round_or_none(today.day_temp),
                    "EVENING_TEMPERATURE": _round_or_none(today.evening_temp),
                    "NIGHT_TEMPERATURE": _round_or_none(today.night_temp),
                }
            )

        return render(CURRENT_TEMPLATE, values)

    def generate_forecast(self, properties: MessageProperties) -> str:
        """Create the multi-day forecast message, one line per day."""
        lines = [
            self._generate_daily_forecast(day, properties.timezone)
            for day in properties.daily
        ]
        # Days without min/max render as empty lines.
        lines = [line for line in lines if line]
        return render(
            FORECAST_TEMPLATE,
            {"LOCATION": properties.location, "DAILY": "\n".join(lines)},
        )

    def _generate_daily_forecast(self, day: DailyForecast, timezone: str | None) -> str:
        return render(
            DAILY_FORECAST_TEMPLATE,
            {
                "DATE": format_date(day.date, self.language, timezone),
                "ICON": get_weather_icon(day.icon),
                "MIN_TEMPERATURE": _round_or_none(day.min_temp),
                "MAX_TEMPERATURE": _round_or_none(day.max_temp),
                "UNIT": self.units.temperature,
                "DESCRIPTION": day.description,
            },
        )


def render(template: str, values: dict[str, object | None]) -> str:
    """Substitute placeholders and drop lines that stay incomplete."""
    text = template
    for name, value in values.items():
        if value is None:
            continue
        text = text.replace("{{" + name + "}}", str(value))

    lines = [
        line for line in text.split("\n") if not _PLACEHOLDER_PATTERN.search(line)
    ]
    return "\n".join(lines).rstrip("\n")


def get_wind_description(speed: float) -> str:
    """Describe a wind speed (m/s) in words."""
    for upper_bound, description in WIND_DESCRIPTIONS:
        if speed <= upper_bound:
            return description
    return STRONG_WIND_DESCRIPTION


def format_date(
    timestamp: int | float,
    language: str = LANGUAGE,
    timezone: str | tzinfo | None = None,
) -> str:
    """Format a Unix timestamp as weekday and day of month (e.g., "Fr., 13.").

    Args:
        timestamp: Unix timestamp in seconds.
        language: Language of the weekday abbreviation.
        timezone: Time zone name or tzinfo; None or unknown names use UTC.
    """
    weekdays = WEEKDAY_ABBREVIATIONS.get(language, WEEKDAY_ABBREVIATIONS[LANGUAGE])
    date = datetime.fromtimestamp(timestamp, _resolve_timezone(timezone))
    return f"{weekdays[date.weekday()]}, {date.day}."


def _resolve_timezone(timezone: str | tzinfo | None) -> tzinfo:
    if timezone is None:
        return UTC
    if isinstance(timezone, tzinfo):
        return timezone
    try:
        return ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        return UTC


def _round_or_none(value: float | None) -> int | None:
    if value is None:
        return None
    return round_temperature(value)


def _wind_or_none(speed: float | None) -> str | None:
    if speed is None:
        return None
    return get_wind_description(speed)
