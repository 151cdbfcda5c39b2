"""Emoji glyphs for OpenWeather icon codes.

Icon codes are documented at https://openweathermap.org/weather-conditions.
The trailing letter marks the day (``d``) or night (``n``) variant.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final

FALLBACK_ICON: Final = "🌈"

WEATHER_ICONS: Final = MappingProxyType(
    {
        # clear sky
        "01d": "☀️",
        "01n": "🌌",
        # few clouds
        "02d": "⛅",
        "02n": "☁️",
        # scattered clouds
        "03d": "☁️",
        "03n": "☁️",
        # broken clouds
        "04d": "☁️",
        "04n": "☁️",
        # shower rain
        "09d": "🌧️",
        "09n": "🌧️",
        # rain
        "10d": "🌦️",
        "10n": "🌦️",
        # thunderstorm
        "11d": "🌩️",
        "11n": "🌩️",
        # snow
        "13d": "❄️",
        "13n": "❄️",
        # mist
        "50d": "🌫",
        "50n": "🌫",
    }
)


def get_weather_icon(icon: str | None) -> str:
    """Return the emoji for an icon code, or the rainbow for unknown codes."""
    if not icon:
        return FALLBACK_ICON
    return WEATHER_ICONS.get(icon, FALLBACK_ICON)
