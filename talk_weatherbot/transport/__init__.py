"""Transport layer for the weather bot.

This package contains all network handling.

Components:
- openweather: HTTP client for the OpenWeather geocoding and One Call APIs
- talk: HTTP client for the Nextcloud Talk OCS API
"""

from .openweather import OpenWeatherClient
from .talk import TalkClient, render_message

__all__ = [
    "OpenWeatherClient",
    "TalkClient",
    "render_message",
]
