"""Process entry point: ``python -m talk_weatherbot``."""

from __future__ import annotations

import asyncio
import logging
import sys

import aiohttp

from .bot import WeatherBot
from .config import Settings, load_settings
from .errors import ConfigurationError, TalkClientError
from .service import WeatherBotService
from .transport import OpenWeatherClient, TalkClient

_LOGGER = logging.getLogger(__name__)


async def run(settings: Settings) -> None:
    """Run the bot until cancelled."""
    async with aiohttp.ClientSession() as session:
        talk = TalkClient(
            session,
            settings.nextcloud_uri,
            settings.nextcloud_user,
            settings.nextcloud_password,
        )
        weather = OpenWeatherClient(session, settings.open_weather_api_key)
        service = WeatherBotService(
            talk,
            WeatherBot(talk, weather),
            conversation_poll_interval=settings.conversation_poll_interval,
        )

        await service.start()
        try:
            await asyncio.Event().wait()
        finally:
            await service.close()


def main() -> int:
    """Load settings, configure logging and run the bot."""
    try:
        settings = load_settings()
    except ConfigurationError as err:
        logging.basicConfig(level=logging.ERROR)
        _LOGGER.error("Invalid configuration: %s", err)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        _LOGGER.info("Interrupted, shutting down")
    except TalkClientError as err:
        _LOGGER.error("Could not connect to the chat server: %s", err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
