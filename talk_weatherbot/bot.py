"""Per-message control flow of the weather bot.

Each inbound message goes through:
    Received -> Parsed -> Ignored | Replying -> Sent

No message produces more than one reply and nothing is retried here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .errors import LocationNotFoundError, ProviderError, TalkClientError
from .generator import LANGUAGE, UNIT_SYSTEM, MessageGenerator
from .models import (
    Conversation,
    ConversationType,
    InboundMessage,
    Intent,
    MessageProperties,
    UserInfo,
)
from .parser import MessageParser

if TYPE_CHECKING:
    from .ports import ChatGateway, WeatherProvider

_LOGGER = logging.getLogger(__name__)


class WeatherBot:
    """Answers weather questions in chat conversations.

    Usage:
        bot = WeatherBot(gateway, provider)
        await bot.handle_message(message)
        await bot.handle_new_conversation(conversation)
    """

    def __init__(
        self,
        gateway: ChatGateway,
        provider: WeatherProvider,
        *,
        parser: MessageParser | None = None,
        generator: MessageGenerator | None = None,
    ) -> None:
        """Initialize bot.

        Args:
            gateway: Chat server used to send replies.
            provider: Weather data source.
            parser: Message parser (default: addressed by "@<bot user name>").
            generator: Message generator (default: German, metric).
        """
        self._gateway = gateway
        self._provider = provider
        self._parser = parser or MessageParser(f"@{gateway.user_name}")
        self._generator = generator or MessageGenerator()

    async def handle_message(self, message: InboundMessage) -> None:
        """Handle an incoming chat message.

        Messages not addressed to the bot are ignored. Every other message
        gets exactly one reply, an error message if the weather lookup fails.
        """
        parsed = self._parser.parse(message.text)

        if parsed.intent is Intent.NONE:
            return

        _LOGGER.debug(
            "[%s] Parsed %s from %r", message.token, parsed.intent.value, parsed.utterance
        )

        if parsed.intent is Intent.HELP or parsed.entities.location is None:
            reply = self._generator.generate_help(self._gateway.user_name)
        else:
            reply = await self._generate_weather_reply(
                message.token, parsed.intent, parsed.entities.location
            )

        await self._send(reply, message.token)

    async def handle_new_conversation(self, conversation: Conversation) -> None:
        """Greet the members of a conversation the bot just joined."""
        bot = UserInfo(
            user_name=self._gateway.user_name,
            display_name=self._gateway.display_name or self._gateway.user_name,
        )
        user = self._other_participant(conversation)

        if conversation.type is ConversationType.ONE_TO_ONE and user is not None:
            reply = self._generator.generate_personal_welcome(bot, user)
        else:
            reply = self._generator.generate_group_welcome(bot)

        _LOGGER.info("[%s] Sending welcome message", conversation.token)
        await self._send(reply, conversation.token)

    async def get_forecast(self, location_name: str) -> MessageProperties:
        """Resolve weather data for a location name.

        Raises:
            LocationNotFoundError: If the geocoder knows no such location.
            ProviderError: If a provider request fails.
        """
        locations = await self._provider.get_coordinates(location_name)
        if not locations:
            raise LocationNotFoundError(location_name)

        location = locations[0]
        weather_data = await self._provider.get_current_weather_data(
            location["lat"], location["lon"], UNIT_SYSTEM, LANGUAGE
        )
        return MessageProperties.from_one_call(_location_label(location), weather_data)

    async def _generate_weather_reply(
        self, token: str, intent: Intent, location_name: str
    ) -> str:
        try:
            properties = await self.get_forecast(location_name)
            if intent is Intent.WEATHER_TODAY:
                return self._generator.generate_current(properties)
            return self._generator.generate_forecast(properties)
        except LocationNotFoundError as err:
            _LOGGER.info("[%s] Unknown location: %s", token, err.location)
            return self._generator.generate_error(str(err))
        except ProviderError as err:
            _LOGGER.warning("[%s] Weather lookup failed: %s", token, err)
            return self._generator.generate_error()
        except Exception:
            # Message tasks must not die; the user still gets a reply.
            _LOGGER.exception("[%s] Unexpected error during weather reply", token)
            return self._generator.generate_error()

    async def _send(self, text: str, token: str) -> None:
        try:
            await self._gateway.send_text(text, token)
        except TalkClientError as err:
            _LOGGER.error("[%s] Failed to send reply: %s", token, err)

    def _other_participant(self, conversation: Conversation) -> UserInfo | None:
        for user_name, display_name in conversation.participants.items():
            if user_name != self._gateway.user_name:
                return UserInfo(user_name=user_name, display_name=display_name or user_name)
        return None


def _location_label(location: dict[str, Any]) -> str:
    """Build "<name>, <country>", preferring the German local name."""
    local_names = location.get("local_names") or {}
    name = local_names.get(LANGUAGE) or location.get("name", "")
    country = location.get("country")
    if country:
        return f"{name}, {country}"
    return name
