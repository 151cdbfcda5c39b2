"""Conversation membership and message polling for the weather bot.

This module keeps the bot present in its conversations. It handles:
- Joining every conversation except the changelog
- Leaving conversations where the bot is the only member
- Greeting conversations that appear while the bot is running
- Long-polling each joined conversation for new messages
- Dispatching every message to the bot in its own task
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from .errors import TalkClientError, TalkResponseError
from .models import Conversation, ConversationType, InboundMessage

if TYPE_CHECKING:
    from .bot import WeatherBot
    from .transport.talk import TalkClient

_LOGGER = logging.getLogger(__name__)


class WeatherBotService:
    """Connects a WeatherBot to the conversations of its chat account.

    Usage:
        service = WeatherBotService(client, bot)
        await service.start()
        ...
        await service.close()
    """

    def __init__(
        self,
        client: TalkClient,
        bot: WeatherBot,
        *,
        conversation_poll_interval: float = 30.0,
        retry_base_delay: float = 5.0,
        retry_max_delay: float = 60.0,
    ) -> None:
        """Initialize service.

        Args:
            client: Chat server client of the bot account
            bot: Bot handling messages and welcomes
            conversation_poll_interval: Conversation list refresh interval (seconds)
            retry_base_delay: Base retry delay after a failed poll (seconds)
            retry_max_delay: Maximum retry delay (seconds)
        """
        self._client = client
        self._bot = bot
        self._conversation_poll_interval = conversation_poll_interval
        self._retry_base_delay = retry_base_delay
        self._retry_max_delay = retry_max_delay

        self._listeners: dict[str, asyncio.Task[None]] = {}
        self._message_tasks: set[asyncio.Task[None]] = set()
        self._poll_task: asyncio.Task[None] | None = None

    @property
    def conversation_tokens(self) -> set[str]:
        """Tokens of the conversations currently listened to."""
        return set(self._listeners)

    # -------------------------------------------------------------------------
    # Public API: Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Join the existing conversations and start polling.

        Conversations found at startup are not greeted.
        """
        display_name = await self._client.fetch_user()
        _LOGGER.info("Logged in as %s (%s)", self._client.user_name, display_name)

        await self.sync_conversations(welcome=False)
        self._poll_task = asyncio.create_task(self._poll_conversations())

    async def close(self) -> None:
        """Cancel all polling and message tasks."""
        _LOGGER.info("Closing service")
        tasks: list[asyncio.Task[None]] = [
            *self._listeners.values(),
            *self._message_tasks,
        ]
        if self._poll_task is not None:
            tasks.append(self._poll_task)
            self._poll_task = None

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._listeners.clear()
        self._message_tasks.clear()

    # -------------------------------------------------------------------------
    # Conversation membership
    # -------------------------------------------------------------------------

    async def sync_conversations(self, *, welcome: bool = True) -> None:
        """Bring the listened conversations in line with the server.

        Args:
            welcome: Greet conversations that were not known before.
        """
        conversations = await self._client.fetch_conversations()
        current: set[str] = set()

        for conversation in conversations:
            if conversation.type is ConversationType.CHANGELOG:
                continue
            current.add(conversation.token)
            if conversation.token in self._listeners:
                continue

            try:
                await self._add_conversation(conversation, welcome=welcome)
            except TalkClientError as err:
                _LOGGER.warning(
                    "[%s] Failed to join conversation: %s", conversation.token, err
                )

        for token in set(self._listeners) - current:
            _LOGGER.info("[%s] Conversation is gone, stop listening", token)
            self._listeners.pop(token).cancel()

    async def _add_conversation(self, conversation: Conversation, *, welcome: bool) -> None:
        participants = await self._client.fetch_participants(conversation.token)
        conversation = replace(conversation, participants=participants)

        if not set(participants) - {self._client.user_name}:
            _LOGGER.info(
                "[%s] Leaving conversation: bot is the only member", conversation.token
            )
            await self._client.leave_conversation(conversation.token)
            return

        await self._client.join_conversation(conversation.token)
        _LOGGER.info(
            "[%s] Joined conversation %r", conversation.token, conversation.display_name
        )
        self._listeners[conversation.token] = asyncio.create_task(
            self._listen(conversation)
        )

        if welcome:
            await self._bot.handle_new_conversation(conversation)

    async def _poll_conversations(self) -> None:
        while True:
            await asyncio.sleep(self._conversation_poll_interval)
            try:
                await self.sync_conversations(welcome=True)
            except TalkClientError as err:
                _LOGGER.warning("Failed to refresh conversations: %s", err)

    # -------------------------------------------------------------------------
    # Message polling
    # -------------------------------------------------------------------------

    async def _listen(self, conversation: Conversation) -> None:
        token = conversation.token
        last_known_id = conversation.last_message_id
        retry_attempts = 0

        while True:
            try:
                messages = await self._client.receive_messages(token, last_known_id)
            except TalkResponseError as err:
                if err.status == 404:
                    _LOGGER.info("[%s] Conversation not found, stop listening", token)
                    self._listeners.pop(token, None)
                    return
                retry_attempts += 1
                await self._backoff(token, retry_attempts, err)
                continue
            except TalkClientError as err:
                retry_attempts += 1
                await self._backoff(token, retry_attempts, err)
                continue

            retry_attempts = 0
            for message in messages:
                if message.message_id is not None:
                    last_known_id = max(last_known_id, message.message_id)
                if self._should_handle(message):
                    self._dispatch(message)

    def _should_handle(self, message: InboundMessage) -> bool:
        if message.message_type != "comment":
            return False
        return message.actor_id != self._client.user_name

    def _dispatch(self, message: InboundMessage) -> None:
        task = asyncio.create_task(
            self._bot.handle_message(message), name=message.token
        )
        self._message_tasks.add(task)
        task.add_done_callback(self._message_done)

    def _message_done(self, task: asyncio.Task[None]) -> None:
        self._message_tasks.discard(task)
        if task.cancelled():
            return
        err = task.exception()
        if err is not None:
            _LOGGER.error(
                "[%s] Message handling failed: %s", task.get_name(), err, exc_info=err
            )

    async def _backoff(self, token: str, attempts: int, err: Exception) -> None:
        delay = min(
            self._retry_base_delay * (2 ** (attempts - 1)),
            self._retry_max_delay,
        )
        _LOGGER.warning(
            "[%s] Message poll failed (%s), retrying in %.0fs", token, err, delay
        )
        await asyncio.sleep(delay)
