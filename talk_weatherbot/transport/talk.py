"""HTTP client for the Nextcloud Talk OCS API.

Endpoints are documented at https://nextcloud-talk.readthedocs.io/.
"""

from __future__ import annotations

import re
from typing import Any, Final

import aiohttp

from ..errors import (
    TalkConnectionError,
    TalkResponseError,
    TalkTimeout,
)
from ..models import Conversation, ConversationType, InboundMessage

ROOM_API: Final = "/ocs/v2.php/apps/spreed/api/v4/room"
CHAT_API: Final = "/ocs/v2.php/apps/spreed/api/v1/chat"
USER_API: Final = "/ocs/v2.php/cloud/user"

# Rich object types rendered as "@<id>" so the parser sees the mention.
MENTION_TYPES: Final = frozenset({"user", "guest", "call", "user-group"})

_PARAMETER_PATTERN: Final = re.compile(r"\{([A-Za-z0-9_-]+)\}")


class TalkClient:
    """HTTP client wrapper for a Nextcloud Talk bot account."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        user: str,
        password: str,
        *,
        poll_timeout: int = 30,
    ) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._user = user
        self._auth = aiohttp.BasicAuth(user, password)
        self._display_name: str | None = None
        self._poll_timeout = poll_timeout

    @property
    def user_name(self) -> str:
        """User name of the bot account."""
        return self._user

    @property
    def display_name(self) -> str:
        """Display name of the bot account (user name until fetched)."""
        return self._display_name or self._user

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    @staticmethod
    def _headers() -> dict[str, str]:
        return {"OCS-APIRequest": "true", "Accept": "application/json"}

    async def _request(
        self,
        method: str,
        path: str,
        what: str,
        *,
        expected: tuple[int, ...] = (200,),
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        timeout: float = 20.0,
    ) -> tuple[int, Any]:
        """Send an OCS request and return status and the "ocs.data" payload."""
        try:
            async with self._session.request(
                method,
                self._url(path),
                params=params,
                json=json,
                headers=self._headers(),
                auth=self._auth,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp:
                if resp.status not in expected:
                    raise TalkResponseError(
                        resp.status, f"{what} failed with status {resp.status}"
                    )
                if resp.status in (204, 304):
                    return resp.status, None
                body = await resp.json()
                if not isinstance(body, dict) or not isinstance(body.get("ocs"), dict):
                    raise TalkResponseError(
                        resp.status, f"{what} returned no OCS envelope"
                    )
                return resp.status, body["ocs"].get("data")
        except TimeoutError as err:
            raise TalkTimeout(f"{what} timed out") from err
        except aiohttp.ClientError as err:
            raise TalkConnectionError(f"{what} failed") from err

    async def fetch_user(self) -> str:
        """Fetch the display name of the bot account."""
        _, data = await self._request("GET", USER_API, "User request")
        data = data or {}
        self._display_name = data.get("displayname") or data.get("display-name")
        return self.display_name

    async def fetch_conversations(self) -> list[Conversation]:
        """Fetch all conversations the bot account is a member of."""
        _, data = await self._request("GET", ROOM_API, "Conversation list request")
        conversations: list[Conversation] = []
        for room in data or []:
            conversation = _parse_conversation(room)
            if conversation is not None:
                conversations.append(conversation)
        return conversations

    async def fetch_participants(self, token: str) -> dict[str, str]:
        """Fetch the users of a conversation as user name -> display name."""
        _, data = await self._request(
            "GET", f"{ROOM_API}/{token}/participants", "Participant request"
        )
        return {
            participant["actorId"]: participant.get("displayName") or participant["actorId"]
            for participant in data or []
            if participant.get("actorType", "users") == "users" and "actorId" in participant
        }

    async def join_conversation(self, token: str) -> None:
        """Join a conversation so its messages can be received."""
        await self._request(
            "POST", f"{ROOM_API}/{token}/participants/active", "Join request"
        )

    async def leave_conversation(self, token: str) -> None:
        """Remove the bot account from a conversation."""
        await self._request(
            "DELETE", f"{ROOM_API}/{token}/participants/self", "Leave request"
        )

    async def send_text(self, text: str, conversation_token: str) -> None:
        """Post a plain text message to a conversation."""
        await self._request(
            "POST",
            f"{CHAT_API}/{conversation_token}",
            "Send request",
            expected=(200, 201),
            json={"message": text},
        )

    async def receive_messages(
        self, token: str, last_known_message_id: int
    ) -> list[InboundMessage]:
        """Wait for messages newer than last_known_message_id.

        Long-polls the chat endpoint. Returns an empty list if nothing
        arrived within the poll timeout.
        """
        status, data = await self._request(
            "GET",
            f"{CHAT_API}/{token}",
            "Message poll",
            expected=(200, 304),
            params={
                "lookIntoFuture": 1,
                "timeout": self._poll_timeout,
                "lastKnownMessageId": last_known_message_id,
                "setReadMarker": 1,
            },
            timeout=self._poll_timeout + 10,
        )
        if status == 304 or not data:
            return []
        return [_parse_message(token, raw) for raw in data]


def render_message(message: str, parameters: Any) -> str:
    """Replace rich object placeholders ("{mention-user1}") with text."""
    if not isinstance(parameters, dict) or not parameters:
        return message

    def replace(match: re.Match[str]) -> str:
        parameter = parameters.get(match.group(1))
        if not isinstance(parameter, dict):
            return match.group(0)
        if parameter.get("type") in MENTION_TYPES and parameter.get("id"):
            return f"@{parameter['id']}"
        return str(parameter.get("name", match.group(0)))

    return _PARAMETER_PATTERN.sub(replace, message)


def _parse_message(token: str, raw: dict[str, Any]) -> InboundMessage:
    return InboundMessage(
        text=render_message(raw.get("message", ""), raw.get("messageParameters")),
        token=raw.get("token", token),
        actor_id=raw.get("actorId"),
        message_id=raw.get("id"),
        message_type=raw.get("messageType", "comment"),
    )


def _parse_conversation(room: dict[str, Any]) -> Conversation | None:
    try:
        conversation_type = ConversationType(room.get("type"))
    except ValueError:
        return None

    last_message = room.get("lastMessage")
    last_message_id = room.get("lastReadMessage", 0)
    if isinstance(last_message, dict) and "id" in last_message:
        last_message_id = last_message["id"]

    return Conversation(
        token=room["token"],
        type=conversation_type,
        display_name=room.get("displayName", ""),
        last_message_id=last_message_id,
    )
