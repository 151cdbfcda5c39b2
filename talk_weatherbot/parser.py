"""Intent and entity extraction for chat messages.

The grammar is a short list of rules evaluated in order; the first rule
that matches decides the intent:

1. help      - empty message, or a message starting with the word "hilfe"
2. today     - the word "heute", optionally followed by "in"; the location
               is everything after the marker
3. forecast  - anything else; a leading "in" is not part of the location

A rule that would yield an empty location yields HELP instead. All matching
is case-insensitive. The parser is pure: no I/O, no side effects.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Final

from .models import Intent, MessageEntities, ParsedMessage

_HELP_PATTERN: Final = re.compile(r"^hilfe\b", re.IGNORECASE)
_TODAY_PATTERN: Final = re.compile(
    r"\bheute\b(?:\s+in\b)?(?P<location>.*)$", re.IGNORECASE | re.DOTALL
)
_LEADING_IN_PATTERN: Final = re.compile(r"^in\b", re.IGNORECASE)

_Rule = Callable[[str], ParsedMessage | None]


def _help_rule(utterance: str) -> ParsedMessage | None:
    if not utterance or _HELP_PATTERN.match(utterance):
        return ParsedMessage(utterance=utterance, intent=Intent.HELP)
    return None


def _today_rule(utterance: str) -> ParsedMessage | None:
    match = _TODAY_PATTERN.search(utterance)
    if match is None:
        return None
    return _with_location(utterance, Intent.WEATHER_TODAY, match.group("location"))


def _forecast_rule(utterance: str) -> ParsedMessage:
    location = _LEADING_IN_PATTERN.sub("", utterance, count=1)
    return _with_location(utterance, Intent.WEATHER_FORECAST, location)


def _with_location(utterance: str, intent: Intent, location: str) -> ParsedMessage:
    location = location.strip()
    if not location:
        return ParsedMessage(utterance=utterance, intent=Intent.HELP)
    return ParsedMessage(
        utterance=utterance,
        intent=intent,
        entities=MessageEntities(location=location),
    )


# Evaluated in order; the forecast rule is the fallback.
RULES: Final[tuple[_Rule, ...]] = (_help_rule, _today_rule)


class MessageParser:
    """Extracts the intent and entities from chat messages.

    Usage:
        parser = MessageParser("@wetter")
        parser.parse("@wetter heute in London")
        # ParsedMessage(utterance="heute in London",
        #               intent=Intent.WEATHER_TODAY,
        #               entities=MessageEntities(location="London"))
    """

    def __init__(self, bot_handle: str) -> None:
        """Initialize parser.

        Args:
            bot_handle: Text that addresses the bot in a message
                (e.g., "@wetter"). Messages without it are ignored.
        """
        self.bot_handle = bot_handle

    def parse(self, text: str) -> ParsedMessage:
        """Identify the intent of a message and extract its entities."""
        if not self.bot_handle or self.bot_handle not in text:
            return ParsedMessage(utterance=text, intent=Intent.NONE)

        utterance = text.replace(self.bot_handle, "", 1).strip()
        for rule in RULES:
            result = rule(utterance)
            if result is not None:
                return result
        return _forecast_rule(utterance)
