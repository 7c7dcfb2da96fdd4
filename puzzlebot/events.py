"""Parse Slack Events API payloads into bot commands."""
import re
from dataclasses import dataclass
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ValidationError

MENTION_RE = re.compile(r"<@[A-Z0-9]+(?:\|[^>]*)?>")
# Plain channel `message` events also arrive for mentions; only the mention is a command
COMMAND_EVENT_TYPE = "app_mention"


class UrlVerification(BaseModel):
    type: Literal["url_verification"]
    challenge: str


class MessageEvent(BaseModel):
    type: str
    channel: Optional[str] = None
    text: Optional[str] = None
    subtype: Optional[str] = None
    bot_id: Optional[str] = None


class EventCallback(BaseModel):
    type: Literal["event_callback"]
    event: MessageEvent


@dataclass(frozen=True)
class Challenge:
    challenge: str


@dataclass(frozen=True)
class ChatCommand:
    channel: str
    text: str


def strip_mentions(text: str) -> str:
    return MENTION_RE.sub(" ", text).strip()


def parse_event(payload: Any) -> Union[Challenge, ChatCommand, None]:
    """
    Turn a raw payload into a Challenge, a ChatCommand, or None when it is
    not a text message addressed to the bot.
    """
    if not isinstance(payload, dict):
        return None

    kind = payload.get("type")
    if kind == "url_verification":
        try:
            return Challenge(UrlVerification.model_validate(payload).challenge)
        except ValidationError:
            return None

    if kind != "event_callback":
        return None
    try:
        event = EventCallback.model_validate(payload).event
    except ValidationError:
        return None

    # Ignore edits, joins and our own posts
    if event.type != COMMAND_EVENT_TYPE or event.subtype or event.bot_id:
        return None
    if not event.channel or event.text is None:
        return None

    text = strip_mentions(event.text)
    if not text:
        return None
    return ChatCommand(channel=event.channel, text=text)
