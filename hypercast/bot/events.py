"""Events exchanged between chat channels and the bot dispatcher."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from hypercast.protocol.messages import CastId


@dataclass(kw_only=True)
class InboundEvent:
    """Something a user did in a chat."""

    channel: str          # Source channel (telegram, ...)
    sender_id: str        # User identifier
    chat_id: str          # Chat/conversation identifier
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def session_key(self) -> str:
        """Conversation identity used to key pending actions."""
        return f"{self.channel}:{self.chat_id}"


@dataclass(kw_only=True)
class CommandEvent(InboundEvent):
    """A ``/command`` with its (possibly empty) argument."""

    command: str
    argument: str = ""


@dataclass(kw_only=True)
class CallbackEvent(InboundEvent):
    """A button press carrying a callback token."""

    data: str
    message_id: int | None = None  # Message the button belongs to


@dataclass(kw_only=True)
class TextEvent(InboundEvent):
    """Free text that is not a command."""

    text: str
    message_id: int | None = None


class KeyboardState(str, Enum):
    """Which variant of the cast keyboard to show."""

    DEFAULT = "default"
    LIKED = "liked"
    RECASTED = "recasted"


@dataclass
class OutboundMessage:
    """A message to send back, optionally with a cast keyboard."""

    text: str
    cast: CastId | None = None
    keyboard: KeyboardState = KeyboardState.DEFAULT


@dataclass
class BotResponse:
    """Everything the channel should do in answer to one event."""

    messages: list[OutboundMessage] = field(default_factory=list)
    answer: str | None = None                   # Callback toast
    keyboard: KeyboardState | None = None       # Re-render the pressed message's keyboard
    keyboard_cast: CastId | None = None         # Cast the re-rendered keyboard acts on

    def say(
        self,
        text: str,
        cast: CastId | None = None,
        keyboard: KeyboardState = KeyboardState.DEFAULT,
    ) -> "BotResponse":
        self.messages.append(OutboundMessage(text=text, cast=cast, keyboard=keyboard))
        return self

    @property
    def is_empty(self) -> bool:
        return not self.messages and self.answer is None and self.keyboard is None
