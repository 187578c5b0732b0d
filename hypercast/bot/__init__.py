"""Channel-agnostic bot logic."""

from hypercast.bot.dispatcher import BotDispatcher
from hypercast.bot.events import (
    BotResponse,
    CallbackEvent,
    CommandEvent,
    InboundEvent,
    KeyboardState,
    OutboundMessage,
    TextEvent,
)

__all__ = [
    "BotDispatcher",
    "BotResponse",
    "CallbackEvent",
    "CommandEvent",
    "InboundEvent",
    "KeyboardState",
    "OutboundMessage",
    "TextEvent",
]
