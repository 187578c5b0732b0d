"""Chat channel implementations."""

from hypercast.channels.base import BaseChannel
from hypercast.channels.telegram import TelegramChannel

__all__ = ["BaseChannel", "TelegramChannel"]
