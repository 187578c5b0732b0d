"""Base class for chat channels."""

from abc import ABC, abstractmethod

from hypercast.bot.dispatcher import BotDispatcher
from hypercast.bot.events import BotResponse, InboundEvent


class BaseChannel(ABC):
    """Abstract base class for chat channels."""

    name: str = "base"

    def __init__(self, dispatcher: BotDispatcher, allow_from: list[str] | None = None):
        self.dispatcher = dispatcher
        self.allow_from = list(allow_from or [])
        self._running = False

    @abstractmethod
    async def start(self) -> None:
        """Start the channel."""
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Stop the channel."""
        pass

    def is_allowed(self, sender_id: str, username: str | None = None) -> bool:
        """Check the allow-list; an empty list allows everyone."""
        if not self.allow_from:
            return True
        return any(
            sender_id == a or (username and username == a.lstrip("@"))
            for a in self.allow_from
        )

    async def _dispatch(self, event: InboundEvent) -> BotResponse:
        """Hand an event to the dispatcher."""
        return await self.dispatcher.handle(event)
