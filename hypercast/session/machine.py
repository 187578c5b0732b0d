"""Per-conversation state for multi-step actions (reply, quote).

Each conversation is in one of three states::

    IDLE ──begin reply──▶ AWAITING_REPLY_TEXT ──text──▶ IDLE
    IDLE ──begin quote──▶ AWAITING_QUOTE_TEXT ──text──▶ IDLE
    any  ──cancel───────▶ IDLE

Beginning a new reply or quote while one is pending replaces it silently.
Text that arrives while idle is not ours to handle. The slot is cleared
before the action runs, so a failed submission is reported once and never
retried with the same text.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any

from hypercast.actions import CastActions
from hypercast.errors import HypercastError
from hypercast.protocol.hub import HubMessage
from hypercast.protocol.messages import CastId

logger = logging.getLogger(__name__)


class PendingKind(str, Enum):
    REPLY = "reply"
    QUOTE = "quote"


class SessionState(str, Enum):
    IDLE = "idle"
    AWAITING_REPLY_TEXT = "awaiting_reply_text"
    AWAITING_QUOTE_TEXT = "awaiting_quote_text"


@dataclass(frozen=True)
class PendingAction:
    """A reply or quote waiting for the user's text."""

    kind: PendingKind
    target: CastId
    origin_message_ref: Any = None  # e.g. the chat message id showing the cast


@dataclass
class ResolveOutcome:
    """Result of resolving a pending action with the user's text."""

    pending: PendingAction
    text: str
    message: HubMessage | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SessionStore:
    """
    Pending-action slots keyed by conversation.

    Owned by the serving component. Handlers hold :meth:`lock` for a
    conversation while processing one of its events, which makes them the
    only writer of that conversation's slot.
    """

    def __init__(self):
        self._pending: dict[str, PendingAction] = {}
        # key -> [lock, holders + waiters]; dropped when the count hits zero
        self._locks: dict[str, list] = {}

    @asynccontextmanager
    async def lock(self, key: str):
        """Hold the lock serializing events of one conversation."""
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    @property
    def active_locks(self) -> int:
        """Conversations currently holding or waiting on their lock."""
        return len(self._locks)

    def get(self, key: str) -> PendingAction | None:
        return self._pending.get(key)

    def set(self, key: str, action: PendingAction) -> PendingAction | None:
        """Store ``action`` and return whatever it replaced."""
        previous = self._pending.get(key)
        self._pending[key] = action
        return previous

    def pop(self, key: str) -> PendingAction | None:
        return self._pending.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)


class SessionMachine:
    """Drives reply/quote flows on top of :class:`CastActions`."""

    def __init__(self, actions: CastActions, store: SessionStore | None = None):
        self.actions = actions
        self.store = store if store is not None else SessionStore()

    def state(self, key: str) -> SessionState:
        pending = self.store.get(key)
        if pending is None:
            return SessionState.IDLE
        if pending.kind == PendingKind.REPLY:
            return SessionState.AWAITING_REPLY_TEXT
        return SessionState.AWAITING_QUOTE_TEXT

    def pending(self, key: str) -> PendingAction | None:
        return self.store.get(key)

    def begin(
        self,
        key: str,
        kind: PendingKind,
        target: CastId,
        origin_message_ref: Any = None,
    ) -> PendingAction:
        """Start waiting for text for ``kind`` on ``target``."""
        action = PendingAction(
            kind=PendingKind(kind), target=target, origin_message_ref=origin_message_ref
        )
        replaced = self.store.set(key, action)
        if replaced is not None:
            logger.debug("Session %s: pending %s replaced by %s", key, replaced.kind.value, kind)
        return action

    def begin_reply(self, key: str, target: CastId, origin_message_ref: Any = None) -> PendingAction:
        return self.begin(key, PendingKind.REPLY, target, origin_message_ref)

    def begin_quote(self, key: str, target: CastId, origin_message_ref: Any = None) -> PendingAction:
        return self.begin(key, PendingKind.QUOTE, target, origin_message_ref)

    def cancel(self, key: str) -> bool:
        """Drop the pending action, if any. Returns whether one existed."""
        return self.store.pop(key) is not None

    async def resolve_text(self, key: str, text: str) -> ResolveOutcome | None:
        """Complete the pending action of ``key`` with ``text``.

        Returns ``None`` when nothing is pending (or the text is blank), in
        which case no action is taken. Otherwise the slot is cleared and the
        outcome carries either the accepted message or the error.
        """
        text = text.strip()
        if not text or key not in self.store:
            return None

        pending = self.store.pop(key)
        outcome = ResolveOutcome(pending=pending, text=text)
        try:
            if pending.kind == PendingKind.REPLY:
                outcome.message = await self.actions.reply(text, pending.target)
            else:
                outcome.message = await self.actions.quote_cast(text, pending.target)
        except HypercastError as e:
            logger.warning("Session %s: %s failed: %s", key, pending.kind.value, e)
            outcome.error = e
        except Exception as e:
            logger.exception("Session %s: unexpected error in %s", key, pending.kind.value)
            outcome.error = e
        return outcome
