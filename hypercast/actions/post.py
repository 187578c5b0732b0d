"""Write actions: cast, remove, react, reply and quote.

Every action builds one message, signs it with the context's identity and
submits it once. Errors from signing or submission propagate unchanged;
nothing here retries, since submissions are not idempotent.
"""

import logging
import time
from collections.abc import Callable, Sequence

from hypercast.auth import AuthContext
from hypercast.protocol.codec import build_message
from hypercast.protocol.hub import HubMessage
from hypercast.protocol.messages import (
    CastAdd,
    CastId,
    CastRemove,
    Embed,
    OutboundAction,
    ReactionAdd,
    ReactionRemove,
    ReactionType,
    farcaster_time,
)

logger = logging.getLogger(__name__)


def _as_embed(embed: str | Embed) -> Embed:
    return embed if isinstance(embed, Embed) else Embed.of_url(embed)


def _as_hash(value: bytes | str) -> bytes:
    if isinstance(value, bytes):
        return value
    return CastId.from_hex(0, value).hash


class CastActions:
    """Signed write operations for the account in ``ctx``."""

    def __init__(self, ctx: AuthContext, clock: Callable[[], float] = time.time):
        self.ctx = ctx
        self._clock = clock

    async def submit(self, body: OutboundAction) -> HubMessage:
        """Sign ``body`` with a fresh timestamp and submit it."""
        message = build_message(
            body,
            fid=self.ctx.fid,
            identity=self.ctx.identity,
            network=self.ctx.network,
            timestamp=farcaster_time(self._clock()),
        )
        logger.info(
            "Submitting %s %s for FID %d",
            body.message_type.name,
            message.hash_hex,
            self.ctx.fid,
        )
        return await self.ctx.client.submit(message)

    # -- Casts --------------------------------------------------------------

    async def post(
        self,
        text: str,
        embeds: Sequence[str | Embed] = (),
        mentions: Sequence[int] = (),
        mentions_positions: Sequence[int] = (),
        parent: CastId | None = None,
        parent_url: str | None = None,
    ) -> HubMessage:
        """Publish a cast. ``parent`` makes it a reply, ``parent_url`` a channel cast."""
        body = CastAdd(
            text=text,
            embeds=tuple(_as_embed(e) for e in embeds),
            mentions=tuple(mentions),
            mentions_positions=tuple(mentions_positions),
            parent_cast_id=parent,
            parent_url=parent_url,
        )
        return await self.submit(body)

    async def reply(self, text: str, parent: CastId) -> HubMessage:
        """Reply to ``parent``."""
        return await self.post(text, parent=parent)

    async def quote_cast(self, text: str, target: CastId) -> HubMessage:
        """Publish a cast that embeds ``target``."""
        return await self.post(text, embeds=[Embed.of_cast(target)])

    async def remove(self, target_hash: bytes | str) -> HubMessage:
        """Remove one of our casts by hash."""
        return await self.submit(CastRemove(target_hash=_as_hash(target_hash)))

    # -- Reactions ----------------------------------------------------------

    async def react(self, kind: ReactionType, target: CastId) -> HubMessage:
        return await self.submit(ReactionAdd(type=kind, target=target))

    async def unreact(self, kind: ReactionType, target: CastId) -> HubMessage:
        return await self.submit(ReactionRemove(type=kind, target=target))

    async def like(self, target: CastId) -> HubMessage:
        return await self.react(ReactionType.LIKE, target)

    async def unlike(self, target: CastId) -> HubMessage:
        return await self.unreact(ReactionType.LIKE, target)

    async def recast(self, target: CastId) -> HubMessage:
        return await self.react(ReactionType.RECAST, target)

    async def unrecast(self, target: CastId) -> HubMessage:
        return await self.unreact(ReactionType.RECAST, target)
