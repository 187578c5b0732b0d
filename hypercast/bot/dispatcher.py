"""Bot dispatcher - turns chat events into actions and replies.

The dispatcher is channel-agnostic: channels convert platform updates into
:mod:`hypercast.bot.events` and render the returned :class:`BotResponse`.
Every event produces a response; errors are converted into text here and
never propagate to the channel.
"""

import logging
from collections.abc import Awaitable, Callable

from hypercast.actions import CastActions
from hypercast.auth import AuthContext
from hypercast.bot.events import (
    BotResponse,
    CallbackEvent,
    CommandEvent,
    InboundEvent,
    KeyboardState,
    TextEvent,
)
from hypercast.errors import HypercastError
from hypercast.protocol.messages import CastId
from hypercast.session import (
    CastAction,
    CastCallback,
    PendingKind,
    SessionMachine,
    UnknownCallback,
    decode_callback,
)
from hypercast.view import (
    Profile,
    format_cast,
    format_node_info,
    format_profile,
    get_feed,
    get_profile,
    get_replies,
)

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "👋 HyperSnap Farcaster Client\n\n"
    "Commands:\n"
    "/post <text> - publish a cast\n"
    "/feed [fid] - view recent casts (default: your FID)\n"
    "/profile [fid] - show a profile\n"
    "/node - node status\n"
    "/whoami - show your FID and signer key\n"
    "/delete <hash> - remove one of your casts\n"
    "/cancel - cancel pending reply or quote"
)


class BotDispatcher:
    """Routes commands, button presses and text for one signing account."""

    def __init__(
        self,
        auth: AuthContext,
        actions: CastActions | None = None,
        sessions: SessionMachine | None = None,
        feed_limit: int = 5,
        thread_limit: int = 5,
    ):
        self.auth = auth
        self.actions = actions or CastActions(auth)
        self.sessions = sessions or SessionMachine(self.actions)
        self.feed_limit = feed_limit
        self.thread_limit = thread_limit

        self._commands: dict[str, Callable[[CommandEvent], Awaitable[BotResponse]]] = {
            "start": self._cmd_help,
            "help": self._cmd_help,
            "post": self._cmd_post,
            "feed": self._cmd_feed,
            "profile": self._cmd_profile,
            "node": self._cmd_node,
            "whoami": self._cmd_whoami,
            "delete": self._cmd_delete,
            "cancel": self._cmd_cancel,
        }
        self._callbacks: dict[CastAction, Callable[[CallbackEvent, CastCallback, CastId], Awaitable[BotResponse]]] = {
            CastAction.LIKE: self._cb_like,
            CastAction.UNLIKE: self._cb_unlike,
            CastAction.RECAST: self._cb_recast,
            CastAction.UNRECAST: self._cb_unrecast,
            CastAction.REPLY: self._cb_reply,
            CastAction.QUOTE: self._cb_quote,
            CastAction.THREAD: self._cb_thread,
        }

    @property
    def commands(self) -> list[str]:
        return list(self._commands)

    async def handle(self, event: InboundEvent) -> BotResponse:
        """Process one event to completion under its conversation's lock."""
        async with self.sessions.store.lock(event.session_key):
            try:
                if isinstance(event, CommandEvent):
                    return await self.handle_command(event)
                if isinstance(event, CallbackEvent):
                    return await self.handle_callback(event)
                if isinstance(event, TextEvent):
                    return await self.handle_text(event)
                raise TypeError(f"Unsupported event: {type(event).__name__}")
            except HypercastError as e:
                return self._error_response(event, str(e))
            except Exception:
                logger.exception("Error handling %s from %s", type(event).__name__, event.session_key)
                return self._error_response(event, "Unexpected error, see logs.")

    @staticmethod
    def _error_response(event: InboundEvent, message: str) -> BotResponse:
        if isinstance(event, CallbackEvent):
            return BotResponse(answer=f"❌ {message}")
        return BotResponse().say(f"❌ Error: {message}")

    # -- Commands -------------------------------------------------------------

    async def handle_command(self, event: CommandEvent) -> BotResponse:
        handler = self._commands.get(event.command.lower())
        if handler is None:
            return BotResponse().say("Unknown command. Send /help for the list.")
        return await handler(event)

    def _parse_fid(self, argument: str) -> int | None:
        argument = argument.strip()
        if not argument:
            return self.auth.fid
        if argument.isascii() and argument.isdigit():
            return int(argument)
        return None

    async def _try_profile(self, fid: int) -> Profile | None:
        try:
            return await get_profile(self.auth.client, fid)
        except HypercastError as e:
            logger.debug("Profile lookup for FID %d failed: %s", fid, e)
            return None

    async def _cmd_help(self, event: CommandEvent) -> BotResponse:
        return BotResponse().say(HELP_TEXT)

    async def _cmd_post(self, event: CommandEvent) -> BotResponse:
        text = event.argument.strip()
        if not text:
            return BotResponse().say("Usage: /post <your cast text>")
        try:
            msg = await self.actions.post(text)
        except HypercastError as e:
            return BotResponse().say(f"❌ Failed to post: {e}")
        return BotResponse().say(f"✅ Cast submitted!\nHash: {msg.hash}")

    async def _cmd_feed(self, event: CommandEvent) -> BotResponse:
        fid = self._parse_fid(event.argument)
        if fid is None:
            return BotResponse().say("Usage: /feed [fid]")

        casts = await get_feed(self.auth.client, fid, self.feed_limit)
        if not casts:
            return BotResponse().say(f"No casts found for FID {fid}.")

        response = BotResponse()
        profile = await self._try_profile(fid)
        if profile:
            response.say(format_profile(profile))
        for cast in casts:
            response.say(format_cast(cast, profile), cast=cast.cast_id)
        return response

    async def _cmd_profile(self, event: CommandEvent) -> BotResponse:
        fid = self._parse_fid(event.argument)
        if fid is None:
            return BotResponse().say("Usage: /profile [fid]")
        profile = await get_profile(self.auth.client, fid)
        return BotResponse().say(format_profile(profile))

    async def _cmd_node(self, event: CommandEvent) -> BotResponse:
        try:
            info = await self.auth.client.fetch_node_status()
        except HypercastError as e:
            return BotResponse().say(f"❌ Node unreachable: {e}")
        return BotResponse().say(format_node_info(info))

    async def _cmd_whoami(self, event: CommandEvent) -> BotResponse:
        return BotResponse().say(
            f"FID {self.auth.fid}\nSigner public key: {self.auth.public_key_hex}"
        )

    async def _cmd_delete(self, event: CommandEvent) -> BotResponse:
        hash_hex = event.argument.strip()
        try:
            target = CastId.from_hex(self.auth.fid, hash_hex)
        except ValueError:
            target = None
        if target is None or not target.hash:
            return BotResponse().say("Usage: /delete <cast hash>")
        await self.actions.remove(target.hash)
        return BotResponse().say(f"🗑️ Cast removed.\nHash: {target.hash_hex}")

    async def _cmd_cancel(self, event: CommandEvent) -> BotResponse:
        if self.sessions.cancel(event.session_key):
            return BotResponse().say("✅ Cancelled.")
        return BotResponse().say("Nothing to cancel.")

    # -- Button presses -------------------------------------------------------

    async def handle_callback(self, event: CallbackEvent) -> BotResponse:
        parsed = decode_callback(event.data)
        if isinstance(parsed, UnknownCallback):
            logger.debug("Unknown callback %r: %s", parsed.data, parsed.reason)
            return BotResponse(answer="Unknown action.")

        target = CastId.from_hex(parsed.fid, parsed.hash_hex)
        return await self._callbacks[parsed.action](event, parsed, target)

    async def _cb_like(self, event, parsed, target) -> BotResponse:
        await self.actions.like(target)
        return BotResponse(answer="❤️ Liked!", keyboard=KeyboardState.LIKED, keyboard_cast=target)

    async def _cb_unlike(self, event, parsed, target) -> BotResponse:
        await self.actions.unlike(target)
        return BotResponse(answer="💔 Unliked.", keyboard=KeyboardState.DEFAULT, keyboard_cast=target)

    async def _cb_recast(self, event, parsed, target) -> BotResponse:
        await self.actions.recast(target)
        return BotResponse(answer="🔁 Recasted!", keyboard=KeyboardState.RECASTED, keyboard_cast=target)

    async def _cb_unrecast(self, event, parsed, target) -> BotResponse:
        await self.actions.unrecast(target)
        return BotResponse(answer="↩️ Recast removed.", keyboard=KeyboardState.DEFAULT, keyboard_cast=target)

    async def _cb_reply(self, event, parsed, target) -> BotResponse:
        self.sessions.begin_reply(event.session_key, target, event.message_id)
        return BotResponse(answer="💬 Send your reply text.").say(
            f"💬 Replying to cast by FID {parsed.fid}...\n"
            "Send your reply text, or /cancel to abort."
        )

    async def _cb_quote(self, event, parsed, target) -> BotResponse:
        self.sessions.begin_quote(event.session_key, target, event.message_id)
        return BotResponse(answer="📝 Send your quote text.").say(
            f"📝 Quoting cast by FID {parsed.fid}...\n"
            "Send your quote text, or /cancel to abort."
        )

    async def _cb_thread(self, event, parsed, target) -> BotResponse:
        response = BotResponse(answer="Loading thread...")
        replies = await get_replies(self.auth.client, target)
        if not replies:
            return response.say("No replies yet.")

        response.say(f"🧵 {len(replies)} repl{'y' if len(replies) == 1 else 'ies'}:")
        for reply in replies[: self.thread_limit]:
            profile = await self._try_profile(reply.fid)
            response.say(format_cast(reply, profile), cast=reply.cast_id)
        return response

    # -- Free text ------------------------------------------------------------

    async def handle_text(self, event: TextEvent) -> BotResponse:
        """Complete a pending reply/quote; text with nothing pending is ignored."""
        outcome = await self.sessions.resolve_text(event.session_key, event.text)
        if outcome is None:
            return BotResponse()

        label = "Reply" if outcome.pending.kind == PendingKind.REPLY else "Quote cast"
        if not outcome.ok:
            return BotResponse().say(f"❌ Failed: {outcome.error}")
        return BotResponse().say(f"✅ {label} posted!\nHash: {outcome.message.hash}")
