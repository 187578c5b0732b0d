"""Telegram channel implementation."""

import asyncio
import logging

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from hypercast.bot.dispatcher import BotDispatcher
from hypercast.bot.events import (
    BotResponse,
    CallbackEvent,
    CommandEvent,
    KeyboardState,
    TextEvent,
)
from hypercast.bot.keyboards import cast_keyboard
from hypercast.channels.base import BaseChannel
from hypercast.protocol.messages import CastId

logger = logging.getLogger(__name__)

CALLBACK_ANSWER_LIMIT = 200


def to_inline_markup(
    cast: CastId, state: KeyboardState = KeyboardState.DEFAULT
) -> InlineKeyboardMarkup:
    """Render a cast keyboard as Telegram inline buttons."""
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton(label, callback_data=data) for label, data in row]
            for row in cast_keyboard(cast, state)
        ]
    )


def split_command(text: str) -> tuple[str, str]:
    """Split ``/cmd@bot argument text`` into ``("cmd", "argument text")``."""
    head, _, argument = text.strip().partition(" ")
    command = head.lstrip("/").split("@", 1)[0]
    return command.lower(), argument.strip()


class TelegramChannel(BaseChannel):
    """Telegram bot using long polling.

    Updates are processed concurrently, one task per update; the dispatcher
    serializes updates that belong to the same chat.
    """

    name = "telegram"

    def __init__(self, token: str, dispatcher: BotDispatcher, allow_from: list[str] | None = None):
        super().__init__(dispatcher, allow_from)
        self.token = token
        self._app: Application | None = None

    def build_application(self) -> Application:
        """Create the python-telegram-bot application with our handlers."""
        app = Application.builder().token(self.token).concurrent_updates(True).build()
        app.add_handler(CommandHandler(self.dispatcher.commands, self._on_command))
        app.add_handler(CallbackQueryHandler(self._on_callback))
        app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self._on_text))
        app.add_error_handler(self._on_error)
        return app

    async def start(self) -> None:
        """Start the Telegram bot."""
        if not self.token:
            raise ValueError("Telegram token not configured")

        self._running = True
        self._app = self.build_application()

        await self._app.initialize()
        await self._app.start()

        bot_info = await self._app.bot.get_me()
        logger.info("Telegram bot @%s connected", bot_info.username)

        await self._app.updater.start_polling(
            allowed_updates=["message", "callback_query"],
            drop_pending_updates=True,
        )

        # Keep running
        while self._running:
            await asyncio.sleep(1)

    async def stop(self) -> None:
        """Stop the Telegram bot."""
        self._running = False
        if self._app:
            await self._app.updater.stop()
            await self._app.stop()
            await self._app.shutdown()
            self._app = None

    # -- Handlers -------------------------------------------------------------

    async def _on_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        user = update.effective_user
        if not message or not user or not message.text:
            return
        if not self.is_allowed(str(user.id), user.username):
            return

        command, argument = split_command(message.text)
        event = CommandEvent(
            channel=self.name,
            sender_id=str(user.id),
            chat_id=str(message.chat_id),
            command=command,
            argument=argument,
        )
        response = await self._dispatch(event)
        await self._render(context, message.chat_id, response)

    async def _on_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        user = update.effective_user
        chat = update.effective_chat
        if not query or not user or not chat:
            return
        if not self.is_allowed(str(user.id), user.username):
            await query.answer("Not authorized.")
            return

        event = CallbackEvent(
            channel=self.name,
            sender_id=str(user.id),
            chat_id=str(chat.id),
            data=query.data or "",
            message_id=query.message.message_id if query.message else None,
        )
        response = await self._dispatch(event)
        await self._render(context, chat.id, response, query=query)

    async def _on_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        user = update.effective_user
        if not message or not user or not message.text:
            return
        if not self.is_allowed(str(user.id), user.username):
            return

        event = TextEvent(
            channel=self.name,
            sender_id=str(user.id),
            chat_id=str(message.chat_id),
            text=message.text,
            message_id=message.message_id,
        )
        response = await self._dispatch(event)
        await self._render(context, message.chat_id, response)

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error("Unhandled error in Telegram update: %s", context.error, exc_info=context.error)

    # -- Rendering ------------------------------------------------------------

    async def _render(
        self,
        context: ContextTypes.DEFAULT_TYPE,
        chat_id: int,
        response: BotResponse,
        query=None,
    ) -> None:
        """Send a :class:`BotResponse` to ``chat_id``."""
        if query is not None:
            await query.answer((response.answer or "")[:CALLBACK_ANSWER_LIMIT] or None)
            if response.keyboard is not None and response.keyboard_cast is not None:
                await query.edit_message_reply_markup(
                    reply_markup=to_inline_markup(response.keyboard_cast, response.keyboard)
                )

        for msg in response.messages:
            markup = to_inline_markup(msg.cast, msg.keyboard) if msg.cast else None
            await context.bot.send_message(chat_id=chat_id, text=msg.text, reply_markup=markup)
