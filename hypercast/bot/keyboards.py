"""Cast keyboard layouts as rows of ``(label, callback_data)``."""

from hypercast.bot.events import KeyboardState
from hypercast.protocol.messages import CastId
from hypercast.session.callbacks import CastAction, encode_callback

Button = tuple[str, str]


def cast_keyboard(cast: CastId, state: KeyboardState = KeyboardState.DEFAULT) -> list[list[Button]]:
    """Buttons for a displayed cast.

    After a like or recast the matching button becomes an undo button.
    """

    def button(label: str, action: CastAction) -> Button:
        return label, encode_callback(action, cast.fid, cast.hash_hex)

    if state == KeyboardState.LIKED:
        like = button("❤️ Liked", CastAction.UNLIKE)
    else:
        like = button("👍 Like", CastAction.LIKE)

    if state == KeyboardState.RECASTED:
        recast = button("✅ Recasted", CastAction.UNRECAST)
    else:
        recast = button("🔁 Recast", CastAction.RECAST)

    return [
        [like, recast],
        [button("💬 Reply", CastAction.REPLY), button("📝 Quote", CastAction.QUOTE)],
        [button("🧵 Thread", CastAction.THREAD)],
    ]
