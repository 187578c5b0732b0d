"""Interactive session state and callback tokens."""

from hypercast.session.callbacks import (
    CastAction,
    CastCallback,
    UnknownCallback,
    decode_callback,
    encode_callback,
    parse_callback,
)
from hypercast.session.machine import (
    PendingAction,
    PendingKind,
    ResolveOutcome,
    SessionMachine,
    SessionState,
    SessionStore,
)

__all__ = [
    "CastAction",
    "CastCallback",
    "PendingAction",
    "PendingKind",
    "ResolveOutcome",
    "SessionMachine",
    "SessionState",
    "SessionStore",
    "UnknownCallback",
    "decode_callback",
    "encode_callback",
    "parse_callback",
]
