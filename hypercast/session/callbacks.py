"""Compact callback tokens for inline buttons.

Format: ``<action>:<fid>:<hash hex>``

    like:<fid>:<hash>       like a cast
    unlike:<fid>:<hash>     remove like
    recast:<fid>:<hash>     recast
    unrecast:<fid>:<hash>   remove recast
    reply:<fid>:<hash>      begin reply flow
    quote:<fid>:<hash>      begin quote flow
    thread:<fid>:<hash>     show replies

Telegram limits callback data to 64 bytes, so only the first
``CALLBACK_HASH_BYTES`` bytes of the hash are kept. Two casts whose hashes
share that prefix cannot be told apart; that risk is accepted. Farcaster
hashes are exactly 20 bytes today, so the prefix is the whole hash.
"""

import re
from dataclasses import dataclass
from enum import Enum

from hypercast.errors import DecodeError

CALLBACK_DATA_LIMIT = 64
CALLBACK_HASH_BYTES = 20
DELIMITER = ":"

_HEX = re.compile(r"(?:[0-9a-f]{2})+")


class CastAction(str, Enum):
    LIKE = "like"
    UNLIKE = "unlike"
    RECAST = "recast"
    UNRECAST = "unrecast"
    REPLY = "reply"
    QUOTE = "quote"
    THREAD = "thread"


@dataclass(frozen=True)
class CastCallback:
    """A decoded button press."""

    action: CastAction
    fid: int
    hash_hex: str  # 0x-prefixed, at most CALLBACK_HASH_BYTES bytes


@dataclass(frozen=True)
class UnknownCallback:
    """A token that could not be decoded."""

    data: str
    reason: str


def truncate_hash_hex(hash_hex: str) -> str:
    """Strip ``0x`` and keep the first ``CALLBACK_HASH_BYTES`` bytes as lowercase hex."""
    clean = hash_hex[2:] if hash_hex[:2].lower() == "0x" else hash_hex
    return clean.lower()[: CALLBACK_HASH_BYTES * 2]


def encode_callback(action: CastAction | str, fid: int, hash_hex: str) -> str:
    """Encode a button action.

    Raises:
        ValueError: If the FID is negative, the hash is not whole bytes of
            hex, or the token would exceed ``CALLBACK_DATA_LIMIT`` bytes.
    """
    action = CastAction(action)
    fid = int(fid)
    if fid < 0:
        raise ValueError(f"FID must be non-negative: {fid}")
    short_hash = truncate_hash_hex(hash_hex)
    if not _HEX.fullmatch(short_hash):
        raise ValueError(f"Not a hex hash: {hash_hex!r}")
    token = DELIMITER.join((action.value, str(fid), short_hash))
    if len(token.encode("utf-8")) > CALLBACK_DATA_LIMIT:
        raise ValueError(f"Callback token exceeds {CALLBACK_DATA_LIMIT} bytes: {token}")
    return token


def parse_callback(data: str) -> CastCallback:
    """Decode a token.

    Raises:
        DecodeError: Wrong field count, unknown action, bad FID or bad hash.
    """
    parts = data.split(DELIMITER)
    if len(parts) != 3:
        raise DecodeError(f"expected 3 fields, got {len(parts)}")

    action_str, fid_str, short_hash = parts
    try:
        action = CastAction(action_str)
    except ValueError:
        raise DecodeError(f"unknown action {action_str!r}") from None

    if not (fid_str.isascii() and fid_str.isdigit()):
        raise DecodeError(f"bad fid {fid_str!r}")

    short_hash = short_hash.lower()
    if len(short_hash) > CALLBACK_HASH_BYTES * 2 or not _HEX.fullmatch(short_hash):
        raise DecodeError(f"bad hash {short_hash!r}")

    return CastCallback(action=action, fid=int(fid_str), hash_hex="0x" + short_hash)


def decode_callback(data: str) -> CastCallback | UnknownCallback:
    """Decode a token; never raises."""
    try:
        return parse_callback(data)
    except DecodeError as e:
        return UnknownCallback(data=data, reason=str(e))
