"""Protobuf wire encoding and signing of Farcaster messages.

Only the write path is encoded here; the node returns reads as JSON (see
:mod:`hypercast.protocol.hub`). Field numbers follow Farcaster's
``message.proto``. Default values are omitted and repeated scalars are
packed, as proto3 does.
"""

import blake3

from hypercast.crypto.signer import SigningIdentity
from hypercast.protocol.messages import (
    HASH_LENGTH,
    CastAdd,
    CastId,
    CastRemove,
    Embed,
    FarcasterNetwork,
    MessageData,
    OutboundAction,
    ReactionAdd,
    ReactionRemove,
    SignedMessage,
    farcaster_time,
)

_VARINT = 0
_LEN = 2

# MessageData body field numbers
_BODY_FIELDS = {
    CastAdd: 5,
    CastRemove: 6,
    ReactionAdd: 7,
    ReactionRemove: 7,
}


# ---------------------------------------------------------------------------
# Wire primitives
# ---------------------------------------------------------------------------


def encode_varint(value: int) -> bytes:
    if value < 0:
        raise ValueError("varint must be non-negative")
    out = bytearray()
    while True:
        bits = value & 0x7F
        value >>= 7
        if value:
            out.append(bits | 0x80)
        else:
            out.append(bits)
            return bytes(out)


def _tag(field_number: int, wire_type: int) -> bytes:
    return encode_varint((field_number << 3) | wire_type)


def _uint(field_number: int, value: int) -> bytes:
    if not value:
        return b""
    return _tag(field_number, _VARINT) + encode_varint(int(value))


def _bytes(field_number: int, value: bytes) -> bytes:
    if not value:
        return b""
    return _tag(field_number, _LEN) + encode_varint(len(value)) + value


def _string(field_number: int, value: str | None) -> bytes:
    return _bytes(field_number, (value or "").encode("utf-8"))


def _message(field_number: int, payload: bytes) -> bytes:
    # Present sub-messages are written even when empty.
    return _tag(field_number, _LEN) + encode_varint(len(payload)) + payload


def _packed(field_number: int, values) -> bytes:
    if not values:
        return b""
    payload = b"".join(encode_varint(int(v)) for v in values)
    return _tag(field_number, _LEN) + encode_varint(len(payload)) + payload


# ---------------------------------------------------------------------------
# Bodies
# ---------------------------------------------------------------------------


def encode_cast_id(cast_id: CastId) -> bytes:
    return _uint(1, cast_id.fid) + _bytes(2, cast_id.hash)


def encode_embed(embed: Embed) -> bytes:
    if embed.cast_id is not None:
        return _message(2, encode_cast_id(embed.cast_id))
    return _string(1, embed.url)


def encode_cast_add(body: CastAdd) -> bytes:
    out = _packed(2, body.mentions)
    if body.parent_cast_id is not None:
        out += _message(3, encode_cast_id(body.parent_cast_id))
    out += _string(4, body.text)
    out += _packed(5, body.mentions_positions)
    for embed in body.embeds:
        out += _message(6, encode_embed(embed))
    if body.parent_url is not None:
        out += _string(7, body.parent_url)
    return out


def encode_cast_remove(body: CastRemove) -> bytes:
    return _bytes(1, body.target_hash)


def encode_reaction(body: ReactionAdd | ReactionRemove) -> bytes:
    return _uint(1, body.type) + _message(2, encode_cast_id(body.target))


def encode_body(body: OutboundAction) -> bytes:
    if isinstance(body, CastAdd):
        return encode_cast_add(body)
    if isinstance(body, CastRemove):
        return encode_cast_remove(body)
    if isinstance(body, (ReactionAdd, ReactionRemove)):
        return encode_reaction(body)
    raise TypeError(f"Unsupported message body: {type(body).__name__}")


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


def encode_message_data(data: MessageData) -> bytes:
    return (
        _uint(1, data.type)
        + _uint(2, data.fid)
        + _uint(3, data.timestamp)
        + _uint(4, data.network)
        + _message(_BODY_FIELDS[type(data.body)], encode_body(data.body))
    )


def encode_message(message: SignedMessage) -> bytes:
    """Encode the full ``Message`` for submission."""
    return (
        _message(1, message.data_bytes)
        + _bytes(2, message.hash)
        + _uint(3, message.hash_scheme)
        + _bytes(4, message.signature)
        + _uint(5, message.signature_scheme)
        + _bytes(6, message.signer)
        + _bytes(7, message.data_bytes)
    )


def message_hash(data_bytes: bytes) -> bytes:
    """BLAKE3 digest of ``data_bytes`` truncated to 20 bytes."""
    return blake3.blake3(data_bytes).digest(length=HASH_LENGTH)


def build_message(
    body: OutboundAction,
    *,
    fid: int,
    identity: SigningIdentity,
    network: FarcasterNetwork = FarcasterNetwork.MAINNET,
    timestamp: int | None = None,
) -> SignedMessage:
    """Serialize, hash and sign ``body``.

    The timestamp is taken from the wall clock at this call unless given.
    """
    if timestamp is None:
        timestamp = farcaster_time()

    data = MessageData(body=body, fid=fid, timestamp=timestamp, network=network)
    data_bytes = encode_message_data(data)
    digest = message_hash(data_bytes)

    return SignedMessage(
        data=data,
        data_bytes=data_bytes,
        hash=digest,
        signature=identity.sign(digest),
        signer=identity.public_key,
    )
