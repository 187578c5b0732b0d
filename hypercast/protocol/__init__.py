"""Farcaster message model, wire codec and node API models."""

from hypercast.protocol.codec import build_message, encode_message, message_hash
from hypercast.protocol.hub import HubMessage, NodeInfo, UserDataField
from hypercast.protocol.messages import (
    FARCASTER_EPOCH,
    CastAdd,
    CastId,
    CastReference,
    CastRemove,
    Embed,
    FarcasterNetwork,
    MessageData,
    MessageType,
    OutboundAction,
    ReactionAdd,
    ReactionRemove,
    ReactionType,
    SignedMessage,
    farcaster_time,
)

__all__ = [
    "FARCASTER_EPOCH",
    "CastAdd",
    "CastId",
    "CastReference",
    "CastRemove",
    "Embed",
    "FarcasterNetwork",
    "HubMessage",
    "MessageData",
    "MessageType",
    "NodeInfo",
    "OutboundAction",
    "ReactionAdd",
    "ReactionRemove",
    "ReactionType",
    "SignedMessage",
    "UserDataField",
    "build_message",
    "encode_message",
    "farcaster_time",
    "message_hash",
]
