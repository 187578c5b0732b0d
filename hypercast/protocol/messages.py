"""Farcaster message types used for outbound writes."""

import time
from dataclasses import dataclass, field
from enum import IntEnum

FARCASTER_EPOCH = 1609459200  # 2021-01-01T00:00:00Z
HASH_LENGTH = 20


class MessageType(IntEnum):
    CAST_ADD = 1
    CAST_REMOVE = 2
    REACTION_ADD = 3
    REACTION_REMOVE = 4


class ReactionType(IntEnum):
    LIKE = 1
    RECAST = 2


class FarcasterNetwork(IntEnum):
    MAINNET = 1
    TESTNET = 2
    DEVNET = 3

    @classmethod
    def from_name(cls, name: str) -> "FarcasterNetwork":
        """Parse ``"mainnet"``/``"testnet"``/``"devnet"`` (case-insensitive)."""
        return cls[name.strip().upper()]


class HashScheme(IntEnum):
    BLAKE3 = 1


class SignatureScheme(IntEnum):
    ED25519 = 1


def farcaster_time(now: float | None = None) -> int:
    """Seconds since the Farcaster epoch for ``now`` (defaults to the wall clock)."""
    if now is None:
        now = time.time()
    return int(now) - FARCASTER_EPOCH


# ---------------------------------------------------------------------------
# Cast references and embeds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CastId:
    """Identifies a cast by author FID and message hash."""

    fid: int
    hash: bytes

    @classmethod
    def from_hex(cls, fid: int, hash_hex: str) -> "CastId":
        """Build from a hex hash, with or without ``0x``."""
        clean = hash_hex[2:] if hash_hex[:2].lower() == "0x" else hash_hex
        return cls(fid=int(fid), hash=bytes.fromhex(clean))

    @property
    def hash_hex(self) -> str:
        return "0x" + self.hash.hex()

    def __str__(self) -> str:
        return f"{self.fid}:{self.hash_hex}"


CastReference = CastId


@dataclass(frozen=True)
class Embed:
    """Either a URL or a reference to another cast."""

    url: str | None = None
    cast_id: CastId | None = None

    def __post_init__(self):
        if (self.url is None) == (self.cast_id is None):
            raise ValueError("Embed needs exactly one of url or cast_id")

    @classmethod
    def of_url(cls, url: str) -> "Embed":
        return cls(url=url)

    @classmethod
    def of_cast(cls, cast_id: CastId) -> "Embed":
        return cls(cast_id=cast_id)

    @property
    def is_cast(self) -> bool:
        return self.cast_id is not None


# ---------------------------------------------------------------------------
# Outbound actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CastAdd:
    """A new cast. Setting ``parent_cast_id`` makes it a reply."""

    text: str
    embeds: tuple[Embed, ...] = ()
    mentions: tuple[int, ...] = ()
    mentions_positions: tuple[int, ...] = ()
    parent_cast_id: CastId | None = None
    parent_url: str | None = None

    message_type = MessageType.CAST_ADD

    def __post_init__(self):
        if self.parent_cast_id is not None and self.parent_url is not None:
            raise ValueError("A cast has either a parent cast or a parent URL, not both")
        if len(self.mentions) != len(self.mentions_positions):
            raise ValueError("mentions and mentions_positions must have the same length")


@dataclass(frozen=True)
class CastRemove:
    """Removes one of our own casts."""

    target_hash: bytes

    message_type = MessageType.CAST_REMOVE


@dataclass(frozen=True)
class ReactionAdd:
    type: ReactionType
    target: CastId

    message_type = MessageType.REACTION_ADD


@dataclass(frozen=True)
class ReactionRemove:
    type: ReactionType
    target: CastId

    message_type = MessageType.REACTION_REMOVE


OutboundAction = CastAdd | CastRemove | ReactionAdd | ReactionRemove


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MessageData:
    """The signed part of a message."""

    body: OutboundAction
    fid: int
    timestamp: int
    network: FarcasterNetwork = FarcasterNetwork.MAINNET

    @property
    def type(self) -> MessageType:
        return self.body.message_type


@dataclass(frozen=True)
class SignedMessage:
    """A message ready for submission.

    ``hash`` is BLAKE3 over ``data_bytes`` truncated to 20 bytes and
    ``signature`` is the Ed25519 signature of ``hash`` by ``signer``.
    """

    data: MessageData
    data_bytes: bytes
    hash: bytes
    signature: bytes
    signer: bytes
    hash_scheme: HashScheme = field(default=HashScheme.BLAKE3)
    signature_scheme: SignatureScheme = field(default=SignatureScheme.ED25519)

    @property
    def hash_hex(self) -> str:
        return "0x" + self.hash.hex()
