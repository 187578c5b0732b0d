"""Read casts, profiles, replies and reactions, and format them for display."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from hypercast.client import NodeClient
from hypercast.protocol.hub import HubMessage, NodeInfo
from hypercast.protocol.messages import FARCASTER_EPOCH, CastId

CAST_ADD = "MESSAGE_TYPE_CAST_ADD"
LIKE = "REACTION_TYPE_LIKE"
RECAST = "REACTION_TYPE_RECAST"


def farcaster_timestamp_to_datetime(ts: int) -> datetime:
    return datetime.fromtimestamp(ts + FARCASTER_EPOCH, tz=timezone.utc)


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@dataclass
class Profile:
    fid: int
    display_name: str | None = None
    username: str | None = None
    bio: str | None = None
    pfp_url: str | None = None


_PROFILE_FIELDS = {
    "USER_DATA_TYPE_DISPLAY": "display_name",
    "USER_DATA_TYPE_USERNAME": "username",
    "USER_DATA_TYPE_BIO": "bio",
    "USER_DATA_TYPE_PFP": "pfp_url",
}


async def get_profile(client: NodeClient, fid: int) -> Profile:
    profile = Profile(fid=fid)
    for item in await client.fetch_profile_fields(fid):
        attr = _PROFILE_FIELDS.get(item.type)
        if attr:
            setattr(profile, attr, item.value)
    return profile


def format_profile(p: Profile) -> str:
    name = p.display_name or p.username or f"FID {p.fid}"
    handle = f" @{p.username}" if p.username else ""
    bio = f"\n{p.bio}" if p.bio else ""
    return f"👤 {name}{handle} (FID {p.fid}){bio}"


# ---------------------------------------------------------------------------
# Casts
# ---------------------------------------------------------------------------


@dataclass
class CastView:
    """A cast flattened for display."""

    fid: int
    hash_hex: str
    text: str
    timestamp: datetime
    embeds: list[str] = field(default_factory=list)
    parent_fid: int | None = None
    parent_hash_hex: str | None = None

    @property
    def cast_id(self) -> CastId:
        return CastId.from_hex(self.fid, self.hash_hex)


def cast_view(message: HubMessage) -> CastView | None:
    """Convert a node message to a :class:`CastView`; ``None`` if it is not a cast."""
    data = message.data
    if data is None or data.type != CAST_ADD or data.cast_add_body is None:
        return None
    body = data.cast_add_body

    embeds = []
    for e in body.embeds:
        if e.url:
            embeds.append(e.url)
        elif e.cast_id:
            embeds.append(f"cast:{e.cast_id.fid}:{e.cast_id.hash}")

    parent = body.parent_cast_id
    return CastView(
        fid=data.fid,
        hash_hex=message.hash,
        text=body.text,
        timestamp=farcaster_timestamp_to_datetime(data.timestamp),
        embeds=embeds,
        parent_fid=parent.fid if parent else None,
        parent_hash_hex=parent.hash if parent else None,
    )


def _casts(messages: list[HubMessage]) -> list[CastView]:
    return [c for c in (cast_view(m) for m in messages) if c is not None]


async def get_feed(client: NodeClient, fid: int, limit: int = 10) -> list[CastView]:
    """Recent casts from ``fid``, newest first."""
    casts = _casts(await client.fetch_by_author(fid, limit))
    return sorted(casts, key=lambda c: c.timestamp, reverse=True)


async def get_replies(client: NodeClient, parent: CastId) -> list[CastView]:
    """Replies to ``parent``, oldest first."""
    casts = _casts(await client.fetch_by_parent(parent.fid, parent.hash))
    return sorted(casts, key=lambda c: c.timestamp)


async def get_reaction_counts(client: NodeClient, target: CastId) -> dict[str, int]:
    """Count likes and recasts on ``target``."""
    counts = {"likes": 0, "recasts": 0}
    for message in await client.fetch_by_target(target.fid, target.hash):
        body = message.data.reaction_body if message.data else None
        if body is None:
            continue
        if body.type == LIKE:
            counts["likes"] += 1
        elif body.type == RECAST:
            counts["recasts"] += 1
    return counts


def format_cast(cast: CastView, profile: Profile | None = None, index: int | None = None) -> str:
    """Format a cast for Telegram or the terminal."""
    author = f"@{profile.username}" if profile and profile.username else f"FID {cast.fid}"
    num = f"{index + 1}. " if index is not None else ""
    ts = cast.timestamp.strftime("%Y-%m-%d %H:%M UTC")
    embed_line = f"\n🔗 {', '.join(cast.embeds)}" if cast.embeds else ""
    reply_note = f"\n↩️ Reply to FID {cast.parent_fid}" if cast.parent_hash_hex else ""
    return f"{num}✍️ {author}  •  {ts}\n{cast.text}{embed_line}{reply_note}"


def format_node_info(info: NodeInfo) -> str:
    shards = "\n".join(
        f"  Shard {s.shard_id}: height {s.max_height}, block delay {s.block_delay}"
        for s in info.shard_infos
    )
    text = (
        "🖥️ HyperSnap Node\n"
        f"Shards: {info.shard_count}\n"
        f"Messages: {info.message_count:,}\n"
        f"FIDs: {info.db_stats.num_fid_registrations:,}"
    )
    return f"{text}\n{shards}" if shards else text
