"""Pydantic models for the node's JSON HTTP API responses."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HubModel(BaseModel):
    """Base model: camelCase on the wire, unknown fields ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class HubCastId(HubModel):
    fid: int
    hash: str


class HubEmbed(HubModel):
    url: str | None = None
    cast_id: HubCastId | None = None


class HubCastAddBody(HubModel):
    text: str = ""
    embeds: list[HubEmbed] = Field(default_factory=list)
    mentions: list[int] = Field(default_factory=list)
    mentions_positions: list[int] = Field(default_factory=list)
    parent_cast_id: HubCastId | None = None
    parent_url: str | None = None


class HubCastRemoveBody(HubModel):
    target_hash: str


class HubReactionBody(HubModel):
    type: str
    target_cast_id: HubCastId | None = None
    target_url: str | None = None


class HubUserDataBody(HubModel):
    type: str
    value: str = ""


class HubMessageData(HubModel):
    type: str
    fid: int
    timestamp: int = 0
    network: str | None = None
    cast_add_body: HubCastAddBody | None = None
    cast_remove_body: HubCastRemoveBody | None = None
    reaction_body: HubReactionBody | None = None
    user_data_body: HubUserDataBody | None = None


class HubMessage(HubModel):
    """A message as returned by the node (hashes are ``0x`` hex)."""

    data: HubMessageData | None = None
    hash: str = ""
    hash_scheme: str | None = None
    signature: str | None = None
    signature_scheme: str | None = None
    signer: str | None = None


class HubMessagesPage(HubModel):
    messages: list[HubMessage] = Field(default_factory=list)
    next_page_token: str | None = None


class UserDataField(HubModel):
    """A single typed profile field, e.g. ``USER_DATA_TYPE_USERNAME``."""

    type: str
    value: str


# ---------------------------------------------------------------------------
# Node info
# ---------------------------------------------------------------------------


class DbStats(HubModel):
    num_messages: int = 0
    num_fid_registrations: int = 0
    approx_size: int = 0


class ShardInfo(HubModel):
    shard_id: int
    max_height: int = 0
    num_messages: int = 0
    block_delay: int = 0
    mempool_size: int = 0


class NodeInfo(HubModel):
    db_stats: DbStats = Field(default_factory=DbStats)
    num_shards: int = 0
    shard_infos: list[ShardInfo] = Field(default_factory=list)

    @property
    def shard_count(self) -> int:
        return self.num_shards

    @property
    def message_count(self) -> int:
        return self.db_stats.num_messages
