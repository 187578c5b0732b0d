"""Pytest fixtures for hypercast tests."""

import pytest

from hypercast.auth import AuthContext
from hypercast.client import NodeClient
from hypercast.crypto import derive_from_raw_secret
from hypercast.protocol.hub import HubMessage, NodeInfo, UserDataField
from hypercast.protocol.messages import FARCASTER_EPOCH, FarcasterNetwork

# RFC 8032 section 7.1, test 1
RFC8032_SECRET = bytes.fromhex(
    "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
)

# 2024-01-01 00:00:00 UTC
FIXED_NOW = 1704067200.0


class FakeNodeClient(NodeClient):
    """In-memory node: records submissions, serves canned reads."""

    def __init__(self):
        self.submitted = []
        self.casts: dict[int, list[HubMessage]] = {}
        self.replies: dict[tuple[int, bytes], list[HubMessage]] = {}
        self.reactions: dict[tuple[int, bytes], list[HubMessage]] = {}
        self.profiles: dict[int, list[UserDataField]] = {}
        self.info = NodeInfo.model_validate(
            {
                "dbStats": {"numMessages": 1234, "numFidRegistrations": 56},
                "numShards": 2,
                "shardInfos": [{"shardId": 1, "maxHeight": 100}, {"shardId": 2, "maxHeight": 90}],
            }
        )
        self.submit_error: Exception | None = None
        self.read_error: Exception | None = None
        self.closed = False

    async def submit(self, message):
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append(message)
        return HubMessage.model_validate(
            {
                "data": {
                    "type": f"MESSAGE_TYPE_{message.data.type.name}",
                    "fid": message.data.fid,
                    "timestamp": message.data.timestamp,
                },
                "hash": message.hash_hex,
            }
        )

    def _read(self, value):
        if self.read_error is not None:
            raise self.read_error
        return value

    async def fetch_by_author(self, fid, page_size=20):
        return self._read(self.casts.get(fid, [])[:page_size])

    async def fetch_cast(self, fid, hash):
        for message in self._read(self.casts.get(fid, [])):
            if message.hash == "0x" + hash.hex():
                return message
        raise LookupError(hash)

    async def fetch_by_parent(self, fid, hash):
        return self._read(self.replies.get((fid, hash), []))

    async def fetch_by_target(self, fid, hash, reaction_type=None):
        return self._read(self.reactions.get((fid, hash), []))

    async def fetch_profile_fields(self, fid):
        return self._read(self.profiles.get(fid, []))

    async def fetch_node_status(self):
        return self._read(self.info)

    async def close(self):
        self.closed = True

    @property
    def address(self) -> str:
        return "fake://node"


def make_cast(fid, hash_hex, text, timestamp, parent=None, embeds=None):
    """A CAST_ADD message shaped like the node's JSON."""
    body = {"text": text, "embeds": embeds or []}
    if parent is not None:
        body["parentCastId"] = {"fid": parent[0], "hash": parent[1]}
    return HubMessage.model_validate(
        {
            "data": {
                "type": "MESSAGE_TYPE_CAST_ADD",
                "fid": fid,
                "timestamp": timestamp,
                "network": "FARCASTER_NETWORK_MAINNET",
                "castAddBody": body,
            },
            "hash": hash_hex,
        }
    )


@pytest.fixture
def identity():
    return derive_from_raw_secret(RFC8032_SECRET)


@pytest.fixture
def fake_client():
    return FakeNodeClient()


@pytest.fixture
def auth(identity, fake_client):
    return AuthContext(
        fid=42, identity=identity, client=fake_client, network=FarcasterNetwork.MAINNET
    )


@pytest.fixture
def cast_factory():
    return make_cast


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def fixed_farcaster_time():
    return int(FIXED_NOW) - FARCASTER_EPOCH
