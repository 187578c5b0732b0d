"""Tests for the HTTP node client."""

import json

import httpx
import pytest

from hypercast.client import HttpNodeClient
from hypercast.errors import RemoteRejectionError, TransportError
from hypercast.protocol.codec import build_message, encode_message
from hypercast.protocol.messages import CastAdd, ReactionType

HASH = b"\x11" * 20


def cast_json(fid=3, hash_hex="0x" + "22" * 20, text="gm", timestamp=100):
    return {
        "data": {
            "type": "MESSAGE_TYPE_CAST_ADD",
            "fid": fid,
            "timestamp": timestamp,
            "network": "FARCASTER_NETWORK_MAINNET",
            "castAddBody": {"text": text, "embeds": [], "mentions": [], "mentionsPositions": []},
        },
        "hash": hash_hex,
        "hashScheme": "HASH_SCHEME_BLAKE3",
        "signature": "c2ln",
        "signatureScheme": "SIGNATURE_SCHEME_ED25519",
        "signer": "0x" + "33" * 32,
    }


def make_client(handler, **kwargs):
    return HttpNodeClient(
        "http://node.test:3381/", transport=httpx.MockTransport(handler), **kwargs
    )


class TestRequests:
    """Tests for request shape."""

    async def test_submit_posts_protobuf(self, identity):
        seen = {}
        msg = build_message(CastAdd(text="gm"), fid=42, identity=identity, timestamp=10)

        def handler(request: httpx.Request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["type"] = request.headers["content-type"]
            seen["body"] = request.content
            return httpx.Response(200, json=cast_json(fid=42, hash_hex=msg.hash_hex))

        result = await make_client(handler).submit(msg)

        assert seen["method"] == "POST"
        assert seen["path"] == "/v1/submitMessage"
        assert seen["type"] == "application/octet-stream"
        assert seen["body"] == encode_message(msg)
        assert result.hash == msg.hash_hex

    async def test_casts_by_fid_params(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"messages": [cast_json()], "nextPageToken": ""})

        messages = await make_client(handler).fetch_by_author(3, page_size=5)

        assert seen["path"] == "/v1/castsByFid"
        assert seen["params"] == {"fid": "3", "pageSize": "5", "reverse": "1"}
        assert messages[0].data.cast_add_body.text == "gm"

    async def test_reactions_by_cast_params(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"messages": []})

        await make_client(handler).fetch_by_target(3, HASH, ReactionType.LIKE)

        assert seen["path"] == "/v1/reactionsByCast"
        assert seen["params"] == {
            "target_fid": "3",
            "target_hash": "0x" + "11" * 20,
            "reaction_type": "1",
        }

    async def test_casts_by_parent_and_cast_by_id(self):
        paths = []

        def handler(request: httpx.Request):
            paths.append((request.url.path, request.url.params["hash"]))
            if request.url.path == "/v1/castById":
                return httpx.Response(200, json=cast_json())
            return httpx.Response(200, json={"messages": [cast_json(), cast_json()]})

        client = make_client(handler)
        replies = await client.fetch_by_parent(3, HASH)
        cast = await client.fetch_cast(3, HASH)

        assert len(replies) == 2
        assert cast.data.fid == 3
        assert paths == [
            ("/v1/castsByParent", "0x" + "11" * 20),
            ("/v1/castById", "0x" + "11" * 20),
        ]

    async def test_user_data_fields(self):
        def handler(request: httpx.Request):
            assert request.url.path == "/v1/userDataByFid"
            return httpx.Response(
                200,
                json={
                    "messages": [
                        {
                            "data": {
                                "type": "MESSAGE_TYPE_USER_DATA_ADD",
                                "fid": 3,
                                "userDataBody": {"type": "USER_DATA_TYPE_USERNAME", "value": "dwr"},
                            },
                            "hash": "0x01",
                        }
                    ]
                },
            )

        fields = await make_client(handler).fetch_profile_fields(3)
        assert [(f.type, f.value) for f in fields] == [("USER_DATA_TYPE_USERNAME", "dwr")]

    async def test_node_info(self):
        def handler(request: httpx.Request):
            assert request.url.path == "/v1/info"
            return httpx.Response(
                200,
                json={
                    "dbStats": {"numMessages": 99, "numFidRegistrations": 5, "approxSize": 1},
                    "numShards": 2,
                    "shardInfos": [{"shardId": 0, "maxHeight": 10}],
                    "version": "0.1",
                },
            )

        info = await make_client(handler).fetch_node_status()
        assert info.shard_count == 2
        assert info.message_count == 99
        assert info.shard_infos[0].max_height == 10

    async def test_auth_headers(self):
        seen = {}

        def handler(request: httpx.Request):
            seen.update(request.headers)
            return httpx.Response(200, json={})

        client = make_client(handler, api_key="k-123", username="u", password="p")
        await client.fetch_node_status()

        assert seen["x-api-key"] == "k-123"
        assert seen["authorization"].startswith("Basic ")

    async def test_no_auth_headers_by_default(self):
        seen = {}

        def handler(request: httpx.Request):
            seen.update(request.headers)
            return httpx.Response(200, json={})

        await make_client(handler).fetch_node_status()
        assert "x-api-key" not in seen
        assert "authorization" not in seen

    def test_address_strips_slash(self):
        assert make_client(lambda r: httpx.Response(200)).address == "http://node.test:3381"


class TestErrors:
    """Tests for mapping failures onto the error taxonomy."""

    async def test_connection_error_is_transport(self):
        def handler(request: httpx.Request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError, match="Cannot reach node"):
            await make_client(handler).fetch_node_status()

    async def test_timeout_is_transport(self):
        def handler(request: httpx.Request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(TransportError):
            await make_client(handler).fetch_node_status()

    @pytest.mark.parametrize("status", [401, 403])
    async def test_auth_failure_is_transport(self, status):
        client = make_client(lambda r: httpx.Response(status, text="nope"))
        with pytest.raises(TransportError) as exc_info:
            await client.fetch_node_status()
        assert exc_info.value.status_code == status

    async def test_server_error_is_transport(self):
        client = make_client(lambda r: httpx.Response(503, text="down"))
        with pytest.raises(TransportError, match="503"):
            await client.fetch_by_author(3)

    async def test_rejection_carries_error_code(self, identity):
        body = {"errCode": "bad_request.validation_failure", "details": "invalid signature"}
        client = make_client(lambda r: httpx.Response(400, content=json.dumps(body)))
        msg = build_message(CastAdd(text="gm"), fid=42, identity=identity, timestamp=10)

        with pytest.raises(RemoteRejectionError, match="invalid signature") as exc_info:
            await client.submit(msg)
        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == "bad_request.validation_failure"

    async def test_rejection_with_plain_text(self):
        client = make_client(lambda r: httpx.Response(404, text="not found"))
        with pytest.raises(RemoteRejectionError, match="not found") as exc_info:
            await client.fetch_cast(3, HASH)
        assert exc_info.value.error_code is None

    async def test_unreadable_body_is_transport(self):
        client = make_client(lambda r: httpx.Response(200, text="<html>"))
        with pytest.raises(TransportError, match="Unreadable"):
            await client.fetch_node_status()

    async def test_unexpected_shape_is_transport(self):
        client = make_client(lambda r: httpx.Response(200, json={"messages": "nope"}))
        with pytest.raises(TransportError, match="Unexpected response"):
            await client.fetch_by_author(3)
