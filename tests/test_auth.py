"""Tests for the authentication context."""

import logging

import pytest

from hypercast.auth import AuthContext, create_client, load_auth, require_fid
from hypercast.client import HttpNodeClient
from hypercast.config import Config
from hypercast.errors import ConfigurationError, TransportError
from hypercast.protocol.messages import FarcasterNetwork

SECRET = "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
PUBLIC = "0xd75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"


def make_config(**overrides) -> Config:
    config = Config()
    config.account.fid = 42
    config.signer.private_key = SECRET
    config.node.http_addr = "http://node.test:3381"
    for key, value in overrides.items():
        section, attr = key.split("__")
        setattr(getattr(config, section), attr, value)
    return config


class TestRequireFid:
    def test_positive(self):
        assert require_fid(make_config()) == 42

    @pytest.mark.parametrize("fid", [0, -1])
    def test_missing(self, fid):
        with pytest.raises(ConfigurationError, match="FARCASTER_FID"):
            require_fid(make_config(account__fid=fid))


class TestCreateClient:
    def test_http_client(self):
        client = create_client(make_config(node__api_key="k"))
        assert isinstance(client, HttpNodeClient)
        assert client.address == "http://node.test:3381"
        assert client.api_key == "k"

    def test_missing_address(self):
        with pytest.raises(ConfigurationError, match="HYPERSNAP_HTTP"):
            create_client(make_config(node__http_addr=" "))


class TestLoadAuth:
    async def test_builds_context(self, fake_client):
        ctx = await load_auth(make_config(node__network="testnet"), client=fake_client)

        assert isinstance(ctx, AuthContext)
        assert ctx.fid == 42
        assert ctx.public_key_hex == PUBLIC
        assert ctx.client is fake_client
        assert ctx.network == FarcasterNetwork.TESTNET

    async def test_logs_public_key(self, fake_client, caplog):
        with caplog.at_level(logging.INFO, logger="hypercast.auth.context"):
            await load_auth(make_config(), client=fake_client)
        assert PUBLIC in caplog.text
        assert "2 shard(s)" in caplog.text

    async def test_unreachable_node(self, fake_client):
        fake_client.read_error = TransportError("connection refused")
        with pytest.raises(TransportError, match="Cannot reach node at fake://node"):
            await load_auth(make_config(), client=fake_client)

    async def test_skip_node_check(self, fake_client):
        fake_client.read_error = TransportError("connection refused")
        ctx = await load_auth(make_config(), client=fake_client, check_node=False)
        assert ctx.fid == 42

    async def test_missing_credential(self, fake_client):
        with pytest.raises(ConfigurationError, match="No signing key"):
            await load_auth(make_config(signer__private_key=""), client=fake_client)

    async def test_both_credentials(self, fake_client):
        config = make_config(signer__mnemonic=" ".join(["abandon"] * 11 + ["about"]))
        with pytest.raises(ConfigurationError, match="set only one"):
            await load_auth(config, client=fake_client)
