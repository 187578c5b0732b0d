"""Tests for configuration schema."""

import json
from unittest.mock import patch

import pytest

from hypercast.config.schema import (
    AccountConfig,
    ChannelsConfig,
    Config,
    NodeConfig,
    SignerConfig,
    TelegramConfig,
    apply_env_overrides,
    get_config_path,
    load_config,
    save_config,
)
from hypercast.errors import ConfigurationError
from hypercast.protocol.messages import FarcasterNetwork


class TestTelegramConfig:
    """Tests for TelegramConfig."""

    def test_default_values(self):
        config = TelegramConfig()
        assert config.enabled is False
        assert config.token == ""
        assert config.allow_from == []


class TestNodeConfig:
    """Tests for NodeConfig."""

    def test_default_values(self):
        config = NodeConfig()
        assert config.http_addr == ""
        assert config.network == "mainnet"
        assert config.timeout == 30.0

    def test_farcaster_network(self):
        assert NodeConfig(network="testnet").farcaster_network == FarcasterNetwork.TESTNET
        assert NodeConfig(network="bogus").farcaster_network == FarcasterNetwork.MAINNET


class TestConfig:
    """Tests for the main Config class."""

    def test_default_values(self):
        config = Config()
        assert isinstance(config.signer, SignerConfig)
        assert isinstance(config.account, AccountConfig)
        assert isinstance(config.node, NodeConfig)
        assert isinstance(config.channels, ChannelsConfig)
        assert config.account.fid == 0
        assert config.has_credential is False

    def test_has_credential(self):
        assert Config(signer=SignerConfig(mnemonic="a b c")).has_credential
        assert Config(signer=SignerConfig(private_key="aa")).has_credential
        assert not Config(signer=SignerConfig(private_key="  ")).has_credential


class TestEnvOverrides:
    """Tests for environment variable overrides."""

    def test_all_variables(self):
        env = {
            "SIGNER_PRIVATE_KEY": "0xabc",
            "SIGNER_MNEMONIC": "words",
            "FARCASTER_FID": " 977233 ",
            "FARCASTER_NETWORK": "TESTNET",
            "HYPERSNAP_HTTP": "http://node:3381",
            "HYPERSNAP_API_KEY": "key",
            "HYPERSNAP_USERNAME": "user",
            "HYPERSNAP_PASSWORD": "pass",
            "TELEGRAM_BOT_TOKEN": "123:abc",
            "TELEGRAM_ALLOWED_USERS": "111, @alice,,",
        }
        config = apply_env_overrides(Config(), env)

        assert config.signer.private_key == "0xabc"
        assert config.signer.mnemonic == "words"
        assert config.account.fid == 977233
        assert config.node.network == "testnet"
        assert config.node.http_addr == "http://node:3381"
        assert config.node.api_key == "key"
        assert config.node.username == "user"
        assert config.node.password == "pass"
        assert config.channels.telegram.token == "123:abc"
        assert config.channels.telegram.enabled is True
        assert config.channels.telegram.allow_from == ["111", "@alice"]

    def test_blank_values_keep_file_values(self):
        config = Config(account=AccountConfig(fid=5))
        apply_env_overrides(config, {"FARCASTER_FID": "  ", "HYPERSNAP_HTTP": ""})
        assert config.account.fid == 5
        assert config.node.http_addr == ""

    def test_non_numeric_fid(self):
        with pytest.raises(ConfigurationError, match="FARCASTER_FID"):
            apply_env_overrides(Config(), {"FARCASTER_FID": "abc"})


class TestConfigPersistence:
    """Tests for config file operations."""

    def test_get_config_path(self):
        path = get_config_path()
        assert path.name == "config.json"
        assert ".hypercast" in str(path)

    def test_save_and_load_config(self, tmp_path):
        config_path = tmp_path / "config.json"

        with patch("hypercast.config.schema.get_config_path", return_value=config_path):
            config = Config()
            config.account.fid = 42
            config.node.http_addr = "http://127.0.0.1:3381"
            config.channels.telegram.allow_from = ["111"]
            save_config(config)

            loaded = load_config(environ={})
            assert loaded.account.fid == 42
            assert loaded.node.http_addr == "http://127.0.0.1:3381"
            assert loaded.channels.telegram.allow_from == ["111"]

    def test_env_wins_over_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"account": {"fid": 1}}))

        loaded = load_config(config_path, environ={"FARCASTER_FID": "2"})
        assert loaded.account.fid == 2

    def test_load_config_missing_file(self, tmp_path):
        config = load_config(tmp_path / "nonexistent.json", environ={})
        assert config.account.fid == 0

    def test_load_config_invalid_json(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text("not valid json {{{")

        with pytest.raises(ConfigurationError, match="Invalid config file"):
            load_config(config_path, environ={})

    def test_load_config_wrong_types(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"account": {"fid": "many"}}))

        with pytest.raises(ConfigurationError):
            load_config(config_path, environ={})

    def test_save_creates_parent_dirs(self, tmp_path):
        config_path = tmp_path / "nested" / "dir" / "config.json"
        save_config(Config(), config_path)
        assert config_path.exists()
        assert json.loads(config_path.read_text())["node"]["network"] == "mainnet"
