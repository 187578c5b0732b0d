"""Configuration schema using Pydantic."""

import json
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from hypercast.errors import ConfigurationError
from hypercast.protocol.messages import FarcasterNetwork


class SignerConfig(BaseModel):
    """Signing credential. Exactly one of the two must be set."""

    private_key: str = ""  # 64 hex chars, optional 0x prefix
    mnemonic: str = ""  # 12 or 24 BIP-39 words


class AccountConfig(BaseModel):
    """Farcaster account configuration."""

    fid: int = 0


class NodeConfig(BaseModel):
    """Remote node configuration."""

    http_addr: str = ""
    network: str = "mainnet"
    api_key: str = ""
    username: str = ""
    password: str = ""
    timeout: float = 30.0

    @property
    def farcaster_network(self) -> FarcasterNetwork:
        """The configured network, defaulting to mainnet for unknown names."""
        try:
            return FarcasterNetwork.from_name(self.network)
        except KeyError:
            return FarcasterNetwork.MAINNET


class TelegramConfig(BaseModel):
    """Telegram channel configuration."""

    enabled: bool = False
    token: str = ""
    allow_from: list[str] = Field(default_factory=list)


class ChannelsConfig(BaseModel):
    """Chat channels configuration."""

    telegram: TelegramConfig = Field(default_factory=TelegramConfig)


class Config(BaseModel):
    """Root configuration."""

    signer: SignerConfig = Field(default_factory=SignerConfig)
    account: AccountConfig = Field(default_factory=AccountConfig)
    node: NodeConfig = Field(default_factory=NodeConfig)
    channels: ChannelsConfig = Field(default_factory=ChannelsConfig)

    @property
    def has_credential(self) -> bool:
        return bool(self.signer.private_key.strip() or self.signer.mnemonic.strip())


def get_config_path() -> Path:
    """Get the config file path."""
    return Path.home() / ".hypercast" / "config.json"


def apply_env_overrides(config: Config, environ: Mapping[str, str] | None = None) -> Config:
    """Overlay environment variables onto ``config`` in place.

    Raises:
        ConfigurationError: If ``FARCASTER_FID`` is not an integer.
    """
    env = os.environ if environ is None else environ

    def get(name: str) -> str:
        return (env.get(name) or "").strip()

    if get("SIGNER_PRIVATE_KEY"):
        config.signer.private_key = get("SIGNER_PRIVATE_KEY")
    if get("SIGNER_MNEMONIC"):
        config.signer.mnemonic = get("SIGNER_MNEMONIC")

    fid = get("FARCASTER_FID")
    if fid:
        try:
            config.account.fid = int(fid)
        except ValueError:
            raise ConfigurationError(f"FARCASTER_FID is not a number: {fid!r}") from None

    if get("FARCASTER_NETWORK"):
        config.node.network = get("FARCASTER_NETWORK").lower()
    if get("HYPERSNAP_HTTP"):
        config.node.http_addr = get("HYPERSNAP_HTTP")
    if get("HYPERSNAP_API_KEY"):
        config.node.api_key = get("HYPERSNAP_API_KEY")
    if get("HYPERSNAP_USERNAME"):
        config.node.username = get("HYPERSNAP_USERNAME")
    if get("HYPERSNAP_PASSWORD"):
        config.node.password = get("HYPERSNAP_PASSWORD")

    if get("TELEGRAM_BOT_TOKEN"):
        config.channels.telegram.token = get("TELEGRAM_BOT_TOKEN")
        config.channels.telegram.enabled = True
    if get("TELEGRAM_ALLOWED_USERS"):
        config.channels.telegram.allow_from = [
            s.strip() for s in get("TELEGRAM_ALLOWED_USERS").split(",") if s.strip()
        ]

    return config


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load configuration from file, then apply environment overrides.

    Raises:
        ConfigurationError: If the file exists but cannot be parsed.
    """
    config_path = config_path or get_config_path()
    config = Config()

    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
            config = Config(**data)
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e

    return apply_env_overrides(config, environ)


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file."""
    config_path = config_path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(config.model_dump_json(indent=2))
