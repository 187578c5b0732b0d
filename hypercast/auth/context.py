"""Authentication context: who we are and which node we talk to.

Call :func:`load_auth` once at startup and pass the result to the action and
view layers.
"""

import logging
from dataclasses import dataclass

from hypercast.client import HttpNodeClient, NodeClient
from hypercast.config import Config
from hypercast.crypto import SigningIdentity, identity_from_values
from hypercast.errors import ConfigurationError, TransportError
from hypercast.protocol.messages import FarcasterNetwork

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    """Signing identity, account and node client for one process."""

    fid: int
    identity: SigningIdentity
    client: NodeClient
    network: FarcasterNetwork = FarcasterNetwork.MAINNET

    @property
    def public_key_hex(self) -> str:
        """The signer public key that must be registered on-chain."""
        return self.identity.public_key_hex


def require_fid(config: Config) -> int:
    """Return the configured FID.

    Raises:
        ConfigurationError: If no positive FID is configured.
    """
    fid = config.account.fid
    if fid <= 0:
        raise ConfigurationError("FARCASTER_FID is not set or invalid")
    return fid


def create_client(config: Config) -> NodeClient:
    """Build the node client from config.

    Raises:
        ConfigurationError: If no node address is configured.
    """
    node = config.node
    if not node.http_addr.strip():
        raise ConfigurationError(
            "HYPERSNAP_HTTP is not set. Set it to the HTTP address of a "
            "Snapchain-compatible node, e.g. https://snapchain.example.com:3381"
        )
    return HttpNodeClient(
        base_url=node.http_addr.strip(),
        api_key=node.api_key or None,
        username=node.username or None,
        password=node.password or None,
        timeout=node.timeout,
    )


async def load_auth(
    config: Config,
    client: NodeClient | None = None,
    check_node: bool = True,
) -> AuthContext:
    """Validate configuration, derive the signer and check the node.

    Raises:
        ConfigurationError: Missing/invalid FID, credential or node address.
        TransportError: The node is unreachable (only when ``check_node``).
    """
    fid = require_fid(config)
    identity = identity_from_values(config.signer.private_key, config.signer.mnemonic)
    client = client or create_client(config)

    if check_node:
        try:
            info = await client.fetch_node_status()
        except TransportError as e:
            raise TransportError(
                f"Cannot reach node at {client.address}. Make sure the node is running. ({e})",
                status_code=e.status_code,
            ) from e
        logger.info(
            "Connected to node %s: %d shard(s), %d messages",
            client.address,
            info.shard_count,
            info.message_count,
        )

    logger.info("Loaded signer for FID %d: pubkey %s", fid, identity.public_key_hex)
    return AuthContext(
        fid=fid,
        identity=identity,
        client=client,
        network=config.node.farcaster_network,
    )
