"""Base class for remote node clients."""

from abc import ABC, abstractmethod

from hypercast.protocol.hub import HubMessage, NodeInfo, UserDataField
from hypercast.protocol.messages import ReactionType, SignedMessage


class NodeClient(ABC):
    """
    Abstract interface to a remote Farcaster node.

    Every method may raise :class:`~hypercast.errors.TransportError` (the node
    could not be reached or refused our credentials) or
    :class:`~hypercast.errors.RemoteRejectionError` (the node rejected the
    request). Submissions are not idempotent; avoiding duplicates is the
    caller's job.
    """

    @abstractmethod
    async def submit(self, message: SignedMessage) -> HubMessage:
        """Submit a signed message and return the message the node accepted."""
        pass

    @abstractmethod
    async def fetch_by_author(self, fid: int, page_size: int = 20) -> list[HubMessage]:
        """Recent casts authored by ``fid``."""
        pass

    @abstractmethod
    async def fetch_cast(self, fid: int, hash: bytes) -> HubMessage:
        """A single cast by its id."""
        pass

    @abstractmethod
    async def fetch_by_parent(self, fid: int, hash: bytes) -> list[HubMessage]:
        """Replies to the cast ``(fid, hash)``."""
        pass

    @abstractmethod
    async def fetch_by_target(
        self,
        fid: int,
        hash: bytes,
        reaction_type: ReactionType | None = None,
    ) -> list[HubMessage]:
        """Reactions to the cast ``(fid, hash)``, optionally of one type."""
        pass

    @abstractmethod
    async def fetch_profile_fields(self, fid: int) -> list[UserDataField]:
        """Profile fields (username, display name, bio, ...) of ``fid``."""
        pass

    @abstractmethod
    async def fetch_node_status(self) -> NodeInfo:
        """Shard count, message count and per-shard details."""
        pass

    async def close(self) -> None:
        """Release network resources."""
        pass

    @property
    def address(self) -> str:
        """Human-readable node address for logs."""
        return "<unknown>"
