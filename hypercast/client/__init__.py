"""Remote node clients."""

from hypercast.client.base import NodeClient
from hypercast.client.http import HttpNodeClient

__all__ = ["NodeClient", "HttpNodeClient"]
