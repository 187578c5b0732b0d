"""Node client over the Snapchain/HyperSnap HTTP API using httpx."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from hypercast.client.base import NodeClient
from hypercast.errors import RemoteRejectionError, TransportError
from hypercast.protocol.codec import encode_message
from hypercast.protocol.hub import HubMessage, HubMessagesPage, NodeInfo, UserDataField
from hypercast.protocol.messages import ReactionType, SignedMessage

logger = logging.getLogger(__name__)


def _hex(value: bytes) -> str:
    return "0x" + value.hex()


class HttpNodeClient(NodeClient):
    """
    Client for any node exposing the Farcaster HTTP API
    (HyperSnap, community Snapchain nodes, managed providers).

    Supports HTTP Basic auth and an ``x-api-key`` header. Writes are sent as
    protobuf bytes, reads come back as JSON.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key or None
        self.auth = httpx.BasicAuth(username, password) if username and password else None
        self.timeout = timeout
        self._transport = transport

    @property
    def address(self) -> str:
        return self.base_url

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if extra:
            headers.update(extra)
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            TransportError: Connection failures, timeouts, 401/403, 5xx and
                unreadable responses.
            RemoteRejectionError: Any other non-2xx status.
        """
        url = f"{self.base_url}{path}"
        async with httpx.AsyncClient(
            timeout=self.timeout, auth=self.auth, transport=self._transport
        ) as client:
            try:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    content=content,
                    headers=self._headers(headers),
                )
            except httpx.TransportError as e:
                raise TransportError(f"Cannot reach node at {self.base_url}: {e}") from e

        if response.status_code in (401, 403):
            raise TransportError(
                f"Node refused credentials (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        if response.status_code >= 500:
            raise TransportError(
                f"Node error (HTTP {response.status_code}): {response.text[:500]}",
                status_code=response.status_code,
            )
        if response.status_code >= 400:
            raise self._rejection(response)

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Unreadable response from node: {response.text[:200]}") from e

    @staticmethod
    def _rejection(response: httpx.Response) -> RemoteRejectionError:
        error_code = None
        detail = response.text[:500]
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error_code = body.get("errCode") or body.get("code")
            detail = body.get("details") or body.get("message") or detail
            if error_code is not None:
                error_code = str(error_code)
        return RemoteRejectionError(
            f"Node rejected request (HTTP {response.status_code}): {detail}",
            status_code=response.status_code,
            error_code=error_code,
        )

    @staticmethod
    def _parse(model, data: Any):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise TransportError(f"Unexpected response shape: {e}") from e

    async def _messages(self, path: str, params: dict[str, Any]) -> list[HubMessage]:
        data = await self._request("GET", path, params=params)
        return self._parse(HubMessagesPage, data).messages

    # -- Write --------------------------------------------------------------

    async def submit(self, message: SignedMessage) -> HubMessage:
        logger.debug("Submitting message %s to %s", message.hash_hex, self.base_url)
        data = await self._request(
            "POST",
            "/v1/submitMessage",
            content=encode_message(message),
            headers={"Content-Type": "application/octet-stream"},
        )
        return self._parse(HubMessage, data)

    # -- Casts --------------------------------------------------------------

    async def fetch_by_author(self, fid: int, page_size: int = 20) -> list[HubMessage]:
        return await self._messages(
            "/v1/castsByFid", {"fid": fid, "pageSize": page_size, "reverse": 1}
        )

    async def fetch_cast(self, fid: int, hash: bytes) -> HubMessage:
        data = await self._request("GET", "/v1/castById", params={"fid": fid, "hash": _hex(hash)})
        return self._parse(HubMessage, data)

    async def fetch_by_parent(self, fid: int, hash: bytes) -> list[HubMessage]:
        return await self._messages("/v1/castsByParent", {"fid": fid, "hash": _hex(hash)})

    # -- Reactions ----------------------------------------------------------

    async def fetch_by_target(
        self,
        fid: int,
        hash: bytes,
        reaction_type: ReactionType | None = None,
    ) -> list[HubMessage]:
        params: dict[str, Any] = {"target_fid": fid, "target_hash": _hex(hash)}
        if reaction_type is not None:
            params["reaction_type"] = int(reaction_type)
        return await self._messages("/v1/reactionsByCast", params)

    # -- Profile ------------------------------------------------------------

    async def fetch_profile_fields(self, fid: int) -> list[UserDataField]:
        fields = []
        for message in await self._messages("/v1/userDataByFid", {"fid": fid}):
            body = message.data.user_data_body if message.data else None
            if body is not None:
                fields.append(UserDataField(type=body.type, value=body.value))
        return fields

    # -- Node info ----------------------------------------------------------

    async def fetch_node_status(self) -> NodeInfo:
        data = await self._request("GET", "/v1/info")
        return self._parse(NodeInfo, data)
