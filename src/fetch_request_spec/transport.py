"""
Hand a ResolvedRequest to httpx.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import httpx

from .types import ResolvedRequest

logger = logging.getLogger(__name__)

LOG_PREFIX = "[HttpxTransport]"


@dataclass
class TransportResponse:
    """What came back for one ResolvedRequest."""
    status: int
    reason: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    # JSON when the body parses, else the decoded text
    data: Any = None
    ok: bool = False


@runtime_checkable
class Transport(Protocol):
    """Anything that can send a resolved request."""
    async def send(self, request: ResolvedRequest) -> TransportResponse: ...


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except json.JSONDecodeError:
        return response.text


class HttpxTransport:
    """
    Sends resolved requests through an ``httpx.AsyncClient``.

    Timeout, redirect policy and auth travel with each ResolvedRequest, so
    the client is only a connection pool. A client passed in is borrowed and
    left open; one created here is closed by :meth:`aclose`.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client
        self._borrowed = client is not None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
            logger.debug(f"{LOG_PREFIX} Opened client")
        return self._client

    async def aclose(self) -> None:
        if self._client is None or self._borrowed:
            return
        await self._client.aclose()
        self._client = None
        logger.debug(f"{LOG_PREFIX} Closed client")

    async def __aenter__(self) -> "HttpxTransport":
        self._get_client()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def send(self, request: ResolvedRequest) -> TransportResponse:
        client = self._get_client()

        auth: Any = httpx.USE_CLIENT_DEFAULT
        if request.auth is not None:
            auth = httpx.BasicAuth(request.auth.user, request.auth.password)

        logger.debug(f"{LOG_PREFIX} Sending {request.method} {request.url}")

        try:
            response = await client.request(
                request.method,
                request.url,
                headers=request.headers.to_httpx(),
                content=request.content,
                timeout=request.timeout_seconds,
                follow_redirects=request.follow_redirects,
                auth=auth,
            )
        except httpx.RequestError as e:
            logger.error(f"{LOG_PREFIX} {request.method} {request.url} failed: {e}")
            raise

        return TransportResponse(
            status=response.status_code,
            reason=response.reason_phrase,
            url=str(response.url),
            headers=dict(response.headers),
            data=_decode(response),
            ok=response.is_success,
        )
