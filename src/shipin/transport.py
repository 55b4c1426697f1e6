"""HTTP transport used by provider adapters."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from .exceptions import TransportError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TransportRequest:
    """Single outbound request; ``timeout`` overrides the client default."""

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    json: Any | None = None
    params: Mapping[str, Any] | None = None
    timeout: float | None = None


@dataclass(slots=True)
class TransportResponse:
    content: bytes
    status_code: int


class HttpTransport:
    """Thin wrapper over ``httpx.AsyncClient`` returning raw bytes and status.

    One transport (and its connection pool) may be shared by every adapter.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._client

    async def send(self, request: TransportRequest) -> TransportResponse:
        client = self._get_client()
        timeout = request.timeout if request.timeout is not None else self.timeout_seconds
        try:
            response = await client.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                json=request.json,
                params=request.params,
                timeout=timeout,
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "transport.send.failed",
                extra={"method": request.method, "url": request.url, "error": str(exc)},
            )
            raise TransportError(exc) from exc
        logger.debug(
            "transport.send.done",
            extra={
                "method": request.method,
                "url": request.url,
                "status_code": response.status_code,
            },
        )
        return TransportResponse(content=response.content, status_code=response.status_code)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()
