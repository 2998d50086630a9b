"""
Transport implementation on top of httpx.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .errors import TransportError
from .types import Transport, TransportRequest, TransportResponse

logger = logging.getLogger("lookup_cascade.transport")


@dataclass
class TimeoutConfig:
    """Transport timeouts in seconds."""

    connect: float = 5.0
    read: float = 10.0
    write: float = 10.0


class HttpxTransport(Transport):
    """Asynchronous transport backed by httpx.AsyncClient."""

    def __init__(
        self,
        timeout: Optional[TimeoutConfig] = None,
        httpx_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._timeout = timeout or TimeoutConfig()
        if httpx_client is not None:
            self._client = httpx_client
        else:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    connect=self._timeout.connect,
                    read=self._timeout.read,
                    write=self._timeout.write,
                    pool=self._timeout.connect,
                ),
                follow_redirects=True,
            )
        self._closed = False

    async def send(self, request: TransportRequest) -> TransportResponse:
        """Send a request. httpx failures are raised as TransportError."""
        if self._closed:
            raise RuntimeError("Transport has been closed")

        logger.debug(f"HttpxTransport.send: method={request.method}, url={request.url}, params={request.params}")

        try:
            response = await self._client.request(
                method=request.method,
                url=request.url,
                params=request.params,
                headers=request.headers,
            )
        except httpx.HTTPError as error:
            raise TransportError(f"{type(error).__name__}: {error}") from error

        logger.debug(f"HttpxTransport.send: status={response.status_code}, url={request.url}")

        return TransportResponse(
            body=response.content,
            status_code=response.status_code,
            headers=dict(response.headers),
        )

    async def close(self) -> None:
        """Close the underlying client."""
        if not self._closed:
            self._closed = True
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
