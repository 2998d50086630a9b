"""
HTTP implementation of RemoteAccountProbe.
"""
import logging
from typing import Optional

import httpx

from .types import AccountStatus, RemoteAccountProbe

logger = logging.getLogger("sync_status.probe")

ACCOUNT_STATUS_PATH = "/account/status"


class HttpAccountProbe(RemoteAccountProbe):
    """
    Reads the account status from `GET <base_url>/account/status`.

    The endpoint answers `{"status": "<value>"}`; values outside AccountStatus
    map to UNKNOWN. Transport failures, non-2xx answers and malformed bodies
    raise.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        headers: Optional[dict] = None,
        httpx_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_client = httpx_client is None
        self._client = httpx_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json", **(headers or {})},
        )

    @property
    def url(self) -> str:
        return f"{self._base_url}{ACCOUNT_STATUS_PATH}"

    async def check_status(self) -> AccountStatus:
        logger.debug(f"HttpAccountProbe: GET {self.url}")
        response = await self._client.get(self.url)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected account status payload: {payload!r}")

        status = AccountStatus.parse(payload.get("status"))
        logger.debug(f"HttpAccountProbe: account status={status.value}")
        return status

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpAccountProbe":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
