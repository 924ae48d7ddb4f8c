"""Apache Tika adapter.

Tika detects the mime type of whatever bytes it receives (html, pdf, office
documents, ...) and returns the extracted plain text.
"""

from __future__ import annotations

import httpx

from crawlsearch.config import get_settings
from crawlsearch.errors import ExtractionServiceError


class TikaClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.tika_url).rstrip("/")
        self.timeout = httpx.Timeout(timeout or settings.tika_timeout_sec, connect=10.0)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def stop(self) -> None:
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None

    async def _client_ready(self) -> httpx.AsyncClient:
        if self._client is None:
            await self.start()
        assert self._client is not None
        return self._client

    async def extract(self, data: bytes) -> str:
        client = await self._client_ready()
        try:
            response = await client.put(
                f"{self.base_url}/tika",
                content=data,
                headers={
                    "Content-Type": "application/octet-stream",
                    "Accept": "text/plain",
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ExtractionServiceError(
                f"Tika returned HTTP {exc.response.status_code}.",
                code="tika_http_error",
            ) from exc
        except httpx.HTTPError as exc:
            raise ExtractionServiceError(f"Tika request failed: {exc}", code="tika_transport_error") from exc
        return response.text
