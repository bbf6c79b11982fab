"""HTTP transport for the collector."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from .base import DeliveryResult, EventTransport


@dataclass
class HttpTransport(EventTransport):
    """
    Transport that POSTs batches to the collector with httpx.

    Any 2xx response is a success. Other statuses, timeouts and
    connection errors are reported as failures so the batch is retried.

    Config:
        verify: TLS verification flag or CA bundle path
        mock_transport: optional httpx transport (used in tests)
    """
    verify: bool | str = True
    mock_transport: httpx.AsyncBaseTransport | None = None

    # Internal state
    _client: httpx.AsyncClient | None = field(default=None, init=False)

    async def start(self) -> None:
        if self._client is not None:
            return
        kwargs: dict[str, Any] = {"verify": self.verify}
        if self.mock_transport is not None:
            kwargs["transport"] = self.mock_transport
        self._client = httpx.AsyncClient(**kwargs)

    async def stop(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send(
        self,
        endpoint: str,
        payload: bytes,
        headers: dict[str, str],
        timeout: float,
    ) -> DeliveryResult:
        if self._client is None:
            await self.start()

        try:
            response = await self._client.post(
                endpoint,
                content=payload,
                headers=headers,
                timeout=timeout,
            )
        except httpx.TimeoutException:
            return DeliveryResult.failure(f"timed out after {timeout}s")
        except httpx.HTTPError as e:
            return DeliveryResult.failure(f"{type(e).__name__}: {e}")

        if response.is_success:
            return DeliveryResult.success(response.status_code)

        return DeliveryResult.failure(
            f"HTTP {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
        )

    async def health_check(self) -> bool:
        return self._client is not None and not self._client.is_closed
