"""Base transport interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Outcome of one delivery attempt."""
    ok: bool
    status_code: int | None = None
    reason: str | None = None

    @classmethod
    def success(cls, status_code: int | None = None) -> DeliveryResult:
        return cls(ok=True, status_code=status_code)

    @classmethod
    def failure(cls, reason: str, status_code: int | None = None) -> DeliveryResult:
        return cls(ok=False, status_code=status_code, reason=reason)


class EventTransport(ABC):
    """
    Abstract base class for delivery transports.

    Transports receive a serialized batch and report whether the
    collector accepted it. They should not raise for network problems;
    those are reported as a failed DeliveryResult.
    """

    @abstractmethod
    async def send(
        self,
        endpoint: str,
        payload: bytes,
        headers: dict[str, str],
        timeout: float,
    ) -> DeliveryResult:
        """Deliver one payload to the endpoint."""
        ...

    async def start(self) -> None:
        """Initialize the transport (called on client initialization)."""
        pass

    async def stop(self) -> None:
        """Release resources (called on client shutdown)."""
        pass

    async def health_check(self) -> bool:
        """Check if the transport is usable."""
        return True
