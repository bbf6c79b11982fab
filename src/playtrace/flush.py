"""Flush engine: drains the queue in batches and reconciles delivery."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from .event_queue import EventQueue
from .events import Event
from .log import SwitchableLogger
from .serializer import JsonSerializer
from .transport.base import DeliveryResult, EventTransport


DEFAULT_DELIVERY_TIMEOUT = 15.0


class FlushState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


@dataclass
class FlushEngine:
    """
    Sends queued events to the collector, one batch at a time.

    Only one flush runs at any moment; a flush requested while another
    is in flight returns immediately without sending anything.

    On success the batch is discarded and, while at least a full batch
    is still queued, the next one is sent in the same flush. On failure
    the batch goes back to the head of the queue and the flush ends;
    the retry happens on the next trigger. There is no backoff.
    """
    queue: EventQueue
    transport: EventTransport
    endpoint: str
    headers: dict[str, str] = field(default_factory=dict)
    serializer: JsonSerializer = field(default_factory=JsonSerializer)
    batch_size: int = 25
    timeout: float = DEFAULT_DELIVERY_TIMEOUT
    log: logging.LoggerAdapter = field(
        default_factory=lambda: SwitchableLogger(logging.getLogger(__name__))
    )

    # Internal state
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)
    _stats: dict = field(default_factory=dict, init=False)

    def __post_init__(self):
        self._stats = {
            "events_sent": 0,
            "batches_sent": 0,
            "delivery_failures": 0,
            "last_error": None,
        }

    async def flush(self, drain: bool = False) -> int:
        """
        Deliver queued events.

        With drain=False (triggers) batches keep going while a full batch
        is queued; with drain=True until the queue is empty.

        Returns the number of events delivered by this call.
        """
        if self._lock.locked():
            self.log.debug("Flush already in flight, skipping")
            return 0
        if self.queue.size == 0:
            return 0

        sent = 0
        async with self._lock:
            while True:
                batch = self.queue.dequeue_batch(self.batch_size)
                if not batch:
                    break

                try:
                    result = await self._deliver(batch)
                except asyncio.CancelledError:
                    self.queue.requeue(batch)
                    raise

                if not result.ok:
                    self.queue.requeue(batch)
                    self._stats["delivery_failures"] += 1
                    self._stats["last_error"] = result.reason
                    self.log.warning(
                        f"Send failed: {result.reason} - re-queuing {len(batch)} events"
                    )
                    break

                self.queue.acknowledge(batch)
                sent += len(batch)
                self._stats["events_sent"] += len(batch)
                self._stats["batches_sent"] += 1
                self.log.info(f"Sent {len(batch)} events (total: {self._stats['events_sent']})")

                remaining = self.queue.size
                if remaining == 0 or (not drain and remaining < self.batch_size):
                    break

        return sent

    async def _deliver(self, batch: list[Event]) -> DeliveryResult:
        """Serialize and send one batch; every problem becomes a failure."""
        headers = {"Content-Type": self.serializer.content_type, **self.headers}

        try:
            payload = self.serializer.serialize(batch)
            return await asyncio.wait_for(
                self.transport.send(self.endpoint, payload, headers, self.timeout),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            return DeliveryResult.failure(f"timed out after {self.timeout}s")
        except Exception as e:
            self.log.error(f"Transport error: {e}")
            return DeliveryResult.failure(f"{type(e).__name__}: {e}")

    @property
    def state(self) -> FlushState:
        return FlushState.IN_FLIGHT if self._lock.locked() else FlushState.IDLE

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    @property
    def events_sent(self) -> int:
        return self._stats["events_sent"]

    @property
    def stats(self) -> dict:
        """Get flush statistics."""
        return {
            **self._stats,
            "state": self.state.value,
        }
