"""Fake transports for tests."""

from __future__ import annotations

import asyncio
import json

from playtrace.transport.base import DeliveryResult, EventTransport


class RecordingTransport(EventTransport):
    """
    Fake transport that records every delivery attempt.

    fail_next: number of upcoming sends to fail
    always_fail: fail every send
    delay: seconds to wait inside send (to hold a flush in flight)
    """

    def __init__(self, fail_next: int = 0, always_fail: bool = False, delay: float = 0.0):
        self.fail_next = fail_next
        self.always_fail = always_fail
        self.delay = delay
        self.attempts: list[dict] = []
        self.delivered: list[list[dict]] = []
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    async def send(self, endpoint, payload, headers, timeout) -> DeliveryResult:
        events = json.loads(payload)["events"]
        self.attempts.append({"endpoint": endpoint, "headers": dict(headers), "events": events})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.always_fail or self.fail_next > 0:
            self.fail_next = max(0, self.fail_next - 1)
            return DeliveryResult.failure("HTTP 503: unavailable", status_code=503)
        self.delivered.append(events)
        return DeliveryResult.success(200)

    @property
    def delivered_names(self) -> list[str]:
        return [e["event_name"] for batch in self.delivered for e in batch]
