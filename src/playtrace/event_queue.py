"""Bounded in-memory queue of pending events."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field

from .events import Event


@dataclass
class EventQueue:
    """
    Thread-safe FIFO buffer with a drop-on-overflow policy.

    At most one batch is taken out at a time. Events of that batch still
    count against max_size until they are acknowledged or requeued, so a
    failed batch always fits back at the head of the queue.
    """
    max_size: int = 500

    _events: deque[Event] = field(default_factory=deque, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)
    _in_flight: int = field(default=0, init=False)
    _batch_out: bool = field(default=False, init=False)
    _dropped: int = field(default=0, init=False)

    def enqueue(self, event: Event) -> bool:
        """
        Append an event to the tail (non-blocking).

        Returns True if queued, False if dropped because the queue is full.
        """
        with self._lock:
            if len(self._events) + self._in_flight >= self.max_size:
                self._dropped += 1
                return False
            self._events.append(event)
            return True

    def dequeue_batch(self, n: int) -> list[Event]:
        """Remove and return the first min(n, size) events."""
        with self._lock:
            if self._batch_out:
                raise RuntimeError("A batch is already in flight")
            count = min(n, len(self._events))
            batch = [self._events.popleft() for _ in range(count)]
            if batch:
                self._batch_out = True
                self._in_flight = len(batch)
            return batch

    def acknowledge(self, batch: list[Event]) -> None:
        """Release the in-flight batch after successful delivery."""
        with self._lock:
            self._release(batch)

    def requeue(self, batch: list[Event]) -> None:
        """Put a failed batch back at the head, keeping its order."""
        with self._lock:
            self._release(batch)
            self._events.extendleft(reversed(batch))

    def _release(self, batch: list[Event]) -> None:
        # caller holds the lock
        if not self._batch_out or len(batch) != self._in_flight:
            raise RuntimeError("Batch does not match the one in flight")
        self._batch_out = False
        self._in_flight = 0

    def clear(self) -> int:
        """Discard all pending events, returning how many were removed."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
            return count

    def snapshot(self) -> list[Event]:
        """Copy of the pending events in delivery order."""
        with self._lock:
            return list(self._events)

    @property
    def size(self) -> int:
        return len(self._events)

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def dropped(self) -> int:
        """Events rejected because the queue was at capacity."""
        return self._dropped
