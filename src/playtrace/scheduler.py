"""Flush triggers: periodic timer plus on-demand (threshold/lifecycle) flushes."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from .event_queue import EventQueue
from .flush import FlushEngine


logger = logging.getLogger(__name__)


@dataclass
class FlushScheduler:
    """
    Calls the flush engine on an interval and on request.

    All triggers go through FlushEngine.flush(), whose own mutual
    exclusion turns overlapping triggers into no-ops.
    """
    engine: FlushEngine
    queue: EventQueue
    interval: float = 10.0

    # Internal state
    _loop: asyncio.AbstractEventLoop | None = field(default=None, init=False)
    _timer_task: asyncio.Task | None = field(default=None, init=False)
    _pending: set = field(default_factory=set, init=False)
    _running: bool = field(default=False, init=False)
    _timer_flushing: bool = field(default=False, init=False)

    def start(self) -> None:
        """Start the timer on the running event loop."""
        if self._running:
            return
        self._loop = asyncio.get_running_loop()
        self._running = True
        self._timer_task = self._loop.create_task(self._timer_loop())

    async def _timer_loop(self) -> None:
        """Flush every interval for as long as the scheduler runs."""
        logger.info(f"Flush timer started (interval={self.interval}s)")

        while self._running:
            try:
                await asyncio.sleep(self.interval)
            except asyncio.CancelledError:
                logger.info("Flush timer cancelled")
                break
            if not self._running or self.queue.size == 0:
                continue

            self._timer_flushing = True
            try:
                await self.engine.flush()
            except Exception as e:
                logger.error(f"Flush timer error: {e}")
            finally:
                self._timer_flushing = False

    def trigger(self, reason: str = "manual") -> bool:
        """
        Schedule one flush without waiting for it.

        Safe to call from other threads. Returns False if nothing was
        scheduled: not started, a flush is already in flight, or one is
        already scheduled and has not finished yet.
        """
        if self._loop is None or self._loop.is_closed() or not self._running:
            return False
        if self.engine.in_flight or self._pending:
            return False

        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            current = None

        if current is self._loop:
            task = self._loop.create_task(self._run(reason))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        else:
            future = asyncio.run_coroutine_threadsafe(self._run(reason), self._loop)
            self._pending.add(future)
            future.add_done_callback(self._pending.discard)
        return True

    async def _run(self, reason: str) -> int:
        logger.debug(f"Flush triggered ({reason})")
        try:
            return await self.engine.flush()
        except Exception as e:
            logger.error(f"Flush ({reason}) failed: {e}")
            return 0

    async def join(self) -> None:
        """Wait for flushes scheduled by trigger() to finish."""
        while self._pending:
            pending = [
                p if isinstance(p, asyncio.Future) else asyncio.wrap_future(p)
                for p in list(self._pending)
            ]
            await asyncio.gather(*pending, return_exceptions=True)

    async def stop(self) -> None:
        """
        Stop the timer and wait for scheduled flushes.

        A delivery already in progress is never interrupted: the timer is
        cancelled only while it sleeps, otherwise its flush runs to the end.
        """
        self._running = False
        if self._timer_task is not None:
            if not self._timer_flushing:
                self._timer_task.cancel()
            try:
                await self._timer_task
            except asyncio.CancelledError:
                pass
            self._timer_task = None
        await self.join()

    @property
    def running(self) -> bool:
        return self._running
