"""Main analytics client: event recording API and lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .config import AnalyticsConfig
from .errors import ConfigurationError, InvalidEventError
from .event_queue import EventQueue
from .events import DEFAULT_CATEGORY, Event, TrackOutcome
from .flush import FlushEngine
from .log import SwitchableLogger
from .scheduler import FlushScheduler
from .serializer import JsonSerializer
from .session import SessionContext
from .trackers import TrackerMixin
from .transport.base import EventTransport
from .transport.http import HttpTransport


logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


@dataclass
class AnalyticsClient(TrackerMixin):
    """
    Client-side analytics: records events and ships them in batches.

    Usage:
        client = AnalyticsClient()
        await client.initialize("https://analytics.example.com", "my-key")

        client.set_player_id("player-42")
        client.track("boss_defeated", "combat", {"boss": "hydra"}, numeric_value=312)
        client.track_currency_earned("gold", 100, source="quest")

        await client.shutdown()

    Or as a context manager:
        async with AnalyticsClient(config=AnalyticsConfig(api_key="my-key")) as client:
            await client.initialize()
            client.track_session_start()
    """
    config: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    transport: EventTransport | None = None
    serializer: JsonSerializer = field(default_factory=JsonSerializer)

    # Internal state
    _session: SessionContext | None = field(default=None, init=False)
    _queue: EventQueue | None = field(default=None, init=False)
    _engine: FlushEngine | None = field(default=None, init=False)
    _scheduler: FlushScheduler | None = field(default=None, init=False)
    _initialized: bool = field(default=False, init=False)
    _session_ended: bool = field(default=False, init=False)
    _log: SwitchableLogger = field(init=False)

    def __post_init__(self):
        self._log = SwitchableLogger(logger, enabled=self.config.enable_logging)

    @classmethod
    def from_config_file(cls, path: str, **kwargs) -> AnalyticsClient:
        """Create a client from a YAML or JSON config file."""
        return cls(config=AnalyticsConfig.from_file(path), **kwargs)

    # Initialization

    async def initialize(self, server_url: str | None = None, api_key: str | None = None) -> bool:
        """
        Start the client: create the session and start the flush timer.

        Arguments override the configured values. Calling this again once
        initialized has no effect.

        Returns True if the client is initialized.
        """
        if self._initialized:
            return True

        config = self.config.replace(server_url=server_url, api_key=api_key)
        self._log.enabled = config.enable_logging
        try:
            config.validate()
        except ConfigurationError as e:
            self._log.error(f"Initialization failed: {e}")
            return False
        self.config = config

        if self.transport is None:
            self.transport = HttpTransport()
        await self.transport.start()

        self._session = SessionContext.start(
            platform=config.platform,
            app_version=config.app_version,
        )
        self._queue = EventQueue(max_size=config.max_queue_size)
        self._engine = FlushEngine(
            queue=self._queue,
            transport=self.transport,
            endpoint=config.endpoint,
            headers={API_KEY_HEADER: config.api_key},
            serializer=self.serializer,
            batch_size=config.batch_size,
            timeout=config.delivery_timeout,
            log=self._log,
        )
        self._scheduler = FlushScheduler(
            engine=self._engine,
            queue=self._queue,
            interval=config.flush_interval,
        )
        self._scheduler.start()
        self._initialized = True

        self._log.info(
            f"Initialized - session: {self._session.short_id}..., platform: {self._session.platform}"
        )
        return True

    def set_player_id(self, player_id: str | None) -> None:
        """Set the player id for events recorded from now on."""
        if self._session is None:
            self._log.warning("Not initialized, player id ignored. Call initialize() first.")
            return
        self._session.set_player_id(player_id)
        self._log.info(f"Player ID set: {self._session.player_id}")

    def new_session(self) -> str | None:
        """Start a new session (e.g. after returning from a long pause)."""
        if self._session is None:
            self._log.warning("Not initialized, cannot start a session. Call initialize() first.")
            return None
        session_id = self._session.new_session()
        self._session_ended = False
        self._log.info(f"New session: {self._session.short_id}...")
        return session_id

    # Recording

    def track(
        self,
        name: str,
        category: str = DEFAULT_CATEGORY,
        properties: Mapping[str, Any] | None = None,
        numeric_value: float = 0.0,
        string_value: str = "",
    ) -> TrackOutcome:
        """
        Record an event (non-blocking).

        Reaching batch_size queued events schedules a flush.
        """
        if not self._initialized:
            self._log.warning("Not initialized, event dropped. Call initialize() first.")
            return TrackOutcome.NOT_INITIALIZED

        try:
            event = Event.create(
                name,
                self._session,
                category=category,
                properties=properties,
                numeric_value=numeric_value,
                string_value=string_value,
            )
        except InvalidEventError as e:
            self._log.warning(f"Invalid event dropped: {e}")
            return TrackOutcome.INVALID_EVENT

        if not self._queue.enqueue(event):
            self._log.warning(f"Queue full ({self._queue.max_size}), event dropped: {name}")
            return TrackOutcome.QUEUE_OVERFLOW

        if self._queue.size >= self.config.batch_size:
            self._scheduler.trigger("threshold")

        return TrackOutcome.QUEUED

    async def flush(self) -> int:
        """Send queued events now. Returns the number of events delivered."""
        if not self._initialized:
            return 0
        return await self._engine.flush()

    async def wait_for_flushes(self) -> None:
        """Wait until flushes scheduled by threshold triggers have finished."""
        if self._scheduler is not None:
            await self._scheduler.join()

    # Host lifecycle signals

    async def on_pause(self, paused: bool) -> None:
        if paused and self._initialized:
            await self.flush()

    async def on_focus(self, has_focus: bool) -> None:
        if not has_focus and self._initialized:
            await self.flush()

    async def on_quit(self) -> None:
        """Record the end of the session (once per session) and flush."""
        if not self._initialized:
            return
        if not self._session_ended:
            self.track_session_end(self._session.elapsed())
            self._session_ended = True
        await self.flush()

    async def shutdown(self) -> None:
        """
        Best-effort teardown: end the session, stop the timer, send what
        can be sent and close the transport. Undelivered events are lost.
        """
        if not self._initialized:
            return

        await self.on_quit()
        await self._scheduler.stop()
        await self._engine.flush(drain=True)
        await self.transport.stop()
        self._initialized = False

        discarded = self._queue.clear()
        if discarded:
            self._log.warning(f"Shut down with {discarded} undelivered events, discarding them")
        self._log.info(f"Shut down. Stats: {self.stats}")

    async def __aenter__(self) -> AnalyticsClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    # Read-only state

    @property
    def events_sent(self) -> int:
        return self._engine.events_sent if self._engine is not None else 0

    @property
    def events_dropped(self) -> int:
        """Events dropped because the queue was full."""
        return self._queue.dropped if self._queue is not None else 0

    @property
    def queue_size(self) -> int:
        return self._queue.size if self._queue is not None else 0

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def session_id(self) -> str:
        return self._session.session_id if self._session is not None else ""

    @property
    def player_id(self) -> str:
        return self._session.player_id if self._session is not None else ""

    @property
    def stats(self) -> dict:
        """Get client statistics."""
        return {
            **(self._engine.stats if self._engine is not None else {}),
            "events_sent": self.events_sent,
            "events_dropped": self.events_dropped,
            "queue_size": self.queue_size,
            "initialized": self._initialized,
            "session_id": self.session_id,
        }
