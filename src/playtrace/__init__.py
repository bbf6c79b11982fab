"""
playtrace - client-side analytics batching

Records application/game events, buffers them in memory and ships them
to a collector in batches over HTTP.

Usage:
    from playtrace import AnalyticsClient

    client = AnalyticsClient()
    await client.initialize("https://analytics.example.com", "my-api-key")

    client.track_session_start()
    client.track_level_complete("forest-1", time_seconds=93.5)
    client.track_currency_earned("gold", 100, source="quest")

    # Host lifecycle hooks
    await client.on_pause(True)
    await client.shutdown()
"""

from .client import AnalyticsClient
from .config import AnalyticsConfig
from .errors import AnalyticsError, ConfigurationError, InvalidEventError
from .event_queue import EventQueue
from .events import Event, PropertyValue, TrackOutcome
from .flush import FlushEngine, FlushState
from .scheduler import FlushScheduler
from .serializer import JsonSerializer
from .session import SessionContext
from .transport import ConsoleTransport, DeliveryResult, EventTransport, HttpTransport

__version__ = "0.1.0"

__all__ = [
    # Client
    "AnalyticsClient",
    "AnalyticsConfig",
    # Pipeline
    "Event",
    "PropertyValue",
    "TrackOutcome",
    "SessionContext",
    "EventQueue",
    "FlushEngine",
    "FlushState",
    "FlushScheduler",
    "JsonSerializer",
    # Transports
    "EventTransport",
    "DeliveryResult",
    "HttpTransport",
    "ConsoleTransport",
    # Exceptions
    "AnalyticsError",
    "ConfigurationError",
    "InvalidEventError",
]
