"""Delivery transports - destinations for event batches."""

from .base import DeliveryResult, EventTransport
from .console import ConsoleTransport
from .http import HttpTransport

__all__ = [
    "DeliveryResult",
    "EventTransport",
    "ConsoleTransport",
    "HttpTransport",
]
