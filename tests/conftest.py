"""Shared test fixtures for playtrace tests."""

from __future__ import annotations

import pytest

from playtrace.config import AnalyticsConfig
from playtrace.events import Event
from playtrace.session import SessionContext

from fakes import RecordingTransport


@pytest.fixture
def session() -> SessionContext:
    return SessionContext(platform="linux", app_version="1.2.3")


@pytest.fixture
def make_event(session):
    """Factory for events bound to the test session."""
    def factory(name: str = "test_event", **kwargs) -> Event:
        return Event.create(name, session, **kwargs)
    return factory


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def config() -> AnalyticsConfig:
    """Config with a long timer so only explicit triggers flush."""
    return AnalyticsConfig(
        server_url="https://collector.test/",
        api_key="test-key",
        flush_interval=60.0,
        batch_size=5,
        max_queue_size=100,
        app_version="1.2.3",
        platform="linux",
    )
