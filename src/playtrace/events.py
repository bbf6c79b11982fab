"""Analytics event types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union

from .errors import InvalidEventError
from .session import SessionContext


# Closed set of property value types accepted by the collector
PropertyValue = Union[str, int, float, bool, None]

DEFAULT_CATEGORY = "general"


class TrackOutcome(str, Enum):
    """Result of recording an event."""
    QUEUED = "queued"
    NOT_INITIALIZED = "not_initialized"
    INVALID_EVENT = "invalid_event"
    QUEUE_OVERFLOW = "queue_overflow"

    def __bool__(self) -> bool:
        return self is TrackOutcome.QUEUED


def format_client_timestamp(moment: datetime) -> str:
    """Format a datetime as UTC with millisecond precision."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S.") + f"{moment.microsecond // 1000:03d}"


def _check_text(value: str, what: str) -> str:
    # lone surrogates (e.g. from os.fsdecode) cannot be sent as UTF-8
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidEventError(f"{what} is not valid UTF-8 text: {value!r}") from None
    return value


def validate_property(key: Any, value: Any) -> PropertyValue:
    """Check a single property against the closed value type."""
    if not isinstance(key, str):
        raise InvalidEventError(f"Property key must be a string, got {type(key).__name__}")
    _check_text(key, "Property key")
    if isinstance(value, str):
        return _check_text(value, f"Property {key!r}")
    if value is None or isinstance(value, (bool, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidEventError(f"Property {key!r} is not a finite number: {value}")
        return value
    raise InvalidEventError(
        f"Property {key!r} has unsupported type {type(value).__name__} "
        "(expected str, int, float, bool or None)"
    )


def freeze_properties(properties: Mapping[str, Any] | None) -> Mapping[str, PropertyValue]:
    """Validate properties and return a read-only copy preserving order."""
    if not properties:
        return MappingProxyType({})
    checked = {key: validate_property(key, value) for key, value in properties.items()}
    return MappingProxyType(checked)


def _coerce_numeric(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidEventError(f"numeric_value must be a number, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidEventError(f"numeric_value is not a finite number: {value}")
    return value


@dataclass(frozen=True, slots=True)
class Event:
    """
    A single recorded occurrence.

    Identity fields (player, session, platform, version) are copied from
    the session context when the event is created, so they describe the
    moment the event happened rather than the moment it is delivered.
    """
    name: str
    session_id: str
    client_ts: str
    platform: str
    app_version: str
    player_id: str = ""
    category: str = DEFAULT_CATEGORY
    properties: Mapping[str, PropertyValue] = field(default_factory=lambda: MappingProxyType({}))
    numeric_value: float = 0.0
    string_value: str = ""

    @classmethod
    def create(
        cls,
        name: str,
        session: SessionContext,
        category: str | None = DEFAULT_CATEGORY,
        properties: Mapping[str, Any] | None = None,
        numeric_value: float = 0.0,
        string_value: str | None = "",
        now: datetime | None = None,
    ) -> Event:
        """
        Build an event stamped with the current session identity.

        Raises:
            InvalidEventError: empty name, text that cannot be encoded as UTF-8
                or a value outside the accepted types
        """
        if not isinstance(name, str) or not name:
            raise InvalidEventError("Event name cannot be empty")

        category = category or DEFAULT_CATEGORY
        if not isinstance(category, str):
            raise InvalidEventError(f"Category must be a string, got {type(category).__name__}")
        string_value = "" if string_value is None else str(string_value)

        return cls(
            name=_check_text(name, "Event name"),
            category=_check_text(category, "Category"),
            player_id=_check_text(session.player_id, "player_id"),
            session_id=session.session_id,
            properties=freeze_properties(properties),
            numeric_value=_coerce_numeric(numeric_value),
            string_value=_check_text(string_value, "string_value"),
            platform=_check_text(session.platform, "platform"),
            app_version=_check_text(session.app_version, "app_version"),
            client_ts=format_client_timestamp(now or datetime.now(timezone.utc)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the collector's wire object."""
        return {
            "event_name": self.name,
            "event_category": self.category,
            "player_id": self.player_id,
            "session_id": self.session_id,
            "numeric_value": self.numeric_value,
            "string_value": self.string_value,
            "platform": self.platform,
            "app_version": self.app_version,
            "client_ts": self.client_ts,
            "properties": dict(self.properties),
        }
