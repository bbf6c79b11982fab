"""Convenience trackers built on top of track()."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from .events import TrackOutcome


MAX_ERROR_MESSAGE_LENGTH = 500


class TrackerMixin(ABC):
    """
    Domain-specific helpers with fixed names, categories and properties.

    These only assemble arguments; all validation and queueing happens
    in track(). Amounts and durations always go in numeric_value.
    """

    @abstractmethod
    def track(
        self,
        name: str,
        category: str = "general",
        properties: Mapping[str, Any] | None = None,
        numeric_value: float = 0.0,
        string_value: str = "",
    ) -> TrackOutcome:
        """Record one event; implemented by the client."""

    def track_value(self, name: str, value: float | str) -> TrackOutcome:
        """Track an event carrying a single numeric or string value."""
        if isinstance(value, str):
            return self.track(name, string_value=value)
        return self.track(name, numeric_value=value)

    # Session

    def track_session_start(self) -> TrackOutcome:
        return self.track("session_start", "session")

    def track_session_end(self, duration_seconds: float = 0.0) -> TrackOutcome:
        return self.track("session_end", "session", numeric_value=duration_seconds)

    # Progression

    def track_level_start(self, level_name: str) -> TrackOutcome:
        return self.track("level_start", "progression", string_value=level_name)

    def track_level_complete(self, level_name: str, time_seconds: float = 0.0) -> TrackOutcome:
        return self.track(
            "level_complete", "progression",
            numeric_value=time_seconds, string_value=level_name,
        )

    def track_level_fail(self, level_name: str, time_seconds: float = 0.0) -> TrackOutcome:
        return self.track(
            "level_fail", "progression",
            numeric_value=time_seconds, string_value=level_name,
        )

    # Economy

    def track_currency_earned(self, currency: str, amount: float, source: str = "") -> TrackOutcome:
        return self.track(
            "currency_earned", "economy",
            properties={"currency": currency, "source": source},
            numeric_value=amount,
        )

    def track_currency_spent(self, currency: str, amount: float, item: str = "") -> TrackOutcome:
        return self.track(
            "currency_spent", "economy",
            properties={"currency": currency, "item": item},
            numeric_value=amount,
        )

    def track_item_acquired(self, item_id: str, item_type: str = "", source: str = "") -> TrackOutcome:
        return self.track(
            "item_acquired", "economy",
            properties={"item_id": item_id, "item_type": item_type, "source": source},
        )

    # Errors

    def track_error(self, error_type: str, message: str) -> TrackOutcome:
        return self.track(
            "error", "error",
            properties={
                "error_type": error_type,
                "message": (message or "")[:MAX_ERROR_MESSAGE_LENGTH],
            },
            string_value=error_type,
        )

    def track_exception(self, exc: BaseException) -> TrackOutcome:
        return self.track_error(type(exc).__name__, str(exc))

    # UI / onboarding

    def track_ui(self, action: str, element: str = "") -> TrackOutcome:
        return self.track(
            "ui_interaction", "ui",
            properties={"action": action, "element": element},
            string_value=action,
        )

    def track_tutorial(self, step: str, completed: bool = False) -> TrackOutcome:
        return self.track(
            "tutorial", "onboarding",
            properties={"step": step, "completed": completed},
            string_value=step,
        )
