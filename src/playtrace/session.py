"""Process-wide session identity attached to every event."""

from __future__ import annotations

import platform as _platform
import time
import uuid
from dataclasses import dataclass, field


# platform.system() -> collector platform name
_PLATFORM_NAMES = {
    "windows": "windows",
    "darwin": "macos",
    "linux": "linux",
    "android": "android",
    "ios": "ios",
    "ipados": "ios",
    "emscripten": "webgl",
}


def detect_platform() -> str:
    """Resolve the platform name reported with every event."""
    system = _platform.system().lower()
    return _PLATFORM_NAMES.get(system, system or "unknown")


def _new_session_id() -> str:
    return str(uuid.uuid4())


@dataclass
class SessionContext:
    """
    Identity fields stamped onto events at the moment they are recorded.

    session_id and player_id change over the lifetime of the process;
    platform and app_version are fixed when the context is created.
    """
    platform: str
    app_version: str
    session_id: str = field(default_factory=_new_session_id)
    player_id: str = ""
    started_at: float = field(default_factory=time.monotonic)

    @classmethod
    def start(cls, platform: str | None = None, app_version: str = "0.0.0") -> SessionContext:
        """Create a context for a freshly initialized client."""
        return cls(
            platform=platform or detect_platform(),
            app_version=app_version,
        )

    def set_player_id(self, player_id: str | None) -> None:
        """Applies to events recorded after this call only."""
        self.player_id = str(player_id) if player_id else ""

    def new_session(self) -> str:
        """Start a new session and return its id."""
        self.session_id = _new_session_id()
        self.started_at = time.monotonic()
        return self.session_id

    def elapsed(self) -> float:
        """Seconds since the current session started."""
        return time.monotonic() - self.started_at

    @property
    def short_id(self) -> str:
        return self.session_id[:8]
