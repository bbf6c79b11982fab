"""Client configuration."""

from __future__ import annotations

import dataclasses
import logging
import math
import os
from dataclasses import dataclass, field
from typing import Any

from .errors import ConfigurationError


logger = logging.getLogger(__name__)

EVENTS_PATH = "/v1/events"

# Supported ranges; values outside only produce a warning
FLUSH_INTERVAL_RANGE = (5.0, 60.0)
BATCH_SIZE_RANGE = (5, 100)
MAX_QUEUE_SIZE_RANGE = (100, 5000)

NUMERIC_FIELDS = {
    "flush_interval": float,
    "batch_size": int,
    "max_queue_size": int,
    "delivery_timeout": float,
}
STRING_FIELDS = ("server_url", "api_key", "app_version")


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes", "on")


def _as_number(value: Any, kind: type) -> Any:
    """Convert numeric strings (env vars, quoted YAML); other values are left for validate()."""
    if isinstance(value, str):
        try:
            return kind(value.strip())
        except ValueError:
            return value
    if kind is int and isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass
class AnalyticsConfig:
    """
    Configuration for the analytics client.

    Can be set via:
    - Constructor arguments
    - Environment variables (PLAYTRACE_*)
    - Config file (YAML or JSON)
    """
    # Collector base URL (events go to <server_url>/v1/events)
    server_url: str = field(
        default_factory=lambda: os.environ.get("PLAYTRACE_SERVER_URL", "http://localhost")
    )

    # Opaque key sent with every request
    api_key: str = field(
        default_factory=lambda: os.environ.get("PLAYTRACE_API_KEY", "")
    )

    # Seconds between timer flushes
    flush_interval: float = field(
        default_factory=lambda: os.environ.get("PLAYTRACE_FLUSH_INTERVAL", "10")
    )

    # Events per batch; reaching this many queued events triggers a flush
    batch_size: int = field(
        default_factory=lambda: os.environ.get("PLAYTRACE_BATCH_SIZE", "25")
    )

    # Queued events before new ones are dropped
    max_queue_size: int = field(
        default_factory=lambda: os.environ.get("PLAYTRACE_MAX_QUEUE_SIZE", "500")
    )

    # Info/warning output (errors are always logged)
    enable_logging: bool = field(
        default_factory=lambda: _env_bool("PLAYTRACE_ENABLE_LOGGING", "true")
    )

    # Upper bound for one delivery attempt (seconds)
    delivery_timeout: float = 15.0

    # Reported with every event
    app_version: str = field(
        default_factory=lambda: os.environ.get("PLAYTRACE_APP_VERSION", "0.0.0")
    )

    # None = detect from the running system
    platform: str | None = None

    def __post_init__(self):
        if self.server_url is None:
            self.server_url = ""
        if isinstance(self.server_url, str):
            self.server_url = self.server_url.rstrip("/")
        for name, kind in NUMERIC_FIELDS.items():
            setattr(self, name, _as_number(getattr(self, name), kind))

    @property
    def endpoint(self) -> str:
        return f"{self.server_url}{EVENTS_PATH}"

    def validate(self) -> None:
        """
        Check the configuration before the client starts.

        Raises:
            ConfigurationError: if the client cannot run with these values
        """
        self._check_types()

        if not self.api_key:
            raise ConfigurationError("API key is not set")
        if not self.server_url:
            raise ConfigurationError("Server URL is not set")
        if self.flush_interval <= 0:
            raise ConfigurationError(f"flush_interval must be positive, got {self.flush_interval}")
        if self.delivery_timeout <= 0:
            raise ConfigurationError(f"delivery_timeout must be positive, got {self.delivery_timeout}")
        if self.batch_size < 1:
            raise ConfigurationError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.max_queue_size < 1:
            raise ConfigurationError(f"max_queue_size must be at least 1, got {self.max_queue_size}")
        if self.batch_size > self.max_queue_size:
            raise ConfigurationError(
                f"batch_size ({self.batch_size}) cannot exceed max_queue_size ({self.max_queue_size})"
            )

        for name, (low, high) in (
            ("flush_interval", FLUSH_INTERVAL_RANGE),
            ("batch_size", BATCH_SIZE_RANGE),
            ("max_queue_size", MAX_QUEUE_SIZE_RANGE),
        ):
            value = getattr(self, name)
            if not low <= value <= high:
                logger.warning(f"{name}={value} is outside the supported range {low}-{high}")

    def _check_types(self) -> None:
        for name in STRING_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigurationError(f"{name} must be a string, got {value!r}")
        if self.platform is not None and not isinstance(self.platform, str):
            raise ConfigurationError(f"platform must be a string, got {self.platform!r}")
        if not isinstance(self.enable_logging, bool):
            raise ConfigurationError(f"enable_logging must be true or false, got {self.enable_logging!r}")
        for name, kind in NUMERIC_FIELDS.items():
            value = getattr(self, name)
            expected = (int,) if kind is int else (int, float)
            if isinstance(value, bool) or not isinstance(value, expected):
                kind_name = "an integer" if kind is int else "a number"
                raise ConfigurationError(f"{name} must be {kind_name}, got {value!r}")
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value}")

    def replace(self, **changes: Any) -> AnalyticsConfig:
        """Copy with some fields changed (None values are ignored)."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return dataclasses.replace(self, **changes)

    def to_dict(self, redact: bool = True) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        if redact and data["api_key"]:
            data["api_key"] = data["api_key"][:4] + "..."
        return data

    @classmethod
    def from_dict(cls, data: dict) -> AnalyticsConfig:
        """Create config from dictionary (unknown keys are rejected)."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str) -> AnalyticsConfig:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> AnalyticsConfig:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str) -> AnalyticsConfig:
        """Load config from a .yaml/.yml or .json file."""
        if path.endswith((".yaml", ".yml")):
            return cls.from_yaml(path)
        if path.endswith(".json"):
            return cls.from_json(path)
        raise ConfigurationError(f"Unsupported config file type: {path}")
