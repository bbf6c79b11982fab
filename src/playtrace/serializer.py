"""Batch payload serialization."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Sequence

from .events import Event


@dataclass
class JsonSerializer:
    """
    Encodes a batch as {"events": [...]} for the collector.

    Property values keep their JSON types; the encoder escapes quotes,
    backslashes and control characters in strings.
    """
    content_type: str = "application/json"

    # Keep non-ASCII text as-is (UTF-8) instead of \\u escapes
    ensure_ascii: bool = False

    def serialize(self, events: Sequence[Event]) -> bytes:
        body = {"events": [event.to_dict() for event in events]}
        text = json.dumps(
            body,
            ensure_ascii=self.ensure_ascii,
            allow_nan=False,
            separators=(",", ":"),
        )
        return text.encode("utf-8")

    def deserialize(self, payload: bytes | str) -> list[dict[str, Any]]:
        """Decode a payload back into wire objects."""
        data = json.loads(payload)
        return data["events"]
