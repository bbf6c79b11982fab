"""Console transport for development/debugging."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass

from .base import DeliveryResult, EventTransport


@dataclass
class ConsoleTransport(EventTransport):
    """
    Transport that writes batches to console instead of the network.

    Always reports success. Useful for dry runs and local debugging.
    """
    # Output destination
    stream: str = "stdout"  # stdout | stderr

    # Output format
    format: str = "compact"  # compact | pretty

    # Prefix for each line
    prefix: str = "[PLAYTRACE] "

    async def send(
        self,
        endpoint: str,
        payload: bytes,
        headers: dict[str, str],
        timeout: float,
    ) -> DeliveryResult:
        out = sys.stdout if self.stream == "stdout" else sys.stderr
        events = json.loads(payload)["events"]

        print(f"{self.prefix}POST {endpoint} ({len(events)} events)", file=out)
        for event in events:
            print(f"{self.prefix}{self._format_event(event)}", file=out)

        return DeliveryResult.success()

    def _format_event(self, event: dict) -> str:
        if self.format == "pretty":
            return json.dumps(event, indent=2)
        return (
            f"{event['client_ts']} "
            f"{event['event_category']}/{event['event_name']} "
            f"player={event['player_id'] or '-'} "
            f"num={event['numeric_value']} "
            f"str={event['string_value']!r} "
            f"props={json.dumps(event['properties'])}"
        )
