#!/usr/bin/env python3
"""
CLI tool for checking a collector setup.

Usage:
    python -m playtrace.cli send-test --server-url https://analytics.example.com --api-key KEY
    python -m playtrace.cli send-test --config playtrace.yaml --count 10
    python -m playtrace.cli send-test --api-key KEY --dry-run
    python -m playtrace.cli check-config playtrace.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

import yaml
from colorama import Fore, Style, just_fix_windows_console

from .client import AnalyticsClient
from .config import AnalyticsConfig
from .errors import ConfigurationError
from .log import configure_logging
from .transport.console import ConsoleTransport


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}"


def print_counters(client: AnalyticsClient) -> None:
    """Pretty print the client's counters."""
    print(f"\n{colorize('Counters:', Style.BRIGHT)}")

    rows = [
        ("Session ID", client.session_id or "(none)"),
        ("Events Sent", client.events_sent),
        ("Events Dropped", client.events_dropped),
        ("Queue Size", client.queue_size),
        ("Delivery Failures", client.stats.get("delivery_failures", 0)),
    ]
    for label, value in rows:
        print(f"  {colorize(label + ':', Fore.CYAN)} {value}")


def _load_config(args) -> AnalyticsConfig:
    config = AnalyticsConfig.from_file(args.config) if args.config else AnalyticsConfig()
    return config.replace(server_url=args.server_url, api_key=args.api_key)


async def cmd_send_test(args) -> int:
    """Send test events and report whether the collector accepted them."""
    try:
        config = _load_config(args)
    except (OSError, ValueError, TypeError, yaml.YAMLError, ConfigurationError) as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return 1

    transport = ConsoleTransport() if args.dry_run else None
    client = AnalyticsClient(config=config, transport=transport)

    if not await client.initialize():
        print(colorize("Error: client could not be initialized (check the API key)", Fore.RED), file=sys.stderr)
        return 1

    print(colorize("Endpoint:", Style.BRIGHT), config.endpoint)

    try:
        if args.player_id:
            client.set_player_id(args.player_id)
        for i in range(args.count):
            client.track(
                "test_event",
                "debug",
                {"index": i, "source": "cli"},
                numeric_value=i,
                string_value=args.message,
            )
        await client.wait_for_flushes()
        while client.queue_size and await client.flush():
            pass
        delivered = client.queue_size == 0
        print_counters(client)
    finally:
        await client.shutdown()

    if delivered:
        print(colorize(f"\nDelivered {args.count} test events", Fore.GREEN))
        return 0

    last_error = client.stats.get("last_error") or "unknown error"
    print(colorize(f"\nDelivery failed: {last_error}", Fore.RED), file=sys.stderr)
    return 1


def cmd_check_config(args) -> int:
    """Load and validate a config file."""
    try:
        config = AnalyticsConfig.from_file(args.path)
        config.validate()
    except (OSError, ValueError, TypeError, yaml.YAMLError, ConfigurationError) as e:
        print(colorize(f"Invalid config: {e}", Fore.RED), file=sys.stderr)
        return 1

    print(json.dumps(config.to_dict(), indent=2))
    print(colorize("Config OK", Fore.GREEN))
    return 0


def main(argv: list[str] | None = None) -> int:
    just_fix_windows_console()

    parser = argparse.ArgumentParser(
        description="CLI tool for the playtrace analytics client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # send-test command
    send_parser = subparsers.add_parser("send-test", help="Send test events to the collector")
    send_parser.add_argument("--config", help="YAML or JSON config file")
    send_parser.add_argument("--server-url", help="Collector base URL")
    send_parser.add_argument("--api-key", help="API key")
    send_parser.add_argument("--player-id", help="Player ID to attach")
    send_parser.add_argument("--count", type=int, default=1, help="Number of test events")
    send_parser.add_argument("--message", default="hello from playtrace", help="string_value of the events")
    send_parser.add_argument("--dry-run", action="store_true", help="Print batches instead of sending")

    # check-config command
    check_parser = subparsers.add_parser("check-config", help="Validate a config file")
    check_parser.add_argument("path", help="YAML or JSON config file")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "send-test":
        return asyncio.run(cmd_send_test(args))
    elif args.command == "check-config":
        return cmd_check_config(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
