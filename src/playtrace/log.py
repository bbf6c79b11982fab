"""Logging helpers."""

from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class SwitchableLogger(logging.LoggerAdapter):
    """
    Logger adapter that can be muted by the enable_logging option.

    Errors always get through; everything below ERROR is dropped
    while disabled.
    """

    def __init__(self, logger: logging.Logger, enabled: bool = True, prefix: str = "[playtrace]"):
        super().__init__(logger, {})
        self.enabled = enabled
        self.prefix = prefix

    def isEnabledFor(self, level: int) -> bool:
        if not self.enabled and level < logging.ERROR:
            return False
        return super().isEnabledFor(level)

    def process(self, msg, kwargs):
        return f"{self.prefix} {msg}", kwargs


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for command line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
