"""Logging configuration for retrykit."""

from .logging import (
    ROOT_LOGGER,
    ConsoleFormatter,
    JsonFormatter,
    configure_logging,
    configure_logging_from_settings,
)

__all__ = [
    "ROOT_LOGGER",
    "ConsoleFormatter",
    "JsonFormatter",
    "configure_logging",
    "configure_logging_from_settings",
]
