"""Logging setup for the ``retrykit`` logger hierarchy.

Library modules log through stdlib loggers (retrykit.retry,
retrykit.concurrency). Nothing is printed until an application installs a
handler; configure_logging() does that with a human-readable console
format or JSON lines for log aggregation.

Example:
    >>> from retrykit.runtime.observability import configure_logging
    >>> configure_logging(format="json", level="DEBUG")
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, TextIO

import orjson

if TYPE_CHECKING:
    from retrykit.foundation.config import LoggingSettings

ROOT_LOGGER = "retrykit"

# Attributes every LogRecord carries; anything else came in through ``extra=``
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_COLORS = {"reset": "\033[0m", "dim": "\033[2m", "bold": "\033[1m", "cyan": "\033[36m", "red": "\033[31m"}
_NO_COLORS = dict.fromkeys(_COLORS, "")
_LEVEL_COLORS = {
    "DEBUG": "\033[34m", "INFO": "\033[32m", "WARNING": "\033[33m",
    "ERROR": "\033[31m", "CRITICAL": "\033[1;31m",
}


def _extras(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED}


class ConsoleFormatter(logging.Formatter):
    """Human-readable output. Format: timestamp [level] message key=value ..."""

    def __init__(self, colors: bool = False, show_timestamp: bool = True) -> None:
        super().__init__()
        self.colors = colors
        self.show_timestamp = show_timestamp

    def format(self, record: logging.LogRecord) -> str:
        c = _COLORS if self.colors else _NO_COLORS
        ts = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        parts = [f"{c['dim']}{ts}{c['reset']}"] if self.show_timestamp else []
        level = _LEVEL_COLORS.get(record.levelname, "") if self.colors else ""
        parts += [f"{level}[{record.levelname.lower()}]{c['reset']}", f"{c['bold']}{record.getMessage()}{c['reset']}"]
        parts += [f"{c['cyan']}{k}{c['reset']}={v}" for k, v in sorted(_extras(record).items())]
        line = " ".join(parts)
        if record.exc_info:
            line += f"\n{c['red']}{self.formatException(record.exc_info)}{c['reset']}"
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str, option=orjson.OPT_NON_STR_KEYS).decode()


def configure_logging(
    format: str = "console",  # noqa: A002 - shadows builtin but matches stdlib
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> logging.Handler:
    """Install a single handler on the retrykit logger.

    Calling again replaces the handler installed by a previous call.
    Format: "console" (human), "json" (machine), "none" (silent).
    """
    handler: logging.Handler
    match format:
        case "console":
            stream = output or sys.stderr
            use_colors = getattr(stream, "isatty", lambda: False)() if colors is None else colors
            handler = logging.StreamHandler(stream)
            handler.setFormatter(ConsoleFormatter(colors=use_colors))
        case "json":
            handler = logging.StreamHandler(output or sys.stdout)
            handler.setFormatter(JsonFormatter())
        case "none":
            handler = logging.NullHandler()
        case _:
            raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")

    logger = logging.getLogger(ROOT_LOGGER)
    for old in [h for h in logger.handlers if getattr(h, "_retrykit", False)]:
        logger.removeHandler(old)
    handler._retrykit = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


def configure_logging_from_settings(settings: LoggingSettings | None = None) -> logging.Handler:
    """configure_logging() driven by RETRYKIT_LOG_* settings."""
    if settings is None:
        from retrykit.foundation.config import get_settings
        settings = get_settings().logging
    return configure_logging(settings.format, settings.level)
