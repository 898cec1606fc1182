"""
Logging setup for the odhlint CLI, plus a per-check logger adapter.

``setup_logging`` runs once from main.py; modules log through
``logging.getLogger(__name__)``. Console level comes from the CLI
flags, then ODHLINT_LOG_LEVEL, then WARNING. ODHLINT_LOG_FILE adds a
file handler at ODHLINT_LOG_FILE_LEVEL (or the console level).

Checks run on a worker pool, so detailed formats carry the thread
name and executor messages are tagged with the check ID via
``check_logger``.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping

ENV_LOG_LEVEL = "ODHLINT_LOG_LEVEL"
ENV_LOG_FILE = "ODHLINT_LOG_FILE"
ENV_LOG_FILE_LEVEL = "ODHLINT_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)-5s [%(threadName)s] %(name)s:%(lineno)d: %(message)s"

# Console format per threshold, most verbose first.
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_FILE_FORMAT = (_DETAILED, "%Y-%m-%d %H:%M:%S")

# Kept at WARNING unless the console runs at DEBUG.
_NOISY_LOGGERS = ("urllib3", "asyncio")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Replace the root logger's handlers with a stderr handler and an optional file handler."""
    console_level = _parse_level(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_handler(logging.StreamHandler(sys.stderr), console_level, *_console_format(console_level)))

    root_level = console_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root.addHandler(_handler(logging.FileHandler(log_file, encoding="utf-8"), file_level, *_FILE_FORMAT))
        root_level = min(root_level, file_level)
    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _console_format(level: int) -> tuple[str, str | None]:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return fmt, datefmt
    return "%(message)s", None


def _handler(handler: logging.Handler, level: int, fmt: str, datefmt: str | None) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown or empty means WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric


# ── Per-check logging ───────────────────────────────────────────


class CheckLoggerAdapter(logging.LoggerAdapter):
    """Prefixes messages with ``[check-id]`` and records it as ``check_id``."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        check_id = self.extra["check_id"]
        kwargs.setdefault("extra", {})["check_id"] = check_id
        return f"[{check_id}] {msg}", kwargs


def check_logger(logger: logging.Logger, check_id: str) -> CheckLoggerAdapter:
    return CheckLoggerAdapter(logger, {"check_id": check_id})
