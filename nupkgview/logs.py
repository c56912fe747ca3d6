"""Logging helpers: level names, log sanitising and a recent-log buffer.

Recent log lines are kept in memory so they can be attached to an issue
report; before they leave the process, home directory, user name and e-mail
addresses are masked.
"""
from __future__ import annotations

import collections
import logging
import os
import re
from typing import Deque, Optional

__all__ = [
    "TRACE",
    "LEVELS",
    "sanitize_log",
    "LogMemory",
    "configure_logging",
]

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# user-facing level names -> logging levels; "off" silences everything
LEVELS = {
    "off": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "verbose": logging.DEBUG,
    "trace": TRACE,
}

LOG_FORMAT = "%(levelname)s: %(message)s"

_EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def sanitize_log(text: str) -> str:
    """Mask home directory, user name and e-mail addresses in *text*."""
    username = os.environ.get("USERNAME") or os.environ.get("USER") or ""
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE") or ""

    if home:
        text = re.sub(re.escape(home), "<home>", text, flags=re.IGNORECASE)
    if username:
        text = re.sub(re.escape(username), "<user>", text, flags=re.IGNORECASE)
    return _EMAIL_RE.sub("<email>", text)


class LogMemory(logging.Handler):
    """Keep the last *max_logs* formatted records in memory."""

    def __init__(self, max_logs: int = 50, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._logs: Deque[str] = collections.deque(maxlen=max_logs)
        self.setFormatter(logging.Formatter(LOG_FORMAT))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._logs.append(sanitize_log(self.format(record)))
        except Exception:  # pragma: no cover
            self.handleError(record)

    def get_all(self) -> str:
        return "\n".join(self._logs)

    def clear(self) -> None:
        self._logs.clear()


def configure_logging(level: str = "info", memory: Optional[LogMemory] = None) -> int:
    """Configure the root logger for *level* (one of :data:`LEVELS`).

    Returns the numeric level applied.  When *memory* is given it is attached
    to the root logger as well.
    """
    try:
        numeric = LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level {level!r}; expected one of {', '.join(LEVELS)}") from None

    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(numeric)
    if memory is not None and memory not in root.handlers:
        root.addHandler(memory)
    return numeric
