"""In-memory ring buffer of recent log records, served by ``GET /api/logs``."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from typing import TypedDict


class LogEntry(TypedDict):
    ts: str  # ISO-8601, UTC
    level: str
    logger: str
    message: str


class RingBufferHandler(logging.Handler):
    def __init__(self, maxlen: int = 2000) -> None:
        super().__init__()
        self.records: deque[LogEntry] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        self.records.append(
            {
                "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": message,
            }
        )

    def get_entries(
        self,
        limit: int = 200,
        level: str | None = None,
        logger_name: str | None = None,
    ) -> list[LogEntry]:
        """Most recent matching entries, oldest first."""
        out: list[LogEntry] = []
        for entry in reversed(self.records):
            if level and entry["level"] != level.upper():
                continue
            if logger_name and logger_name not in entry["logger"]:
                continue
            out.append(entry)
            if len(out) >= limit:
                break
        out.reverse()
        return out


_FORMAT = "%(levelname)s %(name)s: %(message)s"
_NOISY_LOGGERS = ("httpcore", "httpx", "multipart", "watchfiles")


def configure_logging(level: str, handler: RingBufferHandler | None = None) -> None:
    """Send every logger to stderr and to *handler*; safe to call more than once."""
    logging.basicConfig(format=_FORMAT)
    handler = handler or log_handler
    root = logging.getLogger()
    if handler not in root.handlers:
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)
    # Quiet down noisy third-party loggers
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# Process-wide: the root logger is process-wide too.
log_handler = RingBufferHandler()
