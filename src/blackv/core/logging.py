"""
BlackV Logging: colorized or structured logging, kept off the live display.

Features:
- Every line is tagged with the client layer that emitted it
  (stream / conversation / session / transport / tui)
- Color formatter for dev mode (auto-detects TTY)
- JSON structured formatter (BLACKV_LOG_FORMAT=json)
- Logs to a file by default, since the terminal belongs to the chat view
- Suppresses noisy third-party loggers (httpx, httpcore)
- Stream timing helper for request -> first chunk -> end latency

Stream stats (pass via logger.info(..., extra={...})):
    model, status_code, duration_ms, chunks, records, failures
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from datetime import datetime, timezone


# --- Color codes ---
COLORS = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[1;31m",  # Bold red
    "RESET": "\033[0m",
    "DIM": "\033[2m",
}

# One color per layer of the client, keyed by the second part of the logger name
COMPONENT_COLORS = {
    "stream": "\033[36m",  # Cyan
    "conversation": "\033[35m",  # Magenta
    "session": "\033[34m",  # Blue
    "transport": "\033[33m",  # Yellow
    "tui": "\033[32m",  # Green
    "main": "\033[32m",
}

DEFAULT_LOG_FILE = "blackv.log"

# Extra fields describing one streamed response, in display order
STREAM_FIELDS = (
    "model",
    "status_code",
    "duration_ms",
    "chunks",
    "records",
    "failures",
)


def component_of(logger_name: str) -> str:
    """Map a logger name to the client layer that emitted it.

    "blackv.stream.pipeline" -> "stream"; third-party loggers keep their
    top-level name ("httpx.client" -> "httpx").
    """
    parts = logger_name.split(".")
    if parts[0] == "blackv" and len(parts) > 1:
        return parts[1]
    return parts[0]


def stream_fields(record: logging.LogRecord) -> dict:
    """Stream stats attached to a record via ``extra``, skipping unset ones."""
    fields = {}
    for key in STREAM_FIELDS:
        value = getattr(record, key, None)
        if value is not None:
            fields[key] = value
    return fields


class ColorFormatter(logging.Formatter):
    """Text formatter: ``12:00:01 [session] INFO: Response complete  model=... records=5``.

    Stream stats passed as ``extra`` are appended as key=value pairs so the
    text log carries the same numbers as the JSON one.
    """

    def __init__(self, use_color: bool = True):
        super().__init__(
            fmt="%(asctime)s [%(component)s] %(levelname)s: %(message)s%(stats)s",
            datefmt="%H:%M:%S",
        )
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        # Decorate a copy; other handlers may share the original record
        view = logging.makeLogRecord(record.__dict__)
        component = component_of(record.name)
        fields = stream_fields(record)
        stats = "  " + " ".join(f"{k}={v}" for k, v in fields.items()) if fields else ""

        if self.use_color:
            reset = COLORS["RESET"]
            level_color = COLORS.get(record.levelname, "")
            component_color = COMPONENT_COLORS.get(component, COLORS["DIM"])
            view.levelname = f"{level_color}{record.levelname}{reset}"
            component = f"{component_color}{component}{reset}"
            if stats:
                stats = f"{COLORS['DIM']}{stats}{reset}"

        view.component = component
        view.stats = stats
        return super().format(view)


class StructuredFormatter(logging.Formatter):
    """JSON log formatter.

    Each log line is a single JSON object. Stream stats passed via
    logger.info("msg", extra={"model": "...", "duration_ms": 42})
    are grouped under a "stream" key:

        {"ts": ..., "level": "INFO", "component": "session",
         "logger": "blackv.session.controller", "msg": "Response complete",
         "stream": {"model": "llama3.2", "duration_ms": 42}}

    Enable with: BLACKV_LOG_FORMAT=json
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "component": component_of(record.name),
            "logger": record.name,
            "msg": record.getMessage(),
        }

        fields = stream_fields(record)
        if fields:
            entry["stream"] = fields

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class StreamTimer:
    """Tracks timing across the stages of one streamed response.

    Usage:
        timer = StreamTimer()
        timer.mark("first_chunk")
        # ... stream ...
        timer.mark("stream_end")
        timer.summary()  # -> "first_chunk: 0.4s | stream_end: 3.1s | Total: 3.5s"
    """

    def __init__(self):
        self._marks: list[tuple[str, float]] = []
        self._start = time.monotonic()

    def mark(self, stage: str) -> None:
        """Record a timestamp for a stage, once. Later marks of the same stage are ignored."""
        if any(name == stage for name, _ in self._marks):
            return
        self._marks.append((stage, time.monotonic()))

    def elapsed(self, stage: str) -> float | None:
        """Time between the previous mark and this one."""
        for i, (name, ts) in enumerate(self._marks):
            if name == stage:
                prev_ts = self._marks[i - 1][1] if i > 0 else self._start
                return ts - prev_ts
        return None

    def total(self) -> float:
        return time.monotonic() - self._start

    def summary(self) -> str:
        parts = []
        for i, (name, ts) in enumerate(self._marks):
            prev_ts = self._marks[i - 1][1] if i > 0 else self._start
            parts.append(f"{name}: {ts - prev_ts:.1f}s")
        parts.append(f"Total: {self.total():.1f}s")
        return " | ".join(parts)


def _should_use_color(stream) -> bool:
    """Auto-detect color support."""
    env_val = os.getenv("BLACKV_LOG_COLOR", "auto").lower()
    if env_val == "true":
        return True
    if env_val == "false":
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def setup_logging() -> None:
    """Configure logging for the entire application.

    Call this once at startup.

    Env vars:
        BLACKV_LOG_LEVEL   DEBUG / INFO / WARNING / ERROR (default: INFO)
        BLACKV_LOG_COLOR   true / false / auto (default: auto, TTY detection)
        BLACKV_LOG_FORMAT  text / json (default: text)
        BLACKV_LOG_FILE    path, or "-" for stderr (default: blackv.log)
    """
    level_name = os.getenv("BLACKV_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    log_format = os.getenv("BLACKV_LOG_FORMAT", "text").lower()
    log_file = os.getenv("BLACKV_LOG_FILE", DEFAULT_LOG_FILE)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if log_file == "-":
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        use_color = _should_use_color(sys.stderr)
    else:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        use_color = False

    if log_format == "json":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = ColorFormatter(use_color=use_color)

    handler.setLevel(level)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    # These flood the log with HTTP request/response details
    for noisy_logger in [
        "httpx",
        "httpcore",
        "httpcore.http11",
        "httpcore.connection",
        "asyncio",
    ]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    logger = logging.getLogger("blackv")
    logger.debug("Logging configured (level=%s, format=%s)", level_name, log_format)
