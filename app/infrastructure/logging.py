"""Structured logging: JSON lines with credential scrubbing."""

from __future__ import annotations

import json
import sys
import time
import uuid
from typing import Any, Optional


def _get_scrubber():
    """Deferred import to avoid an import cycle with the key manager."""
    from app.security.key_manager import get_key_manager

    return get_key_manager()


class StructuredLogger:
    """Emits one JSON object per line and scrubs known secrets from it."""

    def __init__(self, trace_id: Optional[str] = None, output=None):
        self.trace_id = trace_id or str(uuid.uuid4())[:8]
        self._output = output or sys.stderr
        self._timers: dict[str, float] = {}

    def _scrub(self, text: str) -> str:
        return _get_scrubber().scrub_text(text)

    def _emit(self, data: dict[str, Any]) -> None:
        data["trace_id"] = self.trace_id
        data["timestamp"] = time.time()
        try:
            line = json.dumps(data, ensure_ascii=False, default=str)
            line = self._scrub(line)
            self._output.write(line + "\n")
            self._output.flush()
        except (OSError, TypeError, ValueError) as exc:
            # Last-resort fallback so logger failures are never silent.
            fallback = {
                "event": "logger_internal_error",
                "trace_id": self.trace_id,
                "timestamp": time.time(),
                "error": str(exc),
            }
            sys.stderr.write(json.dumps(fallback, ensure_ascii=False, default=str) + "\n")
            sys.stderr.flush()

    def check_start(self, check_name: str, **extra: Any) -> None:
        self._timers[check_name] = time.time()
        self._emit({"event": "check_start", "check": check_name, **extra})

    def check_end(self, check_name: str, *, issues_count: int = 0, **extra: Any) -> None:
        start = self._timers.pop(check_name, time.time())
        duration_ms = round((time.time() - start) * 1000, 1)
        self._emit({
            "event": "check_end",
            "check": check_name,
            "duration_ms": duration_ms,
            "issues_count": issues_count,
            **extra,
        })

    def route_lookup(self, source: str, **extra: Any) -> None:
        self._emit({"event": "route_lookup", "source": source, **extra})

    def error(self, check_name: str, error: str, **extra: Any) -> None:
        self._emit({"event": "error", "check": check_name, "error": self._scrub(error), **extra})

    def warning(self, check_name: str, message: str, **extra: Any) -> None:
        self._emit({"event": "warning", "check": check_name, "message": self._scrub(message), **extra})

    def summary(self, **extra: Any) -> None:
        self._emit({"event": "summary", **extra})


_logger: Optional[StructuredLogger] = None


def get_logger(trace_id: Optional[str] = None) -> StructuredLogger:
    global _logger
    if _logger is None or (trace_id and _logger.trace_id != trace_id):
        _logger = StructuredLogger(trace_id=trace_id)
    return _logger
