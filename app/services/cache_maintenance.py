"""Route cache expiry job."""

from __future__ import annotations

import datetime as dt
import logging
import threading
import time
from typing import Any

from app.routing.resolver import RouteResolver

_LOGGER = logging.getLogger("trip-health.maintenance")


class RouteCacheSweeper:
    """Deletes route cache rows past the retention window.

    Overlapping runs are skipped, not queued. Running it twice in a row is
    harmless: the second run deletes nothing.
    """

    def __init__(self, resolver: RouteResolver, retention_days: int) -> None:
        self._resolver = resolver
        self.retention_days = retention_days
        self._run_lock = threading.Lock()
        self.last_report: dict[str, Any] | None = None

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    def run_once(self) -> dict[str, Any]:
        if not self._run_lock.acquire(blocking=False):
            _LOGGER.warning("route cache sweep already running, skipping")
            return {"status": "skipped", "reason": "already_running"}

        started_at = dt.datetime.now(dt.timezone.utc)
        started = time.perf_counter()
        try:
            deleted = self._resolver.cleanup_cache()
            report = {
                "status": "success",
                "deleted_count": deleted,
                "duration_seconds": round(time.perf_counter() - started, 4),
                "retention_days": self.retention_days,
                "timestamp": started_at.isoformat(),
            }
            _LOGGER.info("route cache sweep deleted %d entries", deleted)
            self.last_report = report
            return report
        finally:
            self._run_lock.release()


__all__ = ["RouteCacheSweeper"]
