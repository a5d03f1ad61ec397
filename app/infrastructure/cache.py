"""Thread-safe in-memory route cache with tolerance lookup and age expiry."""

from __future__ import annotations

import datetime as dt
import threading
from typing import Any, Optional

from app.domain.models import Coordinates, RouteCacheEntry


def _within(value: float, target: float, tolerance: float) -> bool:
    return target - tolerance <= value <= target + tolerance


class MemoryRouteCache:
    """Process-local stand-in for the persisted route_cache table.

    Lookup mirrors the SQL range scan: same profile, every coordinate within
    the tolerance window, created no earlier than ``not_before``, newest first.
    """

    backend = "memory"

    def __init__(self, max_size: int = 1000):
        self._entries: list[RouteCacheEntry] = []
        self._max_size = max_size
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def find_route(
        self,
        origin: Coordinates,
        destination: Coordinates,
        profile: str,
        *,
        tolerance_deg: float,
        not_before: dt.datetime,
    ) -> Optional[RouteCacheEntry]:
        with self._lock:
            candidates = [
                entry
                for entry in self._entries
                if entry.profile == profile
                and _within(entry.from_lat, origin.latitude, tolerance_deg)
                and _within(entry.from_lon, origin.longitude, tolerance_deg)
                and _within(entry.to_lat, destination.latitude, tolerance_deg)
                and _within(entry.to_lon, destination.longitude, tolerance_deg)
                and entry.created_at >= not_before
            ]
            if not candidates:
                self._misses += 1
                return None
            self._hits += 1
            return max(candidates, key=lambda e: e.created_at)

    def save_route(self, entry: RouteCacheEntry) -> None:
        with self._lock:
            if len(self._entries) >= self._max_size:
                self._entries.sort(key=lambda e: e.created_at)
                del self._entries[: self._max_size // 10 + 1]
            self._entries.append(entry)

    def delete_older_than(self, cutoff: dt.datetime) -> int:
        with self._lock:
            before = len(self._entries)
            self._entries = [e for e in self._entries if e.created_at >= cutoff]
            return before - len(self._entries)

    @property
    def stats(self) -> dict[str, Any]:
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total, 3) if total > 0 else 0.0,
        }


__all__ = ["MemoryRouteCache"]
