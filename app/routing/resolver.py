"""Route resolution: cache, then external routing, then Haversine."""

from __future__ import annotations

import datetime as dt
import logging
import threading
from typing import Any, Optional

from app.domain.constants import DEFAULT_ROUTE_PROFILE, ROUTE_CACHE_DAYS, ROUTE_CACHE_TOLERANCE_DEG
from app.domain.enums import RouteSource
from app.domain.models import Coordinates, RouteCacheEntry, RouteResult
from app.infrastructure.logging import StructuredLogger
from app.routing.distance import estimate_duration, haversine_between
from app.routing.interfaces import RouteCache, RoutingClient
from app.security.key_manager import get_key_manager
from app.shared.exceptions import ToolError

_MAX_DIAGNOSTIC_EVENTS = 50
_LOGGER = logging.getLogger("trip-health.routing")


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class RouteResolver:
    """Distance and duration between two points.

    Cached routes win, then the routing client, then a Haversine estimate.
    Every fallback is counted and kept in a bounded diagnostics list.
    """

    def __init__(
        self,
        cache: Optional[RouteCache] = None,
        client: Optional[RoutingClient] = None,
        *,
        cache_days: int = ROUTE_CACHE_DAYS,
        tolerance_deg: float = ROUTE_CACHE_TOLERANCE_DEG,
        logger: Optional[StructuredLogger] = None,
        clock=_utcnow,
    ) -> None:
        self._cache = cache
        self._client = client
        self._cache_days = cache_days
        self._tolerance_deg = tolerance_deg
        self._logger = logger
        self._clock = clock
        self._lock = threading.Lock()
        self._fallback_count = 0
        self._diagnostic_events: list[dict[str, Any]] = []

    @property
    def has_client(self) -> bool:
        return self._client is not None

    def _cutoff(self) -> dt.datetime:
        return self._clock() - dt.timedelta(days=self._cache_days)

    def _record_fallback(self, *, profile: str, reason: str, error: Exception | None = None) -> None:
        event = {
            "routing_source": RouteSource.HAVERSINE.value,
            "profile": profile,
            "reason": reason,
            "error_type": type(error).__name__ if error else "",
            "error_message": get_key_manager().scrub_text(str(error)) if error else "",
        }
        with self._lock:
            self._fallback_count += 1
            self._diagnostic_events.append(event)
            if len(self._diagnostic_events) > _MAX_DIAGNOSTIC_EVENTS:
                self._diagnostic_events = self._diagnostic_events[-_MAX_DIAGNOSTIC_EVENTS:]
        if error is not None:
            _LOGGER.warning(
                "routing fallback to haversine: profile=%s reason=%s error=%s",
                profile,
                reason,
                event["error_message"],
            )
            if self._logger:
                self._logger.warning(
                    "route_lookup",
                    f"fallback to haversine: {event['error_message']}",
                    profile=profile,
                    reason=reason,
                )

    def _lookup_cache(
        self, origin: Coordinates, destination: Coordinates, profile: str
    ) -> Optional[RouteCacheEntry]:
        if self._cache is None:
            return None
        try:
            return self._cache.find_route(
                origin,
                destination,
                profile,
                tolerance_deg=self._tolerance_deg,
                not_before=self._cutoff(),
            )
        except Exception as exc:
            _LOGGER.warning("route cache read failed, treating as miss: %s", type(exc).__name__)
            return None

    def _store_cache(self, entry: RouteCacheEntry) -> None:
        if self._cache is None:
            return
        try:
            self._cache.save_route(entry)
        except Exception as exc:
            _LOGGER.warning("route cache write failed, ignoring: %s", type(exc).__name__)

    def calculate_route(
        self,
        origin: Coordinates,
        destination: Coordinates,
        profile: str = DEFAULT_ROUTE_PROFILE,
    ) -> RouteResult:
        """Never raises for routing or cache failures; degrades to Haversine."""
        haversine_km = haversine_between(origin, destination)

        cached = self._lookup_cache(origin, destination, profile)
        if cached is not None:
            if self._logger:
                self._logger.route_lookup("cache", profile=profile)
            return RouteResult(
                distance_km=cached.distance_km,
                duration_min=cached.duration_min,
                haversine_km=haversine_km,
                source=RouteSource.ROUTE,
                geometry=cached.geometry,
            )

        if self._client is None:
            self._record_fallback(profile=profile, reason="no_routing_key")
        elif origin == destination:
            self._record_fallback(
                profile=profile,
                reason="identical_coordinates",
                error=ToolError("routing", "origin and destination are identical"),
            )
        else:
            try:
                fetched = self._client.fetch_route(origin, destination, profile)
            except Exception as exc:
                self._record_fallback(profile=profile, reason="routing_error", error=exc)
            else:
                self._store_cache(
                    RouteCacheEntry(
                        from_lat=origin.latitude,
                        from_lon=origin.longitude,
                        to_lat=destination.latitude,
                        to_lon=destination.longitude,
                        profile=profile,
                        distance_km=fetched.distance_km,
                        duration_min=fetched.duration_min,
                        geometry=fetched.geometry,
                        created_at=self._clock(),
                    )
                )
                if self._logger:
                    self._logger.route_lookup("api", profile=profile)
                return RouteResult(
                    distance_km=fetched.distance_km,
                    duration_min=fetched.duration_min,
                    haversine_km=haversine_km,
                    source=RouteSource.ROUTE,
                    geometry=fetched.geometry,
                )

        if self._logger:
            self._logger.route_lookup("haversine", profile=profile)
        return RouteResult(
            distance_km=haversine_km,
            duration_min=estimate_duration(haversine_km, profile),
            haversine_km=haversine_km,
            source=RouteSource.HAVERSINE,
        )

    def cleanup_cache(self) -> int:
        """Delete cache rows past the retention window; returns rows removed."""
        if self._cache is None:
            return 0
        cutoff = self._cutoff()
        try:
            removed = self._cache.delete_older_than(cutoff)
        except Exception as exc:
            _LOGGER.error("route cache cleanup failed: %s", type(exc).__name__)
            return 0
        _LOGGER.info("route cache cleanup removed %d entries older than %s", removed, cutoff.isoformat())
        return removed

    def get_fallback_count(self) -> int:
        return self._fallback_count

    def get_diagnostics(self) -> dict[str, Any]:
        with self._lock:
            return {
                "routing_source": "openrouteservice" if self._client is not None else "haversine",
                "fallback_count": self._fallback_count,
                "events": list(self._diagnostic_events),
            }


__all__ = ["RouteResolver"]
