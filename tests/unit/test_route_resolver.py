"""RouteResolver: cache, external client and Haversine fallback."""

from __future__ import annotations

import io
import json
import math
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.enums import RouteSource
from app.domain.models import Coordinates, RouteCacheEntry
from app.infrastructure.cache import MemoryRouteCache
from app.infrastructure.logging import StructuredLogger
from app.routing.distance import estimate_duration, haversine, haversine_between
from app.routing.interfaces import RoutingClientResult
from app.routing.resolver import RouteResolver
from app.shared.exceptions import ToolError

_NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
PARIS = Coordinates(latitude=48.8566, longitude=2.3522)
LYON = Coordinates(latitude=45.7640, longitude=4.8357)


class _RecordingClient:
    def __init__(self, result: RoutingClientResult | None = None, error: Exception | None = None):
        self.calls: list[tuple[Coordinates, Coordinates, str]] = []
        self._result = result or RoutingClientResult(distance_km=465.0, duration_min=280.0, geometry=[[2.35, 48.85]])
        self._error = error

    def fetch_route(self, origin, destination, profile):
        self.calls.append((origin, destination, profile))
        if self._error is not None:
            raise self._error
        return self._result


class _BrokenCache:
    def find_route(self, *args, **kwargs):
        raise OSError("disk gone")

    def save_route(self, entry):
        raise OSError("disk gone")

    def delete_older_than(self, cutoff):
        raise OSError("disk gone")


def _closed_form(a: Coordinates, b: Coordinates) -> float:
    p1, p2 = math.radians(a.latitude), math.radians(b.latitude)
    dp = p2 - p1
    dl = math.radians(b.longitude - a.longitude)
    h = math.sin(dp / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    return 2 * 6371.0 * math.asin(math.sqrt(h))


def test_haversine_matches_closed_form():
    assert haversine_between(PARIS, LYON) == pytest.approx(_closed_form(PARIS, LYON), rel=1e-9)
    assert haversine(0.0, 0.0, 0.0, 0.0) == 0.0


def test_estimate_duration_by_profile():
    assert estimate_duration(80.0, "driving-car") == pytest.approx(60.0)
    assert estimate_duration(20.0, "cycling-regular") == pytest.approx(60.0)
    assert estimate_duration(5.0, "foot-walking") == pytest.approx(60.0)
    assert estimate_duration(80.0, "hovercraft") == pytest.approx(60.0)


def test_without_routing_key_always_haversine():
    resolver = RouteResolver(MemoryRouteCache(), None, clock=lambda: _NOW)
    result = resolver.calculate_route(PARIS, LYON)

    assert result.source is RouteSource.HAVERSINE
    assert result.distance_km == pytest.approx(_closed_form(PARIS, LYON), rel=1e-9)
    assert result.haversine_km == result.distance_km
    assert result.duration_min == pytest.approx(result.distance_km / 80.0 * 60)
    assert resolver.get_fallback_count() == 1
    assert resolver.get_diagnostics()["events"][0]["reason"] == "no_routing_key"


def test_client_success_is_cached_and_reused():
    cache = MemoryRouteCache()
    client = _RecordingClient()
    resolver = RouteResolver(cache, client, clock=lambda: _NOW)

    first = resolver.calculate_route(PARIS, LYON)
    # Nudge inside the tolerance window.
    near_paris = Coordinates(latitude=PARIS.latitude + 0.0005, longitude=PARIS.longitude - 0.0005)
    second = resolver.calculate_route(near_paris, LYON)

    assert first.source is RouteSource.ROUTE
    assert first.distance_km == 465.0
    assert first.geometry == [[2.35, 48.85]]
    assert first.haversine_km == pytest.approx(_closed_form(PARIS, LYON), rel=1e-9)
    assert second.source is RouteSource.ROUTE
    assert second.duration_min == 280.0
    assert len(client.calls) == 1
    assert cache.stats["hits"] == 1


def test_cache_miss_outside_tolerance_or_profile():
    cache = MemoryRouteCache()
    client = _RecordingClient()
    resolver = RouteResolver(cache, client, clock=lambda: _NOW)

    resolver.calculate_route(PARIS, LYON)
    far = Coordinates(latitude=PARIS.latitude + 0.01, longitude=PARIS.longitude)
    resolver.calculate_route(far, LYON)
    resolver.calculate_route(PARIS, LYON, "foot-walking")

    assert len(client.calls) == 3


def test_stale_cache_entry_is_ignored():
    cache = MemoryRouteCache()
    cache.save_route(
        RouteCacheEntry(
            from_lat=PARIS.latitude,
            from_lon=PARIS.longitude,
            to_lat=LYON.latitude,
            to_lon=LYON.longitude,
            profile="driving-car",
            distance_km=1.0,
            duration_min=1.0,
            created_at=_NOW - timedelta(days=31),
        )
    )
    client = _RecordingClient()
    result = RouteResolver(cache, client, clock=lambda: _NOW).calculate_route(PARIS, LYON)

    assert result.distance_km == 465.0
    assert len(client.calls) == 1


def test_newest_cache_entry_wins():
    cache = MemoryRouteCache()
    for age_days, distance in ((10, 400.0), (2, 470.0)):
        cache.save_route(
            RouteCacheEntry(
                from_lat=PARIS.latitude,
                from_lon=PARIS.longitude,
                to_lat=LYON.latitude,
                to_lon=LYON.longitude,
                profile="driving-car",
                distance_km=distance,
                duration_min=300.0,
                created_at=_NOW - timedelta(days=age_days),
            )
        )
    result = RouteResolver(cache, None, clock=lambda: _NOW).calculate_route(PARIS, LYON)
    assert result.distance_km == 470.0
    assert result.source is RouteSource.ROUTE


@pytest.mark.parametrize(
    "error",
    [
        ToolError("openrouteservice", "invalid OpenRouteService API key", status_code=401),
        ToolError("openrouteservice", "OpenRouteService rate limit exceeded", status_code=429),
        TimeoutError("slow"),
    ],
)
def test_client_failure_falls_back_to_haversine(error):
    cache = MemoryRouteCache()
    resolver = RouteResolver(cache, _RecordingClient(error=error), clock=lambda: _NOW)
    result = resolver.calculate_route(PARIS, LYON)

    assert result.source is RouteSource.HAVERSINE
    assert result.distance_km == result.haversine_km
    assert cache.stats["size"] == 0
    diagnostics = resolver.get_diagnostics()
    assert diagnostics["fallback_count"] == 1
    assert diagnostics["events"][0]["reason"] == "routing_error"
    assert diagnostics["events"][0]["error_type"] == type(error).__name__


def test_identical_coordinates_skip_the_client():
    client = _RecordingClient()
    resolver = RouteResolver(MemoryRouteCache(), client, clock=lambda: _NOW)
    result = resolver.calculate_route(PARIS, PARIS)

    assert client.calls == []
    assert result.source is RouteSource.HAVERSINE
    assert result.distance_km == 0.0
    assert result.duration_min == 0.0
    assert resolver.get_diagnostics()["events"][0]["reason"] == "identical_coordinates"


def test_broken_cache_does_not_fail_resolution():
    client = _RecordingClient()
    resolver = RouteResolver(_BrokenCache(), client, clock=lambda: _NOW)

    result = resolver.calculate_route(PARIS, LYON)

    assert result.source is RouteSource.ROUTE
    assert len(client.calls) == 1
    assert resolver.cleanup_cache() == 0


def test_cleanup_removes_only_expired_rows():
    cache = MemoryRouteCache()
    for age_days in (1, 29, 31, 90):
        cache.save_route(
            RouteCacheEntry(
                from_lat=0.0,
                from_lon=float(age_days),
                to_lat=1.0,
                to_lon=1.0,
                profile="driving-car",
                distance_km=1.0,
                duration_min=1.0,
                created_at=_NOW - timedelta(days=age_days),
            )
        )
    resolver = RouteResolver(cache, None, clock=lambda: _NOW)

    assert resolver.cleanup_cache() == 2
    assert resolver.cleanup_cache() == 0
    assert cache.stats["size"] == 2


def test_fallback_error_text_is_scrubbed(monkeypatch):
    from app.security.key_manager import ROUTING_KEY_NAME, get_key_manager

    monkeypatch.setenv(ROUTING_KEY_NAME, "ors-secret-key-123456")
    get_key_manager().reload()
    client = _RecordingClient(error=ToolError("openrouteservice", "bad key ors-secret-key-123456"))
    resolver = RouteResolver(None, client, clock=lambda: _NOW)

    resolver.calculate_route(PARIS, LYON)

    message = resolver.get_diagnostics()["events"][0]["error_message"]
    assert "ors-secret-key-123456" not in message


def test_fallback_after_client_error_emits_structured_warning():
    out = io.StringIO()
    client = _RecordingClient(error=ToolError("openrouteservice", "HTTP 502"))
    resolver = RouteResolver(None, client, logger=StructuredLogger(trace_id="r-1", output=out), clock=lambda: _NOW)

    resolver.calculate_route(PARIS, LYON)

    events = [json.loads(line) for line in out.getvalue().splitlines()]
    warning = next(event for event in events if event["event"] == "warning")
    assert warning["check"] == "route_lookup"
    assert warning["reason"] == "routing_error"
    assert "HTTP 502" in warning["message"]
    assert any(event["event"] == "route_lookup" and event["source"] == "haversine" for event in events)
