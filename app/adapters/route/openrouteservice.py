"""OpenRouteService directions adapter.

Environment variables: OPENROUTESERVICE_API_KEY, OPENROUTESERVICE_URL
API docs: https://openrouteservice.org/dev/#/api-docs/v2/directions/{profile}/json/post
"""

from __future__ import annotations

from typing import Any, Optional

from app.domain.enums import RouteProfile
from app.domain.models import Coordinates
from app.routing.interfaces import RoutingClientResult
from app.security.http_client import SecureHttpClient
from app.shared.exceptions import ExternalServiceError, ToolError

_TOOL = "openrouteservice"
_SUPPORTED_PROFILES = {p.value for p in RouteProfile}


def _to_lon_lat(point: Coordinates) -> list[float]:
    """ORS expects [longitude, latitude]."""
    return [point.longitude, point.latitude]


def _parse_route(data: dict[str, Any]) -> RoutingClientResult:
    routes = data.get("routes") or []
    if not routes:
        raise ExternalServiceError("no routes found in response")

    route = routes[0]
    summary = route.get("summary") or {}
    try:
        distance_m = float(summary["distance"])
        duration_s = float(summary["duration"])
    except (KeyError, TypeError, ValueError):
        raise ExternalServiceError("route summary is missing distance/duration") from None

    geometry: Optional[list[list[float]]] = None
    raw_geometry = route.get("geometry")
    if isinstance(raw_geometry, dict) and isinstance(raw_geometry.get("coordinates"), list):
        geometry = raw_geometry["coordinates"]

    return RoutingClientResult(
        distance_km=distance_m / 1000,
        duration_min=duration_s / 60,
        geometry=geometry,
    )


class OpenRouteServiceClient:
    """RoutingClient backed by the OpenRouteService directions API."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.openrouteservice.org",
        timeout: float = 10.0,
        http: Optional[SecureHttpClient] = None,
    ):
        if not api_key:
            raise ToolError(_TOOL, "OPENROUTESERVICE_API_KEY is not set")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._http = http or SecureHttpClient(timeout=timeout, max_retries=0, tool_name=_TOOL)

    def fetch_route(
        self,
        origin: Coordinates,
        destination: Coordinates,
        profile: str,
    ) -> RoutingClientResult:
        if profile not in _SUPPORTED_PROFILES:
            raise ToolError(_TOOL, f"unsupported profile: {profile}")

        url = f"{self._base_url}/v2/directions/{profile}/json"
        try:
            data = self._http.post_json(
                url,
                json_body={"coordinates": [_to_lon_lat(origin), _to_lon_lat(destination)]},
                headers={"Authorization": self._api_key, "Content-Type": "application/json"},
            )
        except ToolError as exc:
            if exc.status_code in (401, 403):
                raise ToolError(_TOOL, "invalid OpenRouteService API key", status_code=exc.status_code) from None
            if exc.status_code == 429:
                raise ToolError(_TOOL, "OpenRouteService rate limit exceeded", status_code=429) from None
            raise

        if not isinstance(data, dict):
            raise ExternalServiceError("unexpected response payload")
        return _parse_route(data)
