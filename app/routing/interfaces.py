"""Routing capability protocols and I/O schemas."""

from __future__ import annotations

import datetime as dt
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel

from app.domain.models import Coordinates, RouteCacheEntry
from app.shared.exceptions import ToolError


class RoutingClientResult(BaseModel):
    distance_km: float
    duration_min: float
    geometry: Optional[list[list[float]]] = None


@runtime_checkable
class RoutingClient(Protocol):
    """External routing service.

    Raises ToolError when the call fails and ExternalServiceError when the
    answer is unusable.
    """

    def fetch_route(
        self,
        origin: Coordinates,
        destination: Coordinates,
        profile: str,
    ) -> RoutingClientResult: ...


@runtime_checkable
class RouteCache(Protocol):
    """Append-only store of resolved routes with approximate lookup."""

    def find_route(
        self,
        origin: Coordinates,
        destination: Coordinates,
        profile: str,
        *,
        tolerance_deg: float,
        not_before: dt.datetime,
    ) -> Optional[RouteCacheEntry]: ...

    def save_route(self, entry: RouteCacheEntry) -> None: ...

    def delete_older_than(self, cutoff: dt.datetime) -> int: ...


__all__ = [
    "RouteCache",
    "RoutingClient",
    "RoutingClientResult",
    "ToolError",
]
