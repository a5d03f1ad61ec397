"""Route resolution and distance estimation."""

from app.routing.distance import estimate_duration, haversine, haversine_between
from app.routing.interfaces import RouteCache, RoutingClient, RoutingClientResult
from app.routing.resolver import RouteResolver

__all__ = [
    "RouteCache",
    "RouteResolver",
    "RoutingClient",
    "RoutingClientResult",
    "estimate_duration",
    "haversine",
    "haversine_between",
]
