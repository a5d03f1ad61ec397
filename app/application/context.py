"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from app.adapters.route import build_routing_client
from app.config.settings import EngineSettings, resolve_engine_settings
from app.infrastructure.logging import StructuredLogger, get_logger
from app.persistence.repository import (
    DismissalRepository,
    InMemoryTripRepository,
    TripRepository,
    get_dismissal_repository,
    get_route_cache,
)
from app.routing.interfaces import RouteCache, RoutingClient
from app.routing.resolver import RouteResolver
from app.security.key_manager import get_key_manager
from app.services.cache_maintenance import RouteCacheSweeper
from app.services.validation_service import TripValidationService
from app.validators.travel_time_validator import TravelFeasibilityAnalyzer


@dataclass
class AppContext:
    settings: EngineSettings
    trips: TripRepository
    dismissals: DismissalRepository
    route_cache: RouteCache
    resolver: RouteResolver
    analyzer: TravelFeasibilityAnalyzer
    service: TripValidationService
    sweeper: RouteCacheSweeper
    key_manager: Any = None
    logger: Optional[StructuredLogger] = None


def make_app_context(
    *,
    settings: Optional[EngineSettings] = None,
    trips: Optional[TripRepository] = None,
    dismissals: Optional[DismissalRepository] = None,
    route_cache: Optional[RouteCache] = None,
    routing_client: Optional[RoutingClient] = None,
) -> AppContext:
    settings = settings or resolve_engine_settings()
    logger = get_logger()
    trips = trips if trips is not None else InMemoryTripRepository()
    dismissals = dismissals if dismissals is not None else get_dismissal_repository(settings)
    route_cache = route_cache if route_cache is not None else get_route_cache(settings)
    client = routing_client if routing_client is not None else build_routing_client(settings)

    resolver = RouteResolver(
        route_cache,
        client,
        cache_days=settings.route_cache_days,
        tolerance_deg=settings.route_cache_tolerance_deg,
        logger=logger,
    )
    analyzer = TravelFeasibilityAnalyzer(
        resolver,
        buffer_minutes=settings.travel_buffer_minutes,
        max_workers=settings.route_lookup_workers,
    )
    return AppContext(
        settings=settings,
        trips=trips,
        dismissals=dismissals,
        route_cache=route_cache,
        resolver=resolver,
        analyzer=analyzer,
        service=TripValidationService(trips, dismissals, analyzer, logger=logger),
        sweeper=RouteCacheSweeper(resolver, settings.route_cache_days),
        key_manager=get_key_manager(),
        logger=logger,
    )


__all__ = ["AppContext", "make_app_context"]
