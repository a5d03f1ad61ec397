"""Route adapters."""

from __future__ import annotations

import logging
from typing import Optional

from app.adapters.route.openrouteservice import OpenRouteServiceClient
from app.config.settings import EngineSettings
from app.routing.interfaces import RoutingClient
from app.security.key_manager import get_key_manager

_LOGGER = logging.getLogger("trip-health.routing")


def build_routing_client(settings: EngineSettings) -> Optional[RoutingClient]:
    """Return the configured client, or None when no routing key is set."""
    km = get_key_manager()
    if km.routing_mode == "haversine":
        _LOGGER.info("no routing key configured, using haversine estimates")
        return None
    _LOGGER.info("routing via %s with key %s", settings.routing_url, km.masked_routing_key())
    return OpenRouteServiceClient(
        km.routing_key,
        base_url=settings.routing_url,
        timeout=settings.routing_timeout_seconds,
    )


__all__ = ["OpenRouteServiceClient", "build_routing_client"]
