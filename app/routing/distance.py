"""Great-circle distance and speed-based duration estimates."""

from __future__ import annotations

import math

from app.domain.constants import DEFAULT_SPEED_KMH, EARTH_RADIUS_KM, PROFILE_SPEED_KMH
from app.domain.models import Coordinates


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(dlon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_between(origin: Coordinates, destination: Coordinates) -> float:
    return haversine(origin.latitude, origin.longitude, destination.latitude, destination.longitude)


def estimate_duration(distance_km: float, profile: str) -> float:
    """Minutes needed at the profile's average speed (unknown profiles drive)."""
    speed = PROFILE_SPEED_KMH.get(profile, DEFAULT_SPEED_KMH)
    return (distance_km / speed) * 60


__all__ = ["estimate_duration", "haversine", "haversine_between"]
