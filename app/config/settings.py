"""Runtime settings snapshot resolved from the environment."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

from app.domain.constants import (
    ROUTE_CACHE_DAYS,
    ROUTE_CACHE_TOLERANCE_DEG,
    TRAVEL_BUFFER_MINUTES,
)

_TRUTHY = {"1", "true", "yes", "on"}
_DEFAULT_ROUTING_URL = "https://api.openrouteservice.org"
_DEFAULT_DB_PATH = Path("data") / "trip_health.sqlite3"


def _is_enabled(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _float_env(name: str, default: float) -> float:
    raw = str(os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    raw = str(os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def resolve_db_path() -> Path:
    raw = str(os.getenv("VALIDATION_DB") or "").strip()
    return Path(raw) if raw else _DEFAULT_DB_PATH


class EngineSettings(BaseModel):
    routing_url: str = Field(default=_DEFAULT_ROUTING_URL)
    routing_timeout_seconds: float = Field(default=10.0)
    route_cache_days: int = Field(default=ROUTE_CACHE_DAYS)
    route_cache_tolerance_deg: float = Field(default=ROUTE_CACHE_TOLERANCE_DEG)
    travel_buffer_minutes: float = Field(default=TRAVEL_BUFFER_MINUTES)
    route_lookup_workers: int = Field(default=4)
    persistence_enabled: bool = Field(default=True)
    db_path: str = Field(default=str(_DEFAULT_DB_PATH))


def resolve_engine_settings() -> EngineSettings:
    return EngineSettings(
        routing_url=str(os.getenv("OPENROUTESERVICE_URL") or "").strip().rstrip("/") or _DEFAULT_ROUTING_URL,
        routing_timeout_seconds=_float_env("ROUTING_TIMEOUT_SECONDS", 10.0),
        route_cache_days=max(1, _int_env("ROUTE_CACHE_DAYS", ROUTE_CACHE_DAYS)),
        route_cache_tolerance_deg=_float_env("ROUTE_CACHE_TOLERANCE_DEG", ROUTE_CACHE_TOLERANCE_DEG),
        travel_buffer_minutes=_float_env("TRAVEL_BUFFER_MINUTES", TRAVEL_BUFFER_MINUTES),
        route_lookup_workers=max(1, _int_env("ROUTE_LOOKUP_WORKERS", 4)),
        persistence_enabled=_is_enabled(os.getenv("VALIDATION_PERSISTENCE_ENABLED"), default=True),
        db_path=str(resolve_db_path()),
    )


__all__ = [
    "EngineSettings",
    "resolve_db_path",
    "resolve_engine_settings",
]
