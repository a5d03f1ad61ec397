"""Persistence package exports."""

from app.persistence.migration_runner import apply_sqlite_migrations
from app.persistence.repository import (
    DismissalRepository,
    InMemoryDismissalRepository,
    InMemoryTripRepository,
    TripRepository,
    get_dismissal_repository,
    get_route_cache,
)
from app.persistence.sqlite_repository import SQLiteDismissalRepository, SQLiteRouteCacheRepository

__all__ = [
    "DismissalRepository",
    "InMemoryDismissalRepository",
    "InMemoryTripRepository",
    "SQLiteDismissalRepository",
    "SQLiteRouteCacheRepository",
    "TripRepository",
    "apply_sqlite_migrations",
    "get_dismissal_repository",
    "get_route_cache",
]
