"""Persistence collaborator protocols, in-memory stores and factories."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Optional, Protocol

from app.config.settings import EngineSettings
from app.domain.models import DismissedValidationIssue, Trip
from app.infrastructure.cache import MemoryRouteCache
from app.routing.interfaces import RouteCache
from app.persistence.sqlite_repository import SQLiteDismissalRepository, SQLiteRouteCacheRepository


class TripRepository(Protocol):
    def load_trip_with_relations(self, trip_id: int, user_id: int) -> Optional[Trip]: ...

    def trip_owner(self, trip_id: int) -> Optional[int]: ...

    def get_location_links_for_activities(
        self, trip_id: int, activity_ids: Iterable[int]
    ) -> dict[int, int]: ...


class DismissalRepository(Protocol):
    backend: str

    def list_dismissals(self, trip_id: int) -> list[DismissedValidationIssue]: ...

    def upsert_dismissal(self, record: DismissedValidationIssue) -> None: ...

    def delete_dismissal(self, trip_id: int, issue_type: str, issue_key: str) -> bool: ...


class InMemoryTripRepository:
    """Trip graphs handed over by the host application.

    Ownership is enforced on load: a trip owned by someone else reads as absent.
    """

    def __init__(self) -> None:
        self._trips: dict[int, Trip] = {}
        self._links: dict[int, dict[int, int]] = {}
        self._lock = threading.Lock()

    def add_trip(self, trip: Trip, location_links: Optional[Mapping[int, int]] = None) -> None:
        with self._lock:
            self._trips[trip.id] = trip.model_copy(deep=True)
            self._links[trip.id] = dict(location_links or {})

    def load_trip_with_relations(self, trip_id: int, user_id: int) -> Optional[Trip]:
        with self._lock:
            trip = self._trips.get(trip_id)
            if trip is None or trip.user_id != user_id:
                return None
            return trip.model_copy(deep=True)

    def trip_owner(self, trip_id: int) -> Optional[int]:
        with self._lock:
            trip = self._trips.get(trip_id)
            return trip.user_id if trip is not None else None

    def get_location_links_for_activities(
        self, trip_id: int, activity_ids: Iterable[int]
    ) -> dict[int, int]:
        wanted = set(activity_ids)
        with self._lock:
            links = self._links.get(trip_id, {})
            return {activity_id: location_id for activity_id, location_id in links.items() if activity_id in wanted}


class InMemoryDismissalRepository:
    backend = "memory"

    def __init__(self) -> None:
        self._records: dict[tuple[int, str, str], DismissedValidationIssue] = {}
        self._lock = threading.Lock()

    def list_dismissals(self, trip_id: int) -> list[DismissedValidationIssue]:
        with self._lock:
            rows = [record for key, record in self._records.items() if key[0] == trip_id]
        return sorted(rows, key=lambda r: (r.issue_type, r.issue_key))

    def upsert_dismissal(self, record: DismissedValidationIssue) -> None:
        with self._lock:
            self._records[(record.trip_id, record.issue_type, record.issue_key)] = record

    def delete_dismissal(self, trip_id: int, issue_type: str, issue_key: str) -> bool:
        with self._lock:
            return self._records.pop((trip_id, issue_type, issue_key), None) is not None


def get_dismissal_repository(settings: EngineSettings) -> DismissalRepository:
    """SQLite store when persistence is enabled, otherwise process memory."""
    if not settings.persistence_enabled:
        return InMemoryDismissalRepository()
    return SQLiteDismissalRepository(Path(settings.db_path))


def get_route_cache(settings: EngineSettings) -> RouteCache:
    if not settings.persistence_enabled:
        return MemoryRouteCache()
    return SQLiteRouteCacheRepository(Path(settings.db_path))


__all__ = [
    "DismissalRepository",
    "InMemoryDismissalRepository",
    "InMemoryTripRepository",
    "TripRepository",
    "get_dismissal_repository",
    "get_route_cache",
]
