"""SQLite implementation for dismissal records and the route cache."""

from __future__ import annotations

import datetime as dt
import json
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional

from app.domain.enums import IssueCategory
from app.domain.models import Coordinates, DismissedValidationIssue, RouteCacheEntry
from app.persistence.migration_runner import apply_sqlite_migrations

_TS_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def to_db_timestamp(value: dt.datetime) -> str:
    """Fixed-width UTC text so lexical order equals time order."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc).strftime(_TS_FORMAT)


def from_db_timestamp(raw: str) -> dt.datetime:
    return dt.datetime.strptime(raw, _TS_FORMAT).replace(tzinfo=dt.timezone.utc)


def _to_json(payload: Any) -> Optional[str]:
    if payload is None:
        return None
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def _from_json(raw: str | None, default: Any) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return default


class _SQLiteStore:
    backend = "sqlite"

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        with self._lock, self._connection() as conn:
            apply_sqlite_migrations(conn)

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path, timeout=5.0)
        try:
            conn.execute("PRAGMA journal_mode=WAL;")
            with conn:
                yield conn
        finally:
            conn.close()


class SQLiteDismissalRepository(_SQLiteStore):
    def list_dismissals(self, trip_id: int) -> list[DismissedValidationIssue]:
        with self._lock, self._connection() as conn:
            rows = conn.execute(
                """
                SELECT trip_id, issue_type, issue_key, category, dismissed_at
                FROM dismissed_validation_issues
                WHERE trip_id = ?
                ORDER BY issue_type, issue_key
                """,
                (trip_id,),
            ).fetchall()
        return [
            DismissedValidationIssue(
                trip_id=row[0],
                issue_type=row[1],
                issue_key=row[2],
                category=IssueCategory(row[3]),
                dismissed_at=row[4],
            )
            for row in rows
        ]

    def upsert_dismissal(self, record: DismissedValidationIssue) -> None:
        # Single statement keyed on the unique tuple: a repeated dismiss only
        # refreshes category and timestamp.
        with self._lock, self._connection() as conn:
            conn.execute(
                """
                INSERT INTO dismissed_validation_issues (
                    trip_id, issue_type, issue_key, category, dismissed_at
                ) VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(trip_id, issue_type, issue_key) DO UPDATE SET
                    category=excluded.category,
                    dismissed_at=excluded.dismissed_at
                """,
                (
                    record.trip_id,
                    record.issue_type,
                    record.issue_key,
                    record.category.value,
                    record.dismissed_at,
                ),
            )

    def delete_dismissal(self, trip_id: int, issue_type: str, issue_key: str) -> bool:
        with self._lock, self._connection() as conn:
            cursor = conn.execute(
                """
                DELETE FROM dismissed_validation_issues
                WHERE trip_id = ? AND issue_type = ? AND issue_key = ?
                """,
                (trip_id, issue_type, issue_key),
            )
            return cursor.rowcount > 0


class SQLiteRouteCacheRepository(_SQLiteStore):
    def find_route(
        self,
        origin: Coordinates,
        destination: Coordinates,
        profile: str,
        *,
        tolerance_deg: float,
        not_before: dt.datetime,
    ) -> Optional[RouteCacheEntry]:
        with self._lock, self._connection() as conn:
            row = conn.execute(
                """
                SELECT
                    from_lat, from_lon, to_lat, to_lon, profile,
                    distance_km, duration_min, route_geometry_json, created_at
                FROM route_cache
                WHERE profile = ?
                  AND from_lat BETWEEN ? AND ?
                  AND from_lon BETWEEN ? AND ?
                  AND to_lat BETWEEN ? AND ?
                  AND to_lon BETWEEN ? AND ?
                  AND created_at >= ?
                ORDER BY created_at DESC, id DESC
                LIMIT 1
                """,
                (
                    profile,
                    origin.latitude - tolerance_deg,
                    origin.latitude + tolerance_deg,
                    origin.longitude - tolerance_deg,
                    origin.longitude + tolerance_deg,
                    destination.latitude - tolerance_deg,
                    destination.latitude + tolerance_deg,
                    destination.longitude - tolerance_deg,
                    destination.longitude + tolerance_deg,
                    to_db_timestamp(not_before),
                ),
            ).fetchone()
        if row is None:
            return None
        return RouteCacheEntry(
            from_lat=row[0],
            from_lon=row[1],
            to_lat=row[2],
            to_lon=row[3],
            profile=row[4],
            distance_km=row[5],
            duration_min=row[6],
            geometry=_from_json(row[7], None),
            created_at=from_db_timestamp(row[8]),
        )

    def save_route(self, entry: RouteCacheEntry) -> None:
        with self._lock, self._connection() as conn:
            conn.execute(
                """
                INSERT INTO route_cache (
                    from_lat, from_lon, to_lat, to_lon, profile,
                    distance_km, duration_min, route_geometry_json, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.from_lat,
                    entry.from_lon,
                    entry.to_lat,
                    entry.to_lon,
                    entry.profile,
                    entry.distance_km,
                    entry.duration_min,
                    _to_json(entry.geometry),
                    to_db_timestamp(entry.created_at),
                ),
            )

    def delete_older_than(self, cutoff: dt.datetime) -> int:
        with self._lock, self._connection() as conn:
            cursor = conn.execute(
                "DELETE FROM route_cache WHERE created_at < ?",
                (to_db_timestamp(cutoff),),
            )
            return cursor.rowcount

    def count(self) -> int:
        with self._lock, self._connection() as conn:
            return int(conn.execute("SELECT COUNT(*) FROM route_cache").fetchone()[0])


__all__ = [
    "SQLiteDismissalRepository",
    "SQLiteRouteCacheRepository",
    "from_db_timestamp",
    "to_db_timestamp",
]
