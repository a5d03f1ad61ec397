"""SQLite schema migrations for the dismissal and route-cache tables.

Migrations are the ``NNNN_name.sql`` files shipped in ``migrations/``, applied
in version order. Each file runs in its own transaction together with its
``schema_migrations`` row, so a failing script leaves no partial version
behind. Applied files are pinned by checksum.
"""

from __future__ import annotations

import datetime as dt
import hashlib
import logging
import re
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_LOGGER = logging.getLogger("trip-health.persistence")
_MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"
_FILENAME_RE = re.compile(r"^(?P<version>\d{4}_[a-z0-9_]+)\.sql$")


class MigrationChecksumError(RuntimeError):
    """An applied migration file was edited afterwards."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"migration checksum mismatch for version={version}")


@dataclass(frozen=True)
class Migration:
    version: str
    path: Path
    sql: str

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode("utf-8")).hexdigest()


def discover_migrations(directory: Optional[Path] = None) -> list[Migration]:
    directory = directory or _MIGRATIONS_DIR
    migrations: list[Migration] = []
    for path in sorted(directory.glob("*.sql")):
        match = _FILENAME_RE.match(path.name)
        if match is None:
            raise ValueError(f"unexpected migration filename: {path.name}")
        migrations.append(Migration(match.group("version"), path, path.read_text(encoding="utf-8")))
    if not migrations:
        raise FileNotFoundError(f"no migrations found in {directory}")
    return migrations


def _ensure_migration_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version TEXT PRIMARY KEY,
            checksum TEXT NOT NULL,
            applied_at TEXT NOT NULL
        )
        """
    )


def list_applied_migrations(conn: sqlite3.Connection) -> dict[str, str]:
    _ensure_migration_table(conn)
    rows = conn.execute("SELECT version, checksum FROM schema_migrations").fetchall()
    return {str(version): str(checksum) for version, checksum in rows}


def migration_status(conn: sqlite3.Connection, directory: Optional[Path] = None) -> list[dict[str, str]]:
    """One entry per shipped migration: ``applied``, ``pending`` or ``modified``."""
    applied = list_applied_migrations(conn)
    status: list[dict[str, str]] = []
    for migration in discover_migrations(directory):
        recorded = applied.get(migration.version)
        if recorded is None:
            state = "pending"
        elif recorded == migration.checksum:
            state = "applied"
        else:
            state = "modified"
        status.append({"version": migration.version, "state": state})
    return status


def _apply_one(conn: sqlite3.Connection, migration: Migration) -> None:
    applied_at = dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    script = (
        "BEGIN;\n"
        f"{migration.sql}\n"
        "INSERT INTO schema_migrations(version, checksum, applied_at) "
        f"VALUES ('{migration.version}', '{migration.checksum}', '{applied_at}');\n"
        "COMMIT;\n"
    )
    try:
        conn.executescript(script)
    except sqlite3.Error:
        if conn.in_transaction:
            conn.rollback()
        raise


def apply_sqlite_migrations(conn: sqlite3.Connection, directory: Optional[Path] = None) -> list[str]:
    """Apply every migration not yet recorded; returns the versions applied now."""
    migrations = discover_migrations(directory)
    applied = list_applied_migrations(conn)
    for migration in migrations:
        recorded = applied.get(migration.version)
        if recorded is not None and recorded != migration.checksum:
            raise MigrationChecksumError(migration.version)

    applied_now: list[str] = []
    for migration in migrations:
        if migration.version in applied:
            continue
        _apply_one(conn, migration)
        _LOGGER.info("applied migration %s", migration.version)
        applied_now.append(migration.version)
    return applied_now


__all__ = [
    "Migration",
    "MigrationChecksumError",
    "apply_sqlite_migrations",
    "discover_migrations",
    "list_applied_migrations",
    "migration_status",
]
