"""trip-health CLI entry point."""

from __future__ import annotations

import argparse
import json
import sqlite3
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from dotenv import load_dotenv

load_dotenv()


def _load_trip_document(path: Path) -> tuple[Any, dict[int, int]]:
    from app.domain.models import Trip

    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("trip file must contain a JSON object")
    raw_links = payload.pop("location_links", None) or {}
    links = {int(activity_id): int(location_id) for activity_id, location_id in raw_links.items()}
    return Trip.model_validate(payload), links


def _format_report(result: Any) -> str:
    lines: list[str] = []
    lines.append(f"Trip {result.trip_id}: {result.status}")
    lines.append(
        f"{result.active_issues} active / {result.dismissed_issues} dismissed / {result.total_issues} total"
    )
    lines.append("=" * 50)
    for category, issues in result.issues_by_category.items():
        if not issues:
            continue
        lines.append(f"\n{category}")
        lines.append("-" * 50)
        for issue in issues:
            marker = "x" if issue.is_dismissed else "!"
            lines.append(f"  [{marker}] {issue.id}  {issue.message}")
            if issue.suggestion:
                lines.append(f"      {issue.suggestion}")
    return "\n".join(lines)


def _cmd_migrate(args: argparse.Namespace) -> int:
    from app.config.settings import resolve_db_path
    from app.persistence.migration_runner import MigrationChecksumError, apply_sqlite_migrations, migration_status

    db_path = Path(args.db) if args.db else resolve_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        if args.status:
            report: dict[str, Any] = {"db_path": str(db_path), "migrations": migration_status(conn)}
        else:
            report = {"db_path": str(db_path), "applied": apply_sqlite_migrations(conn)}
    except MigrationChecksumError as exc:
        print(f"refusing to migrate: {exc}", file=sys.stderr)
        return 1
    finally:
        conn.close()
    print(json.dumps(report, ensure_ascii=False))
    return 0


def _cmd_sweep(args: argparse.Namespace) -> int:
    from app.application.context import make_app_context

    ctx = make_app_context()
    report = ctx.sweeper.run_once()
    print(json.dumps(report, ensure_ascii=False))
    return 0 if report.get("status") == "success" else 1


def _cmd_validate(args: argparse.Namespace) -> int:
    from app.application.context import make_app_context
    from app.persistence.repository import InMemoryDismissalRepository, InMemoryTripRepository

    try:
        trip, links = _load_trip_document(Path(args.trip_file))
    except (OSError, ValueError) as exc:
        print(f"cannot read trip file: {exc}", file=sys.stderr)
        return 2

    trips = InMemoryTripRepository()
    trips.add_trip(trip, links)
    ctx = make_app_context(trips=trips, dismissals=InMemoryDismissalRepository())
    result = ctx.service.evaluate(trip)
    if args.format == "text":
        print(_format_report(result))
    else:
        print(result.model_dump_json(indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trip-health", description="Trip validation engine")
    sub = parser.add_subparsers(dest="command", required=True)

    migrate = sub.add_parser("migrate", help="apply SQLite migrations")
    migrate.add_argument("--db", default="", help="database path (defaults to VALIDATION_DB)")
    migrate.add_argument("--status", action="store_true", help="list applied and pending migrations only")
    migrate.set_defaults(handler=_cmd_migrate)

    sweep = sub.add_parser("sweep-route-cache", help="delete expired route cache rows once")
    sweep.set_defaults(handler=_cmd_sweep)

    validate = sub.add_parser("validate", help="validate a trip JSON document offline")
    validate.add_argument("--trip-file", required=True)
    validate.add_argument("--format", choices=("json", "text"), default="json")
    validate.set_defaults(handler=_cmd_validate)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
