"""CLI subcommands."""

from __future__ import annotations

import json
import sqlite3

from app.cli import main


def _trip_document() -> dict:
    return {
        "id": 3,
        "user_id": 1,
        "title": "Weekend",
        "status": "Planned",
        "start_date": "2026-05-01",
        "end_date": "2026-05-02",
        "activities": [
            {"id": 1, "name": "A", "start_time": "2026-05-01T10:00:00", "end_time": "2026-05-01T11:00:00"},
            {"id": 2, "name": "B", "start_time": "2026-05-01T10:30:00", "end_time": "2026-05-01T11:30:00"},
        ],
        "lodging": [
            {"id": 1, "name": "Inn", "check_in_date": "2026-05-01T15:00:00", "check_out_date": "2026-05-02T10:00:00"}
        ],
        "locations": [{"id": 10, "name": "Town", "latitude": 45.0, "longitude": 6.0}],
        "dismissed_issues": [
            {
                "trip_id": 3,
                "issue_type": "empty_days",
                "issue_key": "empty_days",
                "category": "COMPLETENESS",
            }
        ],
        "location_links": {"1": 10, "2": 10},
    }


def test_validate_prints_json_report(tmp_path, capsys):
    trip_file = tmp_path / "trip.json"
    trip_file.write_text(json.dumps(_trip_document()), encoding="utf-8")

    assert main(["validate", "--trip-file", str(trip_file)]) == 0

    report = json.loads(capsys.readouterr().out)
    ids = [issue["id"] for issues in report["issues_by_category"].values() for issue in issues]
    assert report["trip_id"] == 3
    assert "timeline_conflict:1:2" in ids
    assert "empty_days:empty_days" in ids
    assert report["dismissed_issues"] == 1
    assert report["status"] == "potential_issues"


def test_validate_text_format(tmp_path, capsys):
    trip_file = tmp_path / "trip.json"
    trip_file.write_text(json.dumps(_trip_document()), encoding="utf-8")

    assert main(["validate", "--trip-file", str(trip_file), "--format", "text"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("Trip 3: potential_issues")
    assert "[!] timeline_conflict:1:2" in out
    assert "[x] empty_days:empty_days" in out


def test_validate_rejects_unreadable_file(tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2]", encoding="utf-8")

    assert main(["validate", "--trip-file", str(bad)]) == 2
    assert main(["validate", "--trip-file", str(tmp_path / "missing.json")]) == 2
    assert "cannot read trip file" in capsys.readouterr().err


def test_migrate_creates_schema(tmp_path, capsys):
    db_path = tmp_path / "cli.sqlite3"

    assert main(["migrate", "--db", str(db_path)]) == 0
    assert json.loads(capsys.readouterr().out)["applied"] == ["0001_init", "0002_indexes"]
    assert main(["migrate", "--db", str(db_path)]) == 0
    assert json.loads(capsys.readouterr().out)["applied"] == []

    conn = sqlite3.connect(db_path)
    try:
        row = conn.execute("SELECT name FROM sqlite_master WHERE name='route_cache'").fetchone()
    finally:
        conn.close()
    assert row is not None


def test_sweep_route_cache_once(capsys):
    assert main(["sweep-route-cache"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["status"] == "success"
    assert report["deleted_count"] == 0


def test_migrate_status_lists_without_applying(tmp_path, capsys):
    db_path = tmp_path / "status.sqlite3"

    assert main(["migrate", "--db", str(db_path), "--status"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert [m["state"] for m in report["migrations"]] == ["pending", "pending"]

    assert main(["migrate", "--db", str(db_path)]) == 0
    capsys.readouterr()
    assert main(["migrate", "--db", str(db_path), "--status"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert [m["state"] for m in report["migrations"]] == ["applied", "applied"]
