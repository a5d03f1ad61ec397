"""Detector tests: schedule, dates, lodging, transportation, completeness."""

from __future__ import annotations

from datetime import date, datetime

from app.domain.enums import IssueCategory, QuickActionType, TripStatus
from app.domain.models import Activity, Location, Lodging, Transportation, Trip
from app.validators.completeness_validator import (
    validate_empty_days,
    validate_missing_locations,
    validate_missing_times,
)
from app.validators.lodging_validator import validate_lodging_coverage
from app.validators.schedule_validator import validate_invalid_dates, validate_timeline_conflicts
from app.validators.scope import FULL_SCOPE, NO_SCOPE, resolve_validation_scope
from app.validators.transportation_validator import validate_transportation_presence


def _activity(aid: int, start: datetime | None = None, end: datetime | None = None, **kw) -> Activity:
    return Activity(id=aid, name=kw.pop("name", f"act-{aid}"), start_time=start, end_time=end, **kw)


def _trip(**kw) -> Trip:
    kw.setdefault("id", 1)
    kw.setdefault("user_id", 7)
    kw.setdefault("status", TripStatus.PLANNED.value)
    return Trip(**kw)


# ── scope ─────────────────────────────────────────────


def test_scope_per_status():
    dream = resolve_validation_scope("Dream")
    assert dream.schedule and dream.schedule_dates_only
    assert not (dream.accommodations or dream.transportation or dream.completeness)

    planning = resolve_validation_scope(TripStatus.PLANNING)
    assert planning.schedule and not planning.schedule_dates_only
    assert not planning.accommodations

    for status in ("Planned", "In Progress", "Completed"):
        assert resolve_validation_scope(status) == FULL_SCOPE

    assert resolve_validation_scope("Cancelled") == NO_SCOPE
    assert NO_SCOPE.is_empty


def test_unknown_status_fails_open_to_full_scope():
    assert resolve_validation_scope("Archived") == FULL_SCOPE
    assert resolve_validation_scope(None) == FULL_SCOPE


# ── timeline conflicts ────────────────────────────────


def test_overlapping_pair_reports_one_conflict():
    trip = _trip(
        activities=[
            _activity(2, datetime(2026, 5, 1, 10, 30), datetime(2026, 5, 1, 12, 0), name="B"),
            _activity(1, datetime(2026, 5, 1, 9, 0), datetime(2026, 5, 1, 11, 0), name="A"),
        ]
    )
    issues = validate_timeline_conflicts(trip)

    assert len(issues) == 1
    issue = issues[0]
    assert issue.id == "timeline_conflict:1:2"
    assert issue.category is IssueCategory.SCHEDULE
    assert issue.affected_items == [1, 2]
    assert '"A"' in issue.message and '"B"' in issue.message
    assert issue.quick_action.type is QuickActionType.EDIT_ACTIVITY
    assert issue.quick_action.entity_id == 2


def test_touching_activities_do_not_conflict():
    trip = _trip(
        activities=[
            _activity(1, datetime(2026, 5, 1, 9, 0), datetime(2026, 5, 1, 10, 0)),
            _activity(2, datetime(2026, 5, 1, 10, 0), datetime(2026, 5, 1, 11, 0)),
        ]
    )
    assert validate_timeline_conflicts(trip) == []


def test_only_adjacent_pairs_are_compared():
    # 1 spans both 2 and 3, but only (1, 2) and (2, 3) are neighbours.
    trip = _trip(
        activities=[
            _activity(1, datetime(2026, 5, 1, 9, 0), datetime(2026, 5, 1, 18, 0)),
            _activity(2, datetime(2026, 5, 1, 10, 0), datetime(2026, 5, 1, 10, 30)),
            _activity(3, datetime(2026, 5, 1, 11, 0), datetime(2026, 5, 1, 12, 0)),
        ]
    )
    keys = [issue.key for issue in validate_timeline_conflicts(trip)]
    assert keys == ["1:2"]


def test_all_day_and_untimed_activities_are_ignored_for_conflicts():
    trip = _trip(
        activities=[
            _activity(1, datetime(2026, 5, 1, 0, 0), datetime(2026, 5, 1, 23, 59), all_day=True),
            _activity(2, datetime(2026, 5, 1, 10, 0), datetime(2026, 5, 1, 11, 0)),
            _activity(3, datetime(2026, 5, 1, 10, 30)),
        ]
    )
    assert validate_timeline_conflicts(trip) == []


# ── invalid dates ─────────────────────────────────────


def test_activity_outside_trip_dates_is_flagged():
    trip = _trip(
        start_date=date(2026, 5, 1),
        end_date=date(2026, 5, 3),
        activities=[
            _activity(1, datetime(2026, 4, 30, 9, 0)),
            _activity(2, datetime(2026, 5, 1, 0, 0)),
            _activity(3, datetime(2026, 5, 3, 23, 0)),
            _activity(4, datetime(2026, 5, 4, 8, 0)),
            _activity(5),
        ],
    )
    keys = [issue.key for issue in validate_invalid_dates(trip)]
    assert keys == ["activity:1", "activity:4"]


def test_invalid_dates_needs_both_trip_dates():
    trip = _trip(start_date=date(2026, 5, 1), activities=[_activity(1, datetime(2020, 1, 1, 9, 0))])
    assert validate_invalid_dates(trip) == []


# ── lodging ───────────────────────────────────────────


def test_single_missing_night_is_keyed_by_date():
    trip = _trip(
        start_date=date(2026, 5, 1),
        end_date=date(2026, 5, 4),
        lodging=[
            Lodging(id=1, check_in_date=datetime(2026, 5, 1, 15, 0), check_out_date=datetime(2026, 5, 2, 11, 0)),
            Lodging(id=2, check_in_date=datetime(2026, 5, 3, 15, 0), check_out_date=datetime(2026, 5, 4, 11, 0)),
        ],
    )
    issues = validate_lodging_coverage(trip)

    assert [issue.id for issue in issues] == ["missing_lodging:2026-05-02"]
    assert issues[0].category is IssueCategory.ACCOMMODATIONS
    assert issues[0].quick_action.type is QuickActionType.ADD_LODGING


def test_last_trip_day_needs_no_lodging():
    trip = _trip(
        start_date=date(2026, 5, 1),
        end_date=date(2026, 5, 3),
        lodging=[
            Lodging(id=1, check_in_date=datetime(2026, 5, 1, 15, 0), check_out_date=datetime(2026, 5, 3, 11, 0)),
        ],
    )
    assert validate_lodging_coverage(trip) == []


def test_no_lodging_reports_every_night():
    trip = _trip(start_date=date(2026, 5, 1), end_date=date(2026, 5, 3))
    assert [issue.key for issue in validate_lodging_coverage(trip)] == ["2026-05-01", "2026-05-02"]


# ── transportation ────────────────────────────────────


def test_multiple_locations_without_transportation():
    trip = _trip(locations=[Location(id=1, name="Lyon"), Location(id=2, name="Nice")])
    issues = validate_transportation_presence(trip)

    assert [issue.id for issue in issues] == ["missing_transportation:no_transportation"]
    assert issues[0].quick_action.type is QuickActionType.ADD_TRANSPORTATION


def test_transportation_not_needed_for_single_location_or_when_present():
    assert validate_transportation_presence(_trip(locations=[Location(id=1)])) == []
    trip = _trip(
        locations=[Location(id=1), Location(id=2)],
        transportation=[Transportation(id=1, type="train")],
    )
    assert validate_transportation_presence(trip) == []


# ── completeness ──────────────────────────────────────


def test_missing_locations_lists_unlinked_activities():
    trip = _trip(activities=[_activity(3), _activity(1), _activity(2)])
    issues = validate_missing_locations(trip, {2: 10})

    assert len(issues) == 1
    assert issues[0].id == "missing_location:activities_without_location"
    assert issues[0].affected_items == [1, 3]
    assert issues[0].category is IssueCategory.COMPLETENESS


def test_missing_times_skips_all_day_activities():
    trip = _trip(
        activities=[
            _activity(1),
            _activity(2, all_day=True),
            _activity(3, datetime(2026, 5, 1, 9, 0)),
        ]
    )
    issues = validate_missing_times(trip)
    assert [issue.id for issue in issues] == ["missing_time:activities_without_time"]
    assert issues[0].affected_items == [1]


def test_empty_days_includes_last_day():
    trip = _trip(
        start_date=date(2026, 5, 1),
        end_date=date(2026, 5, 3),
        activities=[_activity(1, datetime(2026, 5, 2, 9, 0))],
    )
    issues = validate_empty_days(trip)

    assert len(issues) == 1
    assert issues[0].id == "empty_days:empty_days"
    assert issues[0].affected_items == ["2026-05-01", "2026-05-03"]


def test_completeness_quiet_when_trip_is_complete():
    trip = _trip(
        start_date=date(2026, 5, 1),
        end_date=date(2026, 5, 1),
        activities=[_activity(1, datetime(2026, 5, 1, 9, 0), datetime(2026, 5, 1, 10, 0))],
    )
    assert validate_missing_locations(trip, {1: 1}) == []
    assert validate_missing_times(trip) == []
    assert validate_empty_days(trip) == []


def test_lodging_short_by_one_night_reports_final_night():
    trip = _trip(
        start_date=date(2026, 5, 1),
        end_date=date(2026, 5, 5),
        lodging=[
            Lodging(id=1, check_in_date=datetime(2026, 5, 1, 15, 0), check_out_date=datetime(2026, 5, 4, 10, 0)),
        ],
    )
    assert [issue.key for issue in validate_lodging_coverage(trip)] == ["2026-05-04"]


def test_half_hour_overlap_scenario():
    a = _activity(11, datetime(2026, 6, 2, 10, 0), datetime(2026, 6, 2, 11, 0), name="A")
    b = _activity(4, datetime(2026, 6, 2, 10, 30), datetime(2026, 6, 2, 11, 30), name="B")
    issues = validate_timeline_conflicts(_trip(activities=[a, b]))

    assert len(issues) == 1
    assert issues[0].type == "timeline_conflict"
    assert issues[0].key == "4:11"
    assert issues[0].affected_items == [a.id, b.id]


def test_mixed_naive_and_offset_timestamps_are_compared_as_utc():
    a = Activity(id=1, name="A", start_time="2026-05-01T10:00:00Z", end_time="2026-05-01T11:00:00Z")
    b = Activity(id=2, name="B", start_time="2026-05-01T10:30:00", end_time="2026-05-01T11:30:00")
    trip = _trip(start_date=date(2026, 5, 1), end_date=date(2026, 5, 2), activities=[b, a])

    issues = validate_timeline_conflicts(trip)

    assert [issue.id for issue in issues] == ["timeline_conflict:1:2"]
    assert issues[0].affected_items == [1, 2]
    assert validate_invalid_dates(trip) == []
    assert b.start_time.utcoffset().total_seconds() == 0


def test_lodging_with_mixed_timestamp_forms_covers_nights():
    trip = _trip(
        start_date=date(2026, 5, 1),
        end_date=date(2026, 5, 3),
        lodging=[
            Lodging(id=1, check_in_date="2026-05-01T15:00:00Z", check_out_date="2026-05-02T10:00:00"),
            Lodging(id=2, check_in_date="2026-05-02T15:00:00", check_out_date="2026-05-03T10:00:00+00:00"),
        ],
    )
    assert validate_lodging_coverage(trip) == []
