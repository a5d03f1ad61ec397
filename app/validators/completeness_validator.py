"""Completeness validators: aggregate signals about missing planning data."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping

from app.domain.constants import (
    ACTIVITIES_WITHOUT_LOCATION_KEY,
    ACTIVITIES_WITHOUT_TIME_KEY,
    EMPTY_DAYS_KEY,
)
from app.domain.enums import IssueCategory, IssueType, QuickActionType
from app.domain.models import QuickAction, Trip, ValidationIssue
from app.validators.lodging_validator import iter_days


def validate_missing_locations(trip: Trip, location_links: Mapping[int, int]) -> list[ValidationIssue]:
    missing = sorted(a.id for a in trip.activities if a.id not in location_links)
    if not missing:
        return []
    return [
        ValidationIssue(
            category=IssueCategory.COMPLETENESS,
            type=IssueType.MISSING_LOCATION.value,
            key=ACTIVITIES_WITHOUT_LOCATION_KEY,
            message=f"{len(missing)} activities without location",
            affected_items=missing,
            suggestion="Add location information to activities",
            quick_action=QuickAction(
                type=QuickActionType.ADD_LOCATION,
                label="Link a location",
                entity_type="activity",
                entity_id=missing[0],
            ),
        )
    ]


def validate_missing_times(trip: Trip) -> list[ValidationIssue]:
    missing = sorted(a.id for a in trip.activities if a.start_time is None and not a.all_day)
    if not missing:
        return []
    return [
        ValidationIssue(
            category=IssueCategory.COMPLETENESS,
            type=IssueType.MISSING_TIME.value,
            key=ACTIVITIES_WITHOUT_TIME_KEY,
            message=f"{len(missing)} activities without time",
            affected_items=missing,
            suggestion="Add start time or mark as all-day",
            quick_action=QuickAction(
                type=QuickActionType.EDIT_ACTIVITY,
                label="Schedule activity",
                entity_type="activity",
                entity_id=missing[0],
            ),
        )
    ]


def validate_empty_days(trip: Trip) -> list[ValidationIssue]:
    if not trip.has_date_range:
        return []

    busy = {a.start_time.date() for a in trip.activities if a.start_time is not None}
    # Inclusive of the last day, unlike lodging nights.
    empty = [
        day.isoformat()
        for day in iter_days(trip.start_date, trip.end_date + dt.timedelta(days=1))
        if day not in busy
    ]
    if not empty:
        return []
    return [
        ValidationIssue(
            category=IssueCategory.COMPLETENESS,
            type=IssueType.EMPTY_DAYS.value,
            key=EMPTY_DAYS_KEY,
            message=f"{len(empty)} day(s) without planned activities",
            affected_items=empty,
            suggestion="Consider adding activities for free days",
        )
    ]
