"""Lodging coverage: every night of the trip should have somewhere to sleep."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterator

from app.domain.enums import IssueCategory, IssueType, QuickActionType
from app.domain.models import QuickAction, Trip, ValidationIssue


def iter_days(start: dt.date, stop: dt.date) -> Iterator[dt.date]:
    """Calendar days in the half-open range [start, stop)."""
    current = start
    while current < stop:
        yield current
        current += dt.timedelta(days=1)


def covered_nights(trip: Trip) -> set[dt.date]:
    nights: set[dt.date] = set()
    for stay in trip.lodging:
        nights.update(iter_days(stay.check_in_date.date(), stay.check_out_date.date()))
    return nights


def validate_lodging_coverage(trip: Trip) -> list[ValidationIssue]:
    # One issue per uncovered night so a single expected gap (a day trip,
    # a night train) can be dismissed without hiding new gaps.
    issues: list[ValidationIssue] = []
    if not trip.has_date_range:
        return issues

    covered = covered_nights(trip)
    for night in iter_days(trip.start_date, trip.end_date):
        if night in covered:
            continue
        iso = night.isoformat()
        issues.append(
            ValidationIssue(
                category=IssueCategory.ACCOMMODATIONS,
                type=IssueType.MISSING_LODGING.value,
                key=iso,
                message=f"No lodging booked for the night of {iso}",
                affected_items=[iso],
                suggestion="Add lodging for this night or dismiss if it is intentional",
                quick_action=QuickAction(type=QuickActionType.ADD_LODGING, label="Add lodging"),
            )
        )
    return issues
