"""Transportation presence: a multi-location trip needs some way to move."""

from __future__ import annotations

from app.domain.constants import NO_TRANSPORTATION_KEY
from app.domain.enums import IssueCategory, IssueType, QuickActionType
from app.domain.models import QuickAction, Trip, ValidationIssue


def validate_transportation_presence(trip: Trip) -> list[ValidationIssue]:
    distinct_locations = {location.id for location in trip.locations}
    if len(distinct_locations) <= 1 or trip.transportation:
        return []
    return [
        ValidationIssue(
            category=IssueCategory.TRANSPORTATION,
            type=IssueType.MISSING_TRANSPORTATION.value,
            key=NO_TRANSPORTATION_KEY,
            message="Multiple locations but no transportation recorded",
            suggestion="Add transportation details between locations",
            quick_action=QuickAction(type=QuickActionType.ADD_TRANSPORTATION, label="Add transportation"),
        )
    ]
