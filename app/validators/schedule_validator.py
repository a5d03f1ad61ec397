"""Schedule validators: overlapping activities and activities outside the trip."""

from __future__ import annotations

from app.domain.enums import IssueCategory, IssueType, QuickActionType
from app.domain.models import Activity, QuickAction, Trip, ValidationIssue


def pair_key(first_id: int, second_id: int) -> str:
    """Order-independent key for an issue about two activities."""
    low, high = sorted((first_id, second_id))
    return f"{low}:{high}"


def timed_activities(trip: Trip) -> list[Activity]:
    """Non-all-day activities with both ends set, in start order (ties by id)."""
    timed = [a for a in trip.activities if a.is_timed and not a.all_day]
    return sorted(timed, key=lambda a: (a.start_time, a.id))


def validate_timeline_conflicts(trip: Trip) -> list[ValidationIssue]:
    # Only neighbours in start order are compared, so an activity that spans
    # several later ones is reported against its immediate successor only.
    issues: list[ValidationIssue] = []
    ordered = timed_activities(trip)
    for current, nxt in zip(ordered, ordered[1:]):
        if current.end_time > nxt.start_time:
            issues.append(
                ValidationIssue(
                    category=IssueCategory.SCHEDULE,
                    type=IssueType.TIMELINE_CONFLICT.value,
                    key=pair_key(current.id, nxt.id),
                    message=f'Activities "{current.name}" and "{nxt.name}" overlap',
                    affected_items=[current.id, nxt.id],
                    suggestion="Adjust activity times to prevent overlap",
                    quick_action=QuickAction(
                        type=QuickActionType.EDIT_ACTIVITY,
                        label="Edit activity",
                        entity_type="activity",
                        entity_id=nxt.id,
                    ),
                )
            )
    return issues


def validate_invalid_dates(trip: Trip) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if not trip.has_date_range:
        return issues

    for activity in trip.activities:
        if activity.start_time is None:
            continue
        day = activity.start_time.date()
        if day < trip.start_date or day > trip.end_date:
            issues.append(
                ValidationIssue(
                    category=IssueCategory.SCHEDULE,
                    type=IssueType.INVALID_DATE.value,
                    key=f"activity:{activity.id}",
                    message=f'Activity "{activity.name}" is outside trip dates',
                    affected_items=[activity.id],
                    suggestion="Move activity within trip dates or adjust trip dates",
                    quick_action=QuickAction(
                        type=QuickActionType.EDIT_ACTIVITY,
                        label="Edit activity",
                        entity_type="activity",
                        entity_id=activity.id,
                    ),
                )
            )
    return issues
