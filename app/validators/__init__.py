"""Validator orchestration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Callable, Optional

from app.domain.models import Trip, ValidationIssue
from app.infrastructure.logging import StructuredLogger
from app.validators.completeness_validator import (
    validate_empty_days,
    validate_missing_locations,
    validate_missing_times,
)
from app.validators.lodging_validator import validate_lodging_coverage
from app.validators.schedule_validator import validate_invalid_dates, validate_timeline_conflicts
from app.validators.scope import ValidationScope, resolve_validation_scope
from app.validators.transportation_validator import validate_transportation_presence
from app.validators.travel_time_validator import TravelFeasibilityAnalyzer, validate_travel_time

Check = Callable[[], list[ValidationIssue]]


def _build_checks(
    trip: Trip,
    scope: ValidationScope,
    location_links: Mapping[int, int],
    analyzer: TravelFeasibilityAnalyzer,
) -> list[tuple[str, Check]]:
    checks: list[tuple[str, Check]] = []
    if scope.schedule:
        if not scope.schedule_dates_only:
            checks.append(("timeline_conflicts", lambda: validate_timeline_conflicts(trip)))
        checks.append(("invalid_dates", lambda: validate_invalid_dates(trip)))
        if not scope.schedule_dates_only:
            checks.append(("travel_time", lambda: validate_travel_time(trip, location_links, analyzer)))
    if scope.accommodations:
        checks.append(("lodging_coverage", lambda: validate_lodging_coverage(trip)))
    if scope.transportation:
        checks.append(("transportation_presence", lambda: validate_transportation_presence(trip)))
    if scope.completeness:
        checks.append(("missing_locations", lambda: validate_missing_locations(trip, location_links)))
        checks.append(("missing_times", lambda: validate_missing_times(trip)))
        checks.append(("empty_days", lambda: validate_empty_days(trip)))
    return checks


def run_all_validators(
    trip: Trip,
    scope: ValidationScope,
    *,
    location_links: Mapping[int, int],
    analyzer: TravelFeasibilityAnalyzer,
    logger: Optional[StructuredLogger] = None,
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for name, check in _build_checks(trip, scope, location_links, analyzer):
        if logger:
            logger.check_start(name, trip_id=trip.id)
        try:
            found = check()
        except Exception as exc:
            if logger:
                logger.error(name, str(exc), trip_id=trip.id)
            raise
        if logger:
            logger.check_end(name, issues_count=len(found), trip_id=trip.id)
        issues.extend(found)
    return issues


__all__ = [
    "TravelFeasibilityAnalyzer",
    "ValidationScope",
    "resolve_validation_scope",
    "run_all_validators",
]
