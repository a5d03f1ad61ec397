"""Trip validation use-cases: report, quick status, dismiss and restore."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from app.domain.constants import OVERALL_STATUS_OKAY, OVERALL_STATUS_POTENTIAL_ISSUES
from app.domain.enums import IssueCategory
from app.domain.exceptions import InvalidIssueCategoryError, TripAccessDeniedError, TripNotFoundError
from app.domain.models import (
    DismissedValidationIssue,
    QuickStatus,
    Trip,
    ValidationIssue,
    ValidationResult,
)
from app.infrastructure.logging import StructuredLogger
from app.persistence.repository import DismissalRepository, TripRepository
from app.services.dismissal import IssueDismissalOverlay
from app.validators import TravelFeasibilityAnalyzer, resolve_validation_scope, run_all_validators

_LOGGER = logging.getLogger("trip-health.validation")
_CATEGORY_ORDER = tuple(IssueCategory)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def parse_issue_category(raw: str | IssueCategory) -> IssueCategory:
    if isinstance(raw, IssueCategory):
        return raw
    try:
        return IssueCategory(str(raw).strip().upper())
    except ValueError as exc:
        raise InvalidIssueCategoryError(str(raw)) from exc


def build_validation_result(trip_id: int, issues: list[ValidationIssue]) -> ValidationResult:
    grouped: dict[str, list[ValidationIssue]] = {category.value: [] for category in _CATEGORY_ORDER}
    for issue in issues:
        grouped[issue.category.value].append(issue)
    dismissed = sum(1 for issue in issues if issue.is_dismissed)
    active = len(issues) - dismissed
    return ValidationResult(
        trip_id=trip_id,
        status=OVERALL_STATUS_OKAY if active == 0 else OVERALL_STATUS_POTENTIAL_ISSUES,
        issues_by_category=grouped,
        total_issues=len(issues),
        active_issues=active,
        dismissed_issues=dismissed,
    )


class TripValidationService:
    """Validation, quick status and dismissal management for stored trips."""

    def __init__(
        self,
        trips: TripRepository,
        dismissals: DismissalRepository,
        analyzer: TravelFeasibilityAnalyzer,
        *,
        logger: Optional[StructuredLogger] = None,
        clock=_utcnow,
    ) -> None:
        self._trips = trips
        self._dismissals = dismissals
        self._analyzer = analyzer
        self._logger = logger
        self._clock = clock

    def _load(self, trip_id: int, user_id: int) -> Trip:
        trip = self._trips.load_trip_with_relations(trip_id, user_id)
        if trip is None:
            raise TripNotFoundError(trip_id)
        # The dismissal store is authoritative for stored trips.
        return trip.model_copy(update={"dismissed_issues": self._dismissals.list_dismissals(trip_id)})

    def _ensure_owner(self, trip_id: int, user_id: int) -> None:
        owner = self._trips.trip_owner(trip_id)
        if owner is None:
            raise TripNotFoundError(trip_id)
        if owner != user_id:
            raise TripAccessDeniedError(trip_id, user_id)

    def evaluate(self, trip: Trip) -> ValidationResult:
        """Run the status-selected checks over an already loaded trip."""
        scope = resolve_validation_scope(trip.status)
        if scope.is_empty:
            issues: list[ValidationIssue] = []
        else:
            activity_ids = [activity.id for activity in trip.activities]
            links = self._trips.get_location_links_for_activities(trip.id, activity_ids)
            found = run_all_validators(
                trip,
                scope,
                location_links=links,
                analyzer=self._analyzer,
                logger=self._logger,
            )
            issues = IssueDismissalOverlay.from_records(trip.dismissed_issues).apply(found)

        result = build_validation_result(trip.id, issues)
        if self._logger:
            self._logger.summary(
                trip_id=trip.id,
                trip_status=trip.status,
                status=result.status,
                total_issues=result.total_issues,
                active_issues=result.active_issues,
                dismissed_issues=result.dismissed_issues,
            )
        return result

    def validate_trip(self, trip_id: int, user_id: int) -> ValidationResult:
        return self.evaluate(self._load(trip_id, user_id))

    def get_quick_status(self, trip_id: int, user_id: int) -> QuickStatus:
        result = self.validate_trip(trip_id, user_id)
        return QuickStatus(status=result.status, active_issues=result.active_issues)

    def dismiss_issue(
        self,
        trip_id: int,
        user_id: int,
        issue_type: str,
        issue_key: str,
        category: str | IssueCategory,
    ) -> DismissedValidationIssue:
        parsed = parse_issue_category(category)
        self._ensure_owner(trip_id, user_id)
        record = DismissedValidationIssue(
            trip_id=trip_id,
            issue_type=issue_type,
            issue_key=issue_key,
            category=parsed,
            dismissed_at=self._clock().isoformat(),
        )
        self._dismissals.upsert_dismissal(record)
        _LOGGER.info("dismissed issue trip=%s id=%s", trip_id, record.identity)
        return record

    def restore_issue(self, trip_id: int, user_id: int, issue_type: str, issue_key: str) -> bool:
        self._ensure_owner(trip_id, user_id)
        removed = self._dismissals.delete_dismissal(trip_id, issue_type, issue_key)
        if removed:
            _LOGGER.info("restored issue trip=%s id=%s:%s", trip_id, issue_type, issue_key)
        return removed


__all__ = [
    "TripValidationService",
    "build_validation_result",
    "parse_issue_category",
]
