"""Domain package exports."""

from app.domain.enums import (
    IssueCategory,
    IssueType,
    QuickActionType,
    RouteProfile,
    RouteSource,
    TravelAlertKind,
    TripStatus,
)
from app.domain.exceptions import (
    DomainError,
    InvalidIssueCategoryError,
    TripAccessDeniedError,
    TripNotFoundError,
)
from app.domain.models import (
    Activity,
    Coordinates,
    DismissedValidationIssue,
    JournalEntry,
    Location,
    Lodging,
    QuickAction,
    QuickStatus,
    RouteCacheEntry,
    RouteResult,
    Transportation,
    Trip,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "Activity",
    "Coordinates",
    "DismissedValidationIssue",
    "DomainError",
    "InvalidIssueCategoryError",
    "IssueCategory",
    "IssueType",
    "JournalEntry",
    "Location",
    "Lodging",
    "QuickAction",
    "QuickActionType",
    "QuickStatus",
    "RouteCacheEntry",
    "RouteProfile",
    "RouteResult",
    "RouteSource",
    "Transportation",
    "TravelAlertKind",
    "Trip",
    "TripAccessDeniedError",
    "TripNotFoundError",
    "TripStatus",
    "ValidationIssue",
    "ValidationResult",
]
