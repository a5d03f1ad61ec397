"""Service layer public exports."""

from app.services.cache_maintenance import RouteCacheSweeper
from app.services.dismissal import IssueDismissalOverlay
from app.services.validation_service import TripValidationService, build_validation_result, parse_issue_category

__all__ = [
    "IssueDismissalOverlay",
    "RouteCacheSweeper",
    "TripValidationService",
    "build_validation_result",
    "parse_issue_category",
]
